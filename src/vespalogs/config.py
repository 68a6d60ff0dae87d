"""Layered configuration: .vespalogs/config.toml -> VESPALOGS_* env vars -> defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib  # 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from vespalogs.errors import ConfigError
from vespalogs.models.enums import TargetType


@dataclass(frozen=True, slots=True)
class TargetConfig:
    """Where logs are read from."""

    target: str = TargetType.LOCAL.value
    local_url: str = "http://127.0.0.1:19071"
    api_url: str = "https://api-ctl.vespa-cloud.com:4443"
    application: str = "default.default.default"  # tenant.application.instance
    zone: str = "dev.aws-us-east-1c"  # environment.region

    @property
    def target_type(self) -> TargetType:
        try:
            return TargetType(self.target)
        except ValueError:
            raise ConfigError(
                f"invalid target: {self.target} (must be 'local' or 'cloud')"
            ) from None

    def application_parts(self) -> tuple[str, str, str]:
        """Split the application id into (tenant, application, instance)."""
        parts = self.application.split(".")
        if len(parts) != 3 or not all(parts):
            raise ConfigError(
                f"invalid application: {self.application} "
                "(must be <tenant>.<application>.<instance>)"
            )
        return parts[0], parts[1], parts[2]

    def zone_parts(self) -> tuple[str, str]:
        """Split the zone into (environment, region)."""
        environment, sep, region = self.zone.partition(".")
        if not sep or not environment or not region:
            raise ConfigError(
                f"invalid zone: {self.zone} (must be <environment>.<region>)"
            )
        return environment, region


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Log query settings."""

    default_lookback: str = "1h"
    timeout: float = 10.0


@dataclass(frozen=True, slots=True)
class CompatConfig:
    """Version compatibility settings."""

    # First platform release whose config server serves logs locally.
    min_platform_version: str = "8.359.0"


@dataclass(frozen=True, slots=True)
class VespaLogsConfig:
    """Top-level configuration container."""

    project_path: Path = field(default_factory=Path.cwd)
    target: TargetConfig = field(default_factory=TargetConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    compat: CompatConfig = field(default_factory=CompatConfig)

    @property
    def config_dir(self) -> Path:
        return self.project_path / ".vespalogs"

    @classmethod
    def load(cls, project_path: Path | None = None) -> VespaLogsConfig:
        """Load config with layering: TOML file -> env vars -> defaults."""
        project = Path(project_path) if project_path else Path.cwd()
        toml_path = project / ".vespalogs" / "config.toml"

        toml_data: dict = {}
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                try:
                    toml_data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"invalid config file {toml_path}: {e}") from e

        target_data = toml_data.get("target", {})
        query_data = toml_data.get("query", {})
        compat_data = toml_data.get("compat", {})

        _target_defaults = TargetConfig()
        _query_defaults = QueryConfig()
        _compat_defaults = CompatConfig()

        target = TargetConfig(
            target=os.environ.get(
                "VESPALOGS_TARGET",
                target_data.get("target", _target_defaults.target),
            ),
            local_url=os.environ.get(
                "VESPALOGS_LOCAL_URL",
                target_data.get("local_url", _target_defaults.local_url),
            ),
            api_url=os.environ.get(
                "VESPALOGS_API_URL",
                target_data.get("api_url", _target_defaults.api_url),
            ),
            application=os.environ.get(
                "VESPALOGS_APPLICATION",
                target_data.get("application", _target_defaults.application),
            ),
            zone=os.environ.get(
                "VESPALOGS_ZONE",
                target_data.get("zone", _target_defaults.zone),
            ),
        )

        try:
            timeout = float(
                os.environ.get(
                    "VESPALOGS_TIMEOUT",
                    query_data.get("timeout", _query_defaults.timeout),
                )
            )
        except ValueError as e:
            raise ConfigError(f"invalid timeout: {e}") from e

        query = QueryConfig(
            default_lookback=os.environ.get(
                "VESPALOGS_DEFAULT_LOOKBACK",
                query_data.get("default_lookback", _query_defaults.default_lookback),
            ),
            timeout=timeout,
        )

        compat = CompatConfig(
            min_platform_version=os.environ.get(
                "VESPALOGS_MIN_PLATFORM_VERSION",
                compat_data.get(
                    "min_platform_version", _compat_defaults.min_platform_version
                ),
            ),
        )

        return cls(
            project_path=project,
            target=target,
            query=query,
            compat=compat,
        )
