"""Target-specific discovery of platform versions.

Cloud targets publish a compatibility descriptor naming the minimum client
version they support. Local targets report the version their config server
runs, which is checked against the minimum platform version a command needs.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from vespalogs.config import VespaLogsConfig
from vespalogs.errors import ProbeError
from vespalogs.models.enums import TargetType
from vespalogs.models.version import Version, VersionRequirement

logger = logging.getLogger("vespalogs.probes")


class VersionProbe(Protocol):
    """Anything that can tell which version is observed and which is required."""

    def probe_version(self) -> VersionRequirement: ...


def _get_version_field(client: httpx.Client, url: str, field: str) -> Version:
    """GET ``url`` and parse the version string stored under ``field``."""
    logger.debug("Probing %s", url)
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise ProbeError(f"could not reach {url}: {e}") from e

    if response.status_code != 200:
        raise ProbeError(f"{url} returned status {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise ProbeError(f"{url} returned invalid JSON: {e}") from e

    value = data.get(field) if isinstance(data, dict) else None
    if not isinstance(value, str):
        raise ProbeError(f"{url} response has no {field!r} field")

    try:
        return Version.parse(value)
    except ValueError as e:
        raise ProbeError(f"{url}: {e}") from e


def fetch_min_client_version(client: httpx.Client, api_url: str) -> Version:
    """Read the minimum supported client version from a cloud target."""
    return _get_version_field(client, f"{api_url.rstrip('/')}/cli/v1/", "minVersion")


class CloudVersionProbe:
    """Checks this client against the minimum version a cloud target accepts."""

    def __init__(self, client: httpx.Client, api_url: str, client_version: Version) -> None:
        self.client = client
        self.api_url = api_url
        self.client_version = client_version

    def probe_version(self) -> VersionRequirement:
        if self.client_version.is_dev:
            raise ProbeError("client is a development build with no release version")
        return VersionRequirement(
            observed=self.client_version,
            required=fetch_min_client_version(self.client, self.api_url),
        )


class LocalVersionProbe:
    """Checks a local node's running version against a required minimum."""

    def __init__(
        self, client: httpx.Client, base_url: str, min_platform_version: str
    ) -> None:
        self.client = client
        self.base_url = base_url
        self.min_platform_version = min_platform_version

    def probe_version(self) -> VersionRequirement:
        node_version = _get_version_field(
            self.client, f"{self.base_url.rstrip('/')}/state/v1/version", "version"
        )
        try:
            required = Version.parse(self.min_platform_version)
        except ValueError as e:
            raise ProbeError(f"invalid min_platform_version: {e}") from e
        return VersionRequirement(observed=node_version, required=required)


def probe_for(
    config: VespaLogsConfig, client: httpx.Client, client_version: Version
) -> VersionProbe:
    """Select the probe matching the configured target."""
    if config.target.target_type is TargetType.CLOUD:
        return CloudVersionProbe(client, config.target.api_url, client_version)

    return LocalVersionProbe(
        client, config.target.local_url, config.compat.min_platform_version
    )
