"""Retrieval of logs from a target: resolve window, fetch, then render or diagnose."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import TextIO

import httpx
from rich.console import Console

from vespalogs.config import VespaLogsConfig
from vespalogs.core.compat import check_client_version, explain
from vespalogs.core.parser import parse_records
from vespalogs.core.period import resolve_period
from vespalogs.core.probes import probe_for
from vespalogs.core.renderer import render
from vespalogs.errors import FetchError, LogRetrievalError
from vespalogs.models.enums import FetchState, TargetType
from vespalogs.models.logs import TimeWindow
from vespalogs.models.version import Version

logger = logging.getLogger("vespalogs.fetcher")


def logs_url(config: VespaLogsConfig) -> str:
    """Build the logs endpoint URL for the configured target."""
    target = config.target
    tenant, application, instance = target.application_parts()

    if target.target_type is TargetType.CLOUD:
        environment, region = target.zone_parts()
        return (
            f"{target.api_url.rstrip('/')}/application/v4"
            f"/tenant/{tenant}/application/{application}/instance/{instance}"
            f"/environment/{environment}/region/{region}/logs"
        )

    return (
        f"{target.local_url.rstrip('/')}/application/v2"
        f"/tenant/{tenant}/application/{application}"
        f"/environment/prod/region/default/instance/{instance}/logs"
    )


class LogFetcher:
    """Runs one log query against a target and renders the result.

    States move ResolvingWindow -> Fetching -> Rendering | Diagnosing -> Done.
    Exactly one of rendered output or a raised error is produced per run.
    """

    def __init__(
        self,
        config: VespaLogsConfig,
        client: httpx.Client,
        client_version: Version,
        out: TextIO,
        console: Console,
        tz: tzinfo | None = None,
        dequote_newlines: bool = False,
    ) -> None:
        self.config = config
        self.client = client
        self.client_version = client_version
        self.out = out
        self.console = console
        self.tz = tz
        self.dequote_newlines = dequote_newlines
        self.state = FetchState.RESOLVING_WINDOW

    def run(
        self,
        from_arg: str | None = None,
        to_arg: str | None = None,
        relative: str | None = None,
        now: datetime | None = None,
    ) -> int:
        """Fetch and render logs. Returns the number of records written."""
        self.state = FetchState.RESOLVING_WINDOW
        window = resolve_period(
            from_arg,
            to_arg,
            relative,
            now=now,
            default_lookback=self.config.query.default_lookback,
        )

        target_type = self.config.target.target_type
        url = logs_url(self.config)

        if target_type is TargetType.CLOUD:
            check_client_version(
                self.client,
                self.config.target.api_url,
                self.client_version,
                self.console,
            )

        self.state = FetchState.FETCHING
        try:
            body = self.fetch(url, window)
        except FetchError as e:
            self.state = FetchState.DIAGNOSING
            probe = probe_for(self.config, self.client, self.client_version)
            diagnosis = explain(e, probe)
            self.state = FetchState.DONE
            raise LogRetrievalError(diagnosis) from e

        self.state = FetchState.RENDERING
        records = parse_records(body)
        count = render(
            records, self.out, tz=self.tz, dequote_newlines=self.dequote_newlines
        )
        self.state = FetchState.DONE
        logger.debug("Rendered %d log record(s)", count)
        return count

    def fetch(self, url: str, window: TimeWindow) -> bytes:
        """Issue the logs request. Raises FetchError on any non-200 outcome."""
        params = window.query_params()
        logger.debug("Fetching logs from %s with %s", url, params)
        try:
            response = self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise FetchError(f"failed to read logs: {e}") from e

        if response.status_code != 200:
            raise FetchError(
                f"failed to read logs: got status {response.status_code}",
                status_code=response.status_code,
            )
        return response.content
