"""Version compatibility checks between this client and the platform."""

from __future__ import annotations

import logging

import httpx
from rich.console import Console
from rich.markup import escape

from vespalogs.core.probes import VersionProbe, fetch_min_client_version
from vespalogs.errors import ProbeError
from vespalogs.models.logs import Diagnosis
from vespalogs.models.version import Version

logger = logging.getLogger("vespalogs.compat")

PLATFORM_HINT = "This command requires a newer version of the Vespa platform"


def explain(failure: Exception, probe: VersionProbe) -> Diagnosis:
    """Diagnose a failed request, adding a hint when versions are incompatible.

    If the probe itself fails the original failure is returned unchanged.
    """
    try:
        requirement = probe.probe_version()
    except ProbeError as e:
        logger.debug("Version probe failed, reporting original error: %s", e)
        return Diagnosis(error=str(failure))

    if requirement.compatible:
        return Diagnosis(error=str(failure))

    return Diagnosis(
        error=str(failure),
        hint=(
            f"{PLATFORM_HINT}: platform version is older than required version: "
            f"{requirement.observed} < {requirement.required}"
        ),
    )


def check_client_version(
    client: httpx.Client,
    api_url: str,
    client_version: Version,
    console: Console,
) -> bool:
    """Warn on ``console`` when this client is older than the target supports.

    Advisory only: returns False after printing a warning, True otherwise,
    and never raises.
    """
    if client_version.is_dev:
        return True

    try:
        min_version = fetch_min_client_version(client, api_url)
    except ProbeError as e:
        logger.debug("Skipping client version check: %s", e)
        return True

    if client_version >= min_version:
        return True

    console.print(
        "[yellow]Warning:[/yellow] "
        + escape(
            f"client version {client_version} is less than the minimum "
            f"supported version: {min_version}"
        ),
        soft_wrap=True,
        highlight=False,
    )
    console.print("Hint: This version of CLI may not work as expected", highlight=False)
    console.print(
        "Hint: Try 'vespalogs version' to check for a new version", highlight=False
    )
    return False
