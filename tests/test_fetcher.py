"""Tests for end-to-end log retrieval against a fake target."""

import io
from datetime import datetime, timezone

import httpx
import pytest
from rich.console import Console

from vespalogs.config import CompatConfig, TargetConfig, VespaLogsConfig
from vespalogs.core.fetcher import LogFetcher, logs_url
from vespalogs.errors import ConfigError, InvalidPeriodError, LogRetrievalError
from vespalogs.models.enums import FetchState
from vespalogs.models.version import Version

CLOUD_LOGS = (
    "/application/v4/tenant/t1/application/a1/instance/i1"
    "/environment/dev/region/aws-us-east-1c/logs"
)
LOCAL_LOGS = (
    "/application/v2/tenant/default/application/default"
    "/environment/prod/region/default/instance/default/logs"
)
BODY = (
    "1632738690.905535\thost1a\t806/53\tlogserver-container\tComponent\tinfo\tMessage text"
)
EXPECTED = "[2021-09-27 10:31:30.905535] host1a info    logserver-container Component\tMessage text\n"


def _cloud_config() -> VespaLogsConfig:
    return VespaLogsConfig(
        target=TargetConfig(
            target="cloud",
            api_url="https://api.example.com:4443",
            application="t1.a1.i1",
            zone="dev.aws-us-east-1c",
        )
    )


def _fetcher(config, fake_target, client_version="8.400.0"):
    out, err = io.StringIO(), io.StringIO()
    fetcher = LogFetcher(
        config,
        fake_target.client(),
        client_version=Version.parse(client_version),
        out=out,
        console=Console(file=err),
        tz=timezone.utc,
    )
    return fetcher, out, err


class TestLogsUrl:
    def test_local(self):
        assert logs_url(VespaLogsConfig()) == "http://127.0.0.1:19071" + LOCAL_LOGS

    def test_cloud(self):
        assert logs_url(_cloud_config()) == "https://api.example.com:4443" + CLOUD_LOGS

    def test_bad_application(self):
        config = VespaLogsConfig(target=TargetConfig(application="t1.a1"))
        with pytest.raises(ConfigError, match="invalid application"):
            logs_url(config)

    def test_bad_zone(self):
        config = VespaLogsConfig(
            target=TargetConfig(target="cloud", application="t1.a1.i1", zone="dev")
        )
        with pytest.raises(ConfigError, match="invalid zone"):
            logs_url(config)

    def test_bad_target(self):
        config = VespaLogsConfig(target=TargetConfig(target="moon"))
        with pytest.raises(ConfigError, match="invalid target"):
            logs_url(config)


class TestCloud:
    def test_render(self, fake_target):
        fake_target.add("/cli/v1/", body={"minVersion": "8.0.0"})
        fake_target.add(CLOUD_LOGS, body=BODY)
        fetcher, out, err = _fetcher(_cloud_config(), fake_target)

        count = fetcher.run("2021-09-27T10:00:00Z", "2021-09-27T11:00:00Z")

        assert count == 1
        assert out.getvalue() == EXPECTED
        assert err.getvalue() == ""
        assert fetcher.state is FetchState.DONE
        logs_request = fake_target.requests[-1]
        assert logs_request.url.params["from"] == "2021-09-27T10:00:00Z"
        assert logs_request.url.params["to"] == "2021-09-27T11:00:00Z"

    def test_outdated_client_warns_and_completes(self, fake_target):
        fake_target.add("/cli/v1/", body={"minVersion": "8.0.0"})
        fake_target.add(CLOUD_LOGS, body="")
        fetcher, out, err = _fetcher(_cloud_config(), fake_target, client_version="7.0.0")

        assert fetcher.run() == 0
        assert (
            "Warning: client version 7.0.0 is less than the minimum supported version: 8.0.0"
            in err.getvalue()
        )
        assert fake_target.paths() == ["/cli/v1/", CLOUD_LOGS]

    def test_invalid_period_attempts_no_request(self, fake_target):
        fetcher, out, err = _fetcher(_cloud_config(), fake_target)
        with pytest.raises(InvalidPeriodError, match="relative value: 1h"):
            fetcher.run("2021-09-27T13:12:49Z", "2021-09-27T13:15:00", "1h")
        assert fake_target.requests == []
        assert out.getvalue() == ""
        assert fetcher.state is FetchState.RESOLVING_WINDOW

    def test_failure_with_outdated_client_hints(self, fake_target):
        fake_target.add("/cli/v1/", body={"minVersion": "8.0.0"})
        fake_target.add(CLOUD_LOGS, status=400, body="bad request")
        fetcher, out, err = _fetcher(_cloud_config(), fake_target, client_version="7.0.0")

        with pytest.raises(LogRetrievalError) as exc:
            fetcher.run("2021-09-27T10:00:00Z", "2021-09-27T11:00:00Z")
        assert "platform version is older than required version: 7.0.0 < 8.0.0" in str(exc.value)


    def test_dev_build_failure_has_no_hint(self, fake_target):
        fake_target.add("/cli/v1/", body={"minVersion": "8.0.0"})
        fake_target.add(CLOUD_LOGS, status=404, body="not found")
        fetcher, out, err = _fetcher(_cloud_config(), fake_target, client_version="0.0.0")

        with pytest.raises(LogRetrievalError) as exc:
            fetcher.run()
        assert exc.value.diagnosis.hint is None
        assert str(exc.value) == "could not retrieve logs: failed to read logs: got status 404"
        assert err.getvalue() == ""

    def test_window_error_reported_before_config_error(self, fake_target):
        config = VespaLogsConfig(
            target=TargetConfig(target="cloud", application="broken", zone="dev")
        )
        fetcher, out, err = _fetcher(config, fake_target)
        with pytest.raises(InvalidPeriodError, match="cannot combine"):
            fetcher.run("2021-09-27T10:00:00Z", None, "1h")
        assert fake_target.requests == []


class TestLocal:
    def test_render(self, fake_target):
        fake_target.add(LOCAL_LOGS, body=BODY.replace("host1a", "localhost"))
        fetcher, out, err = _fetcher(VespaLogsConfig(), fake_target)

        fetcher.run("2021-09-27T10:00:00Z", "2021-09-27T11:00:00Z")

        assert out.getvalue() == EXPECTED.replace("host1a", "localhost")
        assert fake_target.paths() == [LOCAL_LOGS]

    def test_relative_window(self, fake_target):
        fake_target.add(LOCAL_LOGS, body=BODY)
        fetcher, out, err = _fetcher(VespaLogsConfig(), fake_target)
        now = datetime(2021, 9, 27, 11, 0, 0, tzinfo=timezone.utc)

        fetcher.run(relative="30m", now=now)

        params = fake_target.requests[0].url.params
        assert params["from"] == "2021-09-27T10:30:00Z"
        assert params["to"] == "2021-09-27T11:00:00Z"

    def test_out_of_range_timestamp_skipped(self, fake_target):
        fake_target.add(LOCAL_LOGS, body="1e20\th\t1/1\ts\tc\tinfo\tcorrupt\n" + BODY)
        fetcher, out, err = _fetcher(VespaLogsConfig(), fake_target)
        assert fetcher.run() == 1
        assert out.getvalue() == EXPECTED

    def test_malformed_lines_skipped(self, fake_target):
        fake_target.add(LOCAL_LOGS, body="corrupt\n" + BODY + "\n\nalso\tcorrupt\n")
        fetcher, out, err = _fetcher(VespaLogsConfig(), fake_target)
        assert fetcher.run() == 1
        assert out.getvalue() == EXPECTED

    def test_incompatible_platform(self, fake_target):
        fake_target.add(LOCAL_LOGS, status=404, body="not found")
        fake_target.add("/state/v1/version", body={"version": "8.358.0"})
        fetcher, out, err = _fetcher(VespaLogsConfig(), fake_target)

        with pytest.raises(LogRetrievalError) as exc:
            fetcher.run("2021-09-27T10:00:00Z", "2021-09-27T11:00:00Z")

        assert str(exc.value) == (
            "could not retrieve logs: failed to read logs: got status 404\n"
            "Hint: This command requires a newer version of the Vespa platform: "
            "platform version is older than required version: 8.358.0 < 8.359.0"
        )
        assert exc.value.diagnosis.error == "failed to read logs: got status 404"
        assert out.getvalue() == ""
        assert fetcher.state is FetchState.DONE

    def test_compatible_platform_no_hint(self, fake_target):
        fake_target.add(LOCAL_LOGS, status=500, body="boom")
        fake_target.add("/state/v1/version", body={"version": "8.400.0"})
        fetcher, out, err = _fetcher(VespaLogsConfig(), fake_target)

        with pytest.raises(LogRetrievalError) as exc:
            fetcher.run()
        assert str(exc.value) == "could not retrieve logs: failed to read logs: got status 500"

    def test_probe_failure_keeps_original_error(self, fake_target):
        fake_target.add(LOCAL_LOGS, status=503, body="unavailable")
        fake_target.add("/state/v1/version", status=503, body="unavailable")
        fetcher, out, err = _fetcher(VespaLogsConfig(), fake_target)

        with pytest.raises(LogRetrievalError) as exc:
            fetcher.run()
        assert str(exc.value) == "could not retrieve logs: failed to read logs: got status 503"

    def test_configurable_min_platform_version(self, fake_target):
        fake_target.add(LOCAL_LOGS, status=404, body="not found")
        fake_target.add("/state/v1/version", body={"version": "8.358.0"})
        config = VespaLogsConfig(compat=CompatConfig(min_platform_version="8.358.0"))
        fetcher, out, err = _fetcher(config, fake_target)

        with pytest.raises(LogRetrievalError) as exc:
            fetcher.run()
        assert exc.value.diagnosis.hint is None

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        fetcher = LogFetcher(
            VespaLogsConfig(),
            client,
            Version(8, 400, 0),
            io.StringIO(),
            Console(file=io.StringIO()),
        )
        with pytest.raises(LogRetrievalError) as exc:
            fetcher.run()
        assert str(exc.value) == (
            "could not retrieve logs: failed to read logs: connection refused"
        )
