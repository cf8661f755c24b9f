"""
Tests for the synthetics wire models.
"""

import base64
from datetime import timedelta, timezone

import pytest

from nrs.synthetics.constants import MonitorStatus, MonitorType
from nrs.synthetics.errors import TimestampParseError
from nrs.synthetics.models import (
    CreateAlertConditionArgs,
    CreateMonitorArgs,
    ExtendedMonitor,
    Monitor,
    ScriptLocation,
    UpdateAlertConditionArgs,
    UpdateMonitorArgs,
    UpdateMonitorScriptArgs,
)


def _record(**fields):
    record = {
        "id": "mon-1",
        "name": "homepage",
        "type": "SIMPLE",
        "frequency": 5,
        "uri": "https://example.com",
        "locations": ["AWS_US_WEST_1"],
        "status": "ENABLED",
        "slaThreshold": 7.0,
    }
    record.update(fields)
    return record


class TestMonitor:
    """Tests for Monitor decoding."""

    def test_options_lifted(self) -> None:
        """Test nested options become flat fields."""
        monitor = Monitor.model_validate(
            _record(options={"validationString": "Welcome", "verifySSL": False})
        )

        assert monitor.validation_string == "Welcome"
        assert monitor.verify_ssl is False
        assert monitor.bypass_head_request is None
        assert monitor.treat_redirect_as_failure is None

    def test_missing_options(self) -> None:
        """Test a record without options leaves every option unset."""
        monitor = Monitor.model_validate(_record())
        assert monitor.options == {}
        assert monitor.verify_ssl is None

    def test_null_options(self) -> None:
        """Test an explicit null options object is tolerated."""
        monitor = Monitor.model_validate(_record(options=None))
        assert monitor.options == {}

    def test_aliases(self) -> None:
        """Test camelCase wire names map to snake_case fields."""
        monitor = Monitor.model_validate(_record(slaThreshold=9.5, userId=12, apiVersion="0.5.0"))

        assert monitor.sla_threshold == 9.5
        assert monitor.user_id == 12
        assert monitor.api_version == "0.5.0"
        assert monitor.type == MonitorType.SIMPLE
        assert monitor.status == MonitorStatus.ENABLED
        assert monitor.is_created

    def test_scripted_monitor_without_uri(self) -> None:
        """Test uri is optional."""
        record = _record(type="SCRIPT_API")
        del record["uri"]
        monitor = Monitor.model_validate(record)
        assert monitor.uri is None


class TestExtendedMonitor:
    """Tests for list records with timestamps."""

    def test_parse_timestamps(self) -> None:
        """Test createdAt/modifiedAt are parsed with their offset."""
        monitor = ExtendedMonitor.model_validate(
            _record(createdAt="2016-06-13T20:13:31.000+0000", modifiedAt="2017-01-02T03:04:05.123+0000")
        )
        monitor.parse_timestamps()

        assert monitor.created_at.year == 2016
        assert monitor.created_at.tzinfo is not None
        assert monitor.created_at.utcoffset() == timezone.utc.utcoffset(None)
        assert monitor.modified_at.microsecond == 123000

    def test_timestamp_without_fraction(self) -> None:
        """Test whole-second timestamps are accepted."""
        monitor = ExtendedMonitor.model_validate(
            _record(createdAt="2016-06-13T20:13:31+0000", modifiedAt="2016-06-13T20:13:31-0700")
        )
        monitor.parse_timestamps()

        assert monitor.created_at.second == 31
        assert monitor.created_at.microsecond == 0
        assert monitor.modified_at.utcoffset() == timedelta(hours=-7)

    def test_timestamp_nanoseconds_truncated(self) -> None:
        """Test fractions beyond microseconds are truncated."""
        monitor = ExtendedMonitor.model_validate(
            _record(
                createdAt="2016-06-13T20:13:31.123456789+0000",
                modifiedAt="2016-06-13T20:13:31.5+0000",
            )
        )
        monitor.parse_timestamps()

        assert monitor.created_at.microsecond == 123456
        assert monitor.modified_at.microsecond == 500000

    @pytest.mark.parametrize(
        "value",
        [
            "2016-06-13T20:13:31.+0000",
            "2016-06-13T20:13:31.1234567890+0000",
            "2016-06-13T20:13:31.000Z",
            "2016-06-13 20:13:31.000+0000",
            "2016-13-13T20:13:31.000+0000",
            "",
        ],
    )
    def test_rejected_timestamp_shapes(self, value: str) -> None:
        """Test anything outside the service's layout still fails."""
        monitor = ExtendedMonitor.model_validate(
            _record(createdAt="2016-06-13T20:13:31.000+0000", modifiedAt=value)
        )

        with pytest.raises(TimestampParseError):
            monitor.parse_timestamps()

    def test_bad_timestamp(self) -> None:
        """Test a malformed timestamp names the monitor and the value."""
        monitor = ExtendedMonitor.model_validate(
            _record(createdAt="2016-06-13T20:13:31.000+0000", modifiedAt="yesterday")
        )

        with pytest.raises(TimestampParseError) as exc_info:
            monitor.parse_timestamps()

        assert exc_info.value.monitor_id == "mon-1"
        assert exc_info.value.value == "yesterday"


class TestMonitorArgs:
    """Tests for create and update documents."""

    def test_create_payload(self) -> None:
        """Test the create document uses wire names."""
        args = CreateMonitorArgs(
            name="homepage",
            type=MonitorType.SIMPLE,
            frequency=5,
            uri="https://example.com",
            locations=["AWS_US_WEST_1"],
            status=MonitorStatus.MUTED,
            sla_threshold=3.0,
        )

        assert args.to_payload() == {
            "name": "homepage",
            "type": "SIMPLE",
            "frequency": 5,
            "uri": "https://example.com",
            "locations": ["AWS_US_WEST_1"],
            "status": "MUTED",
            "slaThreshold": 3.0,
        }

    def test_create_payload_omits_empty_uri_and_sla(self) -> None:
        """Test uri and slaThreshold are only sent when given."""
        args = CreateMonitorArgs(name="script", type=MonitorType.SCRIPT_API, frequency=5)
        payload = args.to_payload()

        assert "uri" not in payload
        assert "slaThreshold" not in payload

    def test_update_payload_empty(self) -> None:
        """Test an update without populated fields sends nothing."""
        assert UpdateMonitorArgs().to_payload() == {}

    def test_update_payload_partial(self) -> None:
        """Test only populated fields are sent."""
        args = UpdateMonitorArgs(
            name="renamed",
            status=MonitorStatus.DISABLED,
            bypass_head_request=True,
        )

        assert args.to_payload() == {
            "name": "renamed",
            "status": "DISABLED",
            "options": {"bypassHEADRequest": True},
        }


class TestScriptArgs:
    """Tests for the script document."""

    def test_script_base64_encoded(self) -> None:
        """Test the script text is base64 encoded on the wire."""
        payload = UpdateMonitorScriptArgs(script_text="console.log('hi');").to_payload()

        assert base64.b64decode(payload["scriptText"]).decode() == "console.log('hi');"
        assert "scriptLocations" not in payload

    def test_script_locations(self) -> None:
        """Test private locations are sent with their HMAC."""
        args = UpdateMonitorScriptArgs(
            script_text="x",
            script_locations=[ScriptLocation(name="private-1", hmac="c2VjcmV0")],
        )
        assert args.to_payload()["scriptLocations"] == [{"name": "private-1", "hmac": "c2VjcmV0"}]


class TestAlertConditionArgs:
    """Tests for alert condition documents."""

    def test_create_without_runbook(self) -> None:
        """Test runbook_url is left out when unset."""
        args = CreateAlertConditionArgs(name="homepage down", monitor_id="mon-1", enabled=False)

        assert args.to_payload() == {
            "synthetics_condition": {"name": "homepage down", "monitor_id": "mon-1", "enabled": False}
        }

    def test_update_includes_id(self) -> None:
        """Test the update document carries the condition id."""
        args = UpdateAlertConditionArgs(
            id=7,
            name="homepage down",
            monitor_id="mon-1",
            runbook_url="https://runbooks.example.com/homepage",
        )
        condition = args.to_payload()["synthetics_condition"]

        assert condition["id"] == 7
        assert condition["runbook_url"] == "https://runbooks.example.com/homepage"
        assert condition["enabled"] is True
