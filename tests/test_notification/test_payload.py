"""Tests for the Alertmanager payload model and TemplateData derivation."""

from __future__ import annotations

import random

from alert_webhooks.notification.payload import (
    AlertManagerAlert,
    AlertManagerData,
    build_template_data,
    split_by_status,
)
from alert_webhooks.templating.types import FormatOptions, ToggleOption


# ── Helpers ─────────────────────────────────────────────────────


def _alert(status: str, **labels: object) -> AlertManagerAlert:
    return AlertManagerAlert(
        status=status,
        labels={"alertname": "HighCPU", **labels},
        annotations={"summary": f"{status} alert"},
        startsAt="2024-03-01T12:00:00Z",
    )


def _payload(alerts: list[AlertManagerAlert], **kw: object) -> AlertManagerData:
    defaults: dict[str, object] = {
        "receiver": "webhook",
        "status": "firing",
        "alerts": alerts,
        "commonLabels": {"alertname": "HighCPU", "env": "prod", "severity": "critical"},
        "externalURL": "http://am:9093",
    }
    defaults.update(kw)
    return AlertManagerData(**defaults)  # type: ignore[arg-type]


class TestAlertManagerData:
    def test_parses_webhook_json(self) -> None:
        payload = AlertManagerData.model_validate(
            {
                "receiver": "webhook",
                "status": "firing",
                "alerts": [
                    {
                        "status": "firing",
                        "labels": {"alertname": "HighCPU"},
                        "annotations": {"summary": "CPU high"},
                        "startsAt": "2024-03-01T12:00:00Z",
                        "endsAt": "0001-01-01T00:00:00Z",
                        "generatorURL": "http://prom/graph",
                        "fingerprint": "abc",
                    }
                ],
                "groupLabels": {"alertname": "HighCPU"},
                "commonLabels": {"alertname": "HighCPU"},
                "commonAnnotations": {},
                "externalURL": "http://am:9093",
                "version": "4",
                "groupKey": "{}:{alertname=\"HighCPU\"}",
                "truncatedAlerts": 0,
            }
        )
        assert payload.external_url == "http://am:9093"
        assert payload.alerts[0].starts_at == "2024-03-01T12:00:00Z"
        assert payload.alerts[0].generator_url == "http://prom/graph"
        assert payload.group_key.startswith("{}")

    def test_accepts_field_names(self) -> None:
        payload = AlertManagerData(external_url="http://x", truncated_alerts=2)
        assert payload.external_url == "http://x"
        assert payload.truncated_alerts == 2

    def test_dumps_by_alias(self) -> None:
        dumped = _payload([_alert("firing")]).model_dump(by_alias=True)
        assert "externalURL" in dumped
        assert "startsAt" in dumped["alerts"][0]


class TestBuildTemplateData:
    def test_counts_three_firing_two_resolved(self) -> None:
        alerts = [_alert("firing")] * 3 + [_alert("resolved")] * 2
        for _ in range(3):
            random.shuffle(alerts)
            data = build_template_data(_payload(list(alerts)))
            assert data.total_alerts == 5
            assert data.firing_count == 3
            assert data.resolved_count == 2

    def test_common_labels(self) -> None:
        data = build_template_data(_payload([_alert("firing")]))
        assert data.alert_name == "HighCPU"
        assert data.env == "prod"
        assert data.severity == "critical"
        assert data.external_url == "http://am:9093"

    def test_falls_back_to_first_alert_labels(self) -> None:
        payload = _payload(
            [_alert("firing", namespace="payments", env="dev"), _alert("firing", namespace="other")],
            commonLabels={"alertname": "HighCPU", "env": "prod"},
        )
        data = build_template_data(payload)
        assert data.namespace == "payments"
        assert data.env == "prod"

    def test_missing_everywhere_is_empty(self) -> None:
        data = build_template_data(_payload([], commonLabels={}))
        assert data.alert_name == ""
        assert data.total_alerts == 0
        assert data.alerts == []

    def test_non_string_values_dropped(self) -> None:
        alert = AlertManagerAlert(
            status="firing",
            labels={"pod": "api-0", "replicas": 3},
            annotations={"summary": "x", "value": 0.97},
        )
        data = build_template_data(_payload([alert]))
        assert data.alerts[0].labels == {"pod": "api-0"}
        assert data.alerts[0].annotations == {"summary": "x"}

    def test_format_options_passed_through(self) -> None:
        options = FormatOptions(show_emoji=ToggleOption(enabled=False))
        data = build_template_data(_payload([]), options)
        assert data.format_options == options

    def test_format_options_default_unset(self) -> None:
        assert build_template_data(_payload([])).format_options.is_unset()


class TestSplitByStatus:
    def test_mixed_batch(self) -> None:
        payload = _payload([_alert("firing"), _alert("resolved"), _alert("firing")])
        firing, resolved = split_by_status(payload)
        assert firing.status == "firing"
        assert len(firing.alerts) == 2
        assert resolved.status == "resolved"
        assert len(resolved.alerts) == 1
        assert resolved.external_url == payload.external_url

    def test_single_status_unchanged(self) -> None:
        payload = _payload([_alert("resolved")], status="resolved")
        assert split_by_status(payload) == [payload]

    def test_empty_batch(self) -> None:
        payload = _payload([])
        assert split_by_status(payload) == [payload]
