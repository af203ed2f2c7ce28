"""Alertmanager webhook payload and derivation of TemplateData from it."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from alert_webhooks.templating.types import AlertData, FormatOptions, TemplateData

FIRING = "firing"
RESOLVED = "resolved"

_SUMMARY_LABELS = ("alertname", "env", "severity", "namespace")


class AlertManagerAlert(BaseModel):
    """One alert as posted by Alertmanager (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    labels: dict[str, Any] = Field(default_factory=dict)
    annotations: dict[str, Any] = Field(default_factory=dict)
    starts_at: str = Field(default="", alias="startsAt")
    ends_at: str = Field(default="", alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: str = ""


class AlertManagerData(BaseModel):
    """A grouped alert batch as posted by Alertmanager."""

    model_config = ConfigDict(populate_by_name=True)

    receiver: str = ""
    status: str = ""
    alerts: list[AlertManagerAlert] = Field(default_factory=list)
    group_labels: dict[str, Any] = Field(default_factory=dict, alias="groupLabels")
    common_labels: dict[str, Any] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: dict[str, Any] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field(default="", alias="externalURL")
    version: str = ""
    group_key: str = Field(default="", alias="groupKey")
    truncated_alerts: int = Field(default=0, alias="truncatedAlerts")


def _strings_only(values: dict[str, Any]) -> dict[str, str]:
    return {k: v for k, v in values.items() if isinstance(v, str)}


def _summary_label(payload: AlertManagerData, key: str) -> str:
    value = payload.common_labels.get(key)
    if isinstance(value, str) and value:
        return value
    if payload.alerts:
        value = payload.alerts[0].labels.get(key)
        if isinstance(value, str):
            return value
    return ""


def build_template_data(
    payload: AlertManagerData,
    format_options: FormatOptions | None = None,
) -> TemplateData:
    """Derive the render-side view of *payload*.

    Summary labels come from ``commonLabels`` and fall back per field to the
    first alert's labels. Non-string label and annotation values are dropped.
    """
    alerts = [
        AlertData(
            status=a.status,
            labels=_strings_only(a.labels),
            annotations=_strings_only(a.annotations),
            starts_at=a.starts_at,
            ends_at=a.ends_at,
            generator_url=a.generator_url,
        )
        for a in payload.alerts
    ]
    firing = sum(1 for a in alerts if a.status == FIRING)
    resolved = sum(1 for a in alerts if a.status == RESOLVED)
    alert_name, env, severity, namespace = (_summary_label(payload, k) for k in _SUMMARY_LABELS)

    return TemplateData(
        status=payload.status,
        alert_name=alert_name,
        env=env,
        severity=severity,
        namespace=namespace,
        total_alerts=len(alerts),
        firing_count=firing,
        resolved_count=resolved,
        alerts=alerts,
        external_url=payload.external_url,
        format_options=format_options or FormatOptions(),
    )


def split_by_status(payload: AlertManagerData) -> list[AlertManagerData]:
    """Split a mixed batch into a firing batch followed by a resolved batch.

    Batches with a single status come back as a one-element list; alerts with
    any other status stay with the firing batch.
    """
    firing = [a for a in payload.alerts if a.status != RESOLVED]
    resolved = [a for a in payload.alerts if a.status == RESOLVED]
    if not firing or not resolved:
        return [payload]
    return [
        payload.model_copy(update={"status": FIRING, "alerts": firing}),
        payload.model_copy(update={"status": RESOLVED, "alerts": resolved}),
    ]
