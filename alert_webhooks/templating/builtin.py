"""Built-in alert message used when no template can be rendered.

Independent of the template files on disk: a broken or missing template must
still produce something readable.
"""

from __future__ import annotations

from alert_webhooks.templating.formatting import (
    ZERO_TIME,
    format_bold,
    format_link,
    format_text,
    format_time,
    truncate,
)
from alert_webhooks.templating.types import AlertData, FormatOptions, TemplateData

_LABELS: dict[str, dict[str, str]] = {
    "eng": {
        "firing_title": "Alert Notification",
        "resolved_title": "Alert Resolved",
        "status": "Status",
        "alert_name": "Alert Name",
        "env": "Environment",
        "severity": "Severity",
        "namespace": "Namespace",
        "total": "Total Alerts",
        "firing": "Firing",
        "resolved": "Resolved",
        "firing_section": "Firing Alerts",
        "resolved_section": "Resolved Alerts",
        "alert": "Alert",
        "summary": "Summary",
        "pod": "Pod",
        "started": "Started",
        "ended": "Ended",
        "details": "View Details",
        "all_details": "View All Alert Details",
    },
    "tw": {
        "firing_title": "警報通知",
        "resolved_title": "警報已解決",
        "status": "狀態",
        "alert_name": "警報名稱",
        "env": "環境",
        "severity": "嚴重程度",
        "namespace": "命名空間",
        "total": "總警報數",
        "firing": "觸發中",
        "resolved": "已解決",
        "firing_section": "觸發中的警報",
        "resolved_section": "已解決的警報",
        "alert": "警報",
        "summary": "摘要",
        "pod": "Pod",
        "started": "開始時間",
        "ended": "結束時間",
        "details": "查看詳情",
        "all_details": "查看所有警報詳情",
    },
}


def _alert_lines(
    position: int,
    alert: AlertData,
    labels: dict[str, str],
    platform: str,
    options: FormatOptions,
) -> list[str]:
    summary = truncate(alert.annotations.get("summary", ""), options.summary_limit())
    lines = [
        "",
        format_bold(platform, f"{labels['alert']} {position}:"),
        f"• {labels['summary']}: {format_text(platform, summary)}",
        f"• {labels['pod']}: {format_text(platform, alert.labels.get('pod', ''))}",
        f"• {labels['started']}: {format_time(platform, alert.starts_at)}",
    ]
    if alert.status == "resolved" or (alert.ends_at and alert.ends_at != ZERO_TIME):
        lines.append(f"• {labels['ended']}: {format_time(platform, alert.ends_at)}")
    if options.enabled("show_generator_url") and alert.generator_url:
        lines.append(f"• {format_link(platform, alert.generator_url, labels['details'])}")
    return lines


def format_builtin_message(data: TemplateData, language: str = "eng", platform: str = "") -> str:
    """Render *data* without any template file.

    ``tw`` gets Traditional Chinese labels, every other language English.
    Unset format options count as disabled, so callers pass resolved ones.
    """
    labels = _LABELS.get(language, _LABELS["eng"])
    platform = platform or data.platform
    options = data.format_options
    emoji = options.enabled("show_emoji")

    lines: list[str] = []
    if data.firing_count > 0:
        lines.append(("🚨 " if emoji else "") + format_bold(platform, labels["firing_title"]))
        lines.append("")
    elif data.resolved_count > 0:
        lines.append(("✅ " if emoji else "") + format_bold(platform, labels["resolved_title"]))
        lines.append("")

    for key, value in (
        ("status", data.status),
        ("alert_name", data.alert_name),
        ("env", data.env),
        ("severity", data.severity),
        ("namespace", data.namespace),
    ):
        lines.append(f"{format_bold(platform, labels[key] + ':')} {format_text(platform, value)}")
    lines.append(f"{format_bold(platform, labels['total'] + ':')} {data.total_alerts}")
    if data.firing_count > 0:
        lines.append(f"{format_bold(platform, labels['firing'] + ':')} {data.firing_count}")
    if data.resolved_count > 0:
        lines.append(f"{format_bold(platform, labels['resolved'] + ':')} {data.resolved_count}")

    for status, section in (("firing", "firing_section"), ("resolved", "resolved_section")):
        matching = [(i, a) for i, a in enumerate(data.alerts, start=1) if a.status == status]
        if not matching:
            continue
        lines.append("")
        lines.append(format_bold(platform, labels[section] + ":"))
        for position, alert in matching:
            lines.extend(_alert_lines(position, alert, labels, platform, options))

    if options.enabled("show_external_url") and data.external_url:
        lines.append("")
        lines.append(format_link(platform, data.external_url, labels["all_details"]))

    return "\n".join(lines)
