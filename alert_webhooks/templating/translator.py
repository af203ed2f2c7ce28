"""Translate the simplified alert-template notation into native Jinja2.

The simplified notation lets authors write flat names (``{{ firing_count }}``,
``{% for alert in alerts %}``, ``alert.startsAt``) while the native templates
render against a single ``data`` object. Translation is an ordered table of
substitutions applied to the whole source text:

1. top-level variables   ``{{ env }}`` -> ``{{ format_text(data.platform, data.env) }}``
2. conditionals          ``{% if firing_count > 0 %}`` -> ``{% if data.firing_count > 0 %}``
3. loops                 ``{% for alert in alerts %}`` -> ``{% for index, alert in ... %}``
4. loop-scoped output    ``{{ alert.status }}`` -> ``{{ format_text(data.platform, ...) }}``
5. loop-scoped fields    ``alert.startsAt`` -> ``alert.starts_at``
6. function calls        ``format_time(x)`` -> ``format_time(data.platform, x)``

Text values are emitted through ``format_text`` so they are escaped for
platforms that take HTML. Names outside the table are left untouched. The
renderer runs with strict undefined handling, so an unknown ``{{ name }}``
fails at render time.
"""

from __future__ import annotations

import re

NATIVE_EXTENSION = ".tmpl"

# Simplified name -> TemplateData attribute.
TOP_LEVEL_VARIABLES: dict[str, str] = {
    "status": "status",
    "alert_name": "alert_name",
    "env": "env",
    "severity": "severity",
    "namespace": "namespace",
    "total_alerts": "total_alerts",
    "firing_count": "firing_count",
    "resolved_count": "resolved_count",
    "externalURL": "external_url",
}

# Numeric attributes are printed as-is, everything else goes through format_text.
_NUMERIC_VARIABLES = frozenset({"total_alerts", "firing_count", "resolved_count"})

_Rule = tuple[re.Pattern[str], str]


def _variable_rules() -> list[_Rule]:
    rules: list[_Rule] = []
    for name, attr in TOP_LEVEL_VARIABLES.items():
        if attr in _NUMERIC_VARIABLES:
            replacement = "{{ data.%s }}" % attr
        else:
            replacement = "{{ format_text(data.platform, data.%s) }}" % attr
        rules.append((re.compile(r"\{\{\s*" + re.escape(name) + r"\s*\}\}"), replacement))
    return rules


_CONDITIONAL_RULES: list[_Rule] = [
    (re.compile(r"\{%\s*if\s+firing_count\s*>\s*0\s*%\}"), "{% if data.firing_count > 0 %}"),
    (re.compile(r"\{%\s*if\s+resolved_count\s*>\s*0\s*%\}"), "{% if data.resolved_count > 0 %}"),
    (re.compile(r"\{%\s*elif\s+resolved_count\s*>\s*0\s*%\}"), "{% elif data.resolved_count > 0 %}"),
    (re.compile(r"\{%\s*if\s+externalURL\s*%\}"), "{% if data.external_url %}"),
]

_LOOP_RULES: list[_Rule] = [
    (
        re.compile(r"\{%\s*for\s+alert\s+in\s+alerts\s*%\}"),
        "{% for index, alert in enumerate(data.alerts) %}",
    ),
    (re.compile(r"\{\{\s*loop\.index\s*\}\}"), "{{ index + 1 }}"),
]

_OUTPUT_RULES: list[_Rule] = [
    (
        re.compile(r"\{\{\s*alert\.annotations\.summary\s*\}\}"),
        "{{ format_text(data.platform, truncate(alert.annotations.summary, "
        "data.format_options.summary_limit())) }}",
    ),
    (
        re.compile(r"\{\{\s*(alert\.(?:status|labels\.pod|generatorURL))\s*\}\}"),
        r"{{ format_text(data.platform, \1) }}",
    ),
]

_FIELD_RULES: list[_Rule] = [
    (re.compile(r"\balert\.annotations\.summary\b"), "alert.annotations.get('summary', '')"),
    (re.compile(r"\balert\.labels\.pod\b"), "alert.labels.get('pod', '')"),
    (re.compile(r"\balert\.startsAt\b"), "alert.starts_at"),
    (re.compile(r"\balert\.endsAt\b"), "alert.ends_at"),
    (re.compile(r"\balert\.generatorURL\b"), "alert.generator_url"),
]

_FUNCTION_RULES: list[_Rule] = [
    (re.compile(r"\bformat_time\(\s*([^,()]+?)\s*\)"), r"format_time(data.platform, \1)"),
]

SUBSTITUTIONS: tuple[_Rule, ...] = (
    *_variable_rules(),
    *_CONDITIONAL_RULES,
    *_LOOP_RULES,
    *_OUTPUT_RULES,
    *_FIELD_RULES,
    *_FUNCTION_RULES,
)


def translate(source: str) -> str:
    """Apply every substitution in order and return native template text."""
    result = source
    for pattern, replacement in SUBSTITUTIONS:
        result = pattern.sub(replacement, result)
    return result


def needs_translation(extension: str) -> bool:
    """Native files are compiled as-is."""
    return extension != NATIVE_EXTENSION
