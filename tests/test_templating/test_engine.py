"""Tests for TemplateEngine — language fallback, format options, rendering, reload."""

from __future__ import annotations

from pathlib import Path

import pytest

from alert_webhooks.templating.engine import TemplateEngine
from alert_webhooks.templating.exceptions import (
    RenderFailedError,
    TemplateNotFoundError,
    TemplateParseError,
)
from alert_webhooks.templating.profiles import full_default_config, minimal_default_config
from alert_webhooks.templating.types import (
    AlertData,
    FormatOptions,
    TemplateData,
    ToggleOption,
)

SHIPPED_TEMPLATES = Path(__file__).parents[2] / "templates"
SHIPPED_CONFIG = Path(__file__).parents[2] / "config"


# ── Helpers ─────────────────────────────────────────────────────


def _write(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(body, encoding="utf-8")
    return path


def _engine(tmp_path: Path, fallback_order: list[str] | None = None) -> TemplateEngine:
    config = full_default_config()
    if fallback_order is not None:
        config = config.model_copy(update={"fallback_order": fallback_order})
    return TemplateEngine(config, config_dir=tmp_path)


def _alert(status: str = "firing", **kw: object) -> AlertData:
    defaults: dict[str, object] = {
        "status": status,
        "labels": {"alertname": "HighCPU", "pod": "api-7f9c"},
        "annotations": {"summary": "CPU above 90%"},
        "starts_at": "2024-03-01T12:00:00Z",
        "ends_at": "2024-03-01T12:30:00Z" if status == "resolved" else "0001-01-01T00:00:00Z",
        "generator_url": "http://prom:9090/graph?g0.expr=cpu",
    }
    defaults.update(kw)
    return AlertData(**defaults)  # type: ignore[arg-type]


def _data(alerts: list[AlertData] | None = None, **kw: object) -> TemplateData:
    alerts = alerts if alerts is not None else []
    defaults: dict[str, object] = {
        "status": "firing",
        "alert_name": "HighCPU",
        "env": "prod",
        "severity": "critical",
        "namespace": "payments",
        "total_alerts": len(alerts),
        "firing_count": sum(1 for a in alerts if a.status == "firing"),
        "resolved_count": sum(1 for a in alerts if a.status == "resolved"),
        "alerts": alerts,
        "external_url": "http://am:9093",
    }
    defaults.update(kw)
    return TemplateData(**defaults)  # type: ignore[arg-type]


# ── Language resolution ─────────────────────────────────────────


class TestGetDefaultLanguage:
    def test_preferred_available(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "x")
        _write(tmp_path, "alert_template_tw.tmpl", "x")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        assert engine.get_default_language("tw") == "tw"

    def test_walks_fallback_order(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_zh.tmpl", "x")
        _write(tmp_path, "alert_template_ko.tmpl", "x")
        engine = _engine(tmp_path, fallback_order=["eng", "ko", "zh"])
        engine.load_templates(tmp_path)
        assert engine.get_default_language("fr") == "ko"

    def test_first_loaded_when_no_fallback_matches(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_pt.tmpl", "x")
        _write(tmp_path, "alert_template_de.tmpl", "x")
        engine = _engine(tmp_path, fallback_order=["eng"])
        engine.load_templates(tmp_path)
        assert engine.get_default_language("fr") == "de"

    def test_nothing_loaded_returns_preferred(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        assert engine.get_default_language("fr") == "fr"
        with pytest.raises(TemplateNotFoundError):
            engine.render("fr", _data())

    def test_idempotent(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_ja.tmpl", "x")
        _write(tmp_path, "alert_template_ko.tmpl", "x")
        engine = _engine(tmp_path, fallback_order=[])
        engine.load_templates(tmp_path)
        first = engine.get_default_language("eng")
        assert engine.get_default_language("eng") == first
        assert engine.get_default_language(first) == first

    def test_eng_request_renders_with_tw_template(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_tw.j2", "TW {{ status }}")
        engine = _engine(tmp_path, fallback_order=["eng", "tw"])
        engine.load_templates(tmp_path)

        language = engine.get_default_language("eng")
        assert language == "tw"
        assert engine.render(language, _data()) == "TW firing"


class TestLanguageListing:
    def test_available_and_supported(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "x")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        assert engine.available_languages() == ["eng"]
        assert engine.has_language("eng")
        assert not engine.has_language("tw")
        assert engine.supported_languages() == ["eng", "tw", "zh", "ko", "ja"]
        assert engine.supported_language_details()[0].fallback is True


# ── Format options ──────────────────────────────────────────────


class TestFormatOptions:
    _SOURCE = "{{ data.format_options.enabled('show_emoji') }}|{{ data.format_options.enabled('compact_mode') }}"

    def test_unset_options_use_config(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", self._SOURCE)
        engine = TemplateEngine(minimal_default_config(), config_dir=tmp_path)
        engine.load_templates(tmp_path)
        assert engine.render("eng", _data()) == "False|True"

    def test_explicit_false_preserved(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", self._SOURCE)
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)

        options = FormatOptions(show_emoji=ToggleOption(enabled=False))
        assert engine.render("eng", _data(format_options=options)) == "False|False"

    def test_explicit_true_preserved(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", self._SOURCE)
        engine = TemplateEngine(minimal_default_config(), config_dir=tmp_path)
        engine.load_templates(tmp_path)

        options = FormatOptions(show_emoji=ToggleOption(enabled=True))
        assert engine.render("eng", _data(format_options=options)) == "True|True"

    def test_caller_data_not_mutated(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", self._SOURCE)
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        data = _data()
        engine.render("eng", data)
        assert data.format_options.is_unset()

    def test_load_config_falls_back_without_file(self, tmp_path: Path) -> None:
        engine = TemplateEngine(config_dir=tmp_path)
        config = engine.load_config("minimal")
        assert config.format_options.enabled("compact_mode")
        assert engine.current_format_options().enabled("compact_mode")

    def test_get_format_options_from_shipped_profiles(self) -> None:
        engine = TemplateEngine(config_dir=SHIPPED_CONFIG)
        full = engine.get_format_options("full")
        minimal = engine.get_format_options("minimal")
        assert full.enabled("show_emoji")
        assert not minimal.enabled("show_emoji")
        assert minimal.max_summary_length is not None
        assert minimal.max_summary_length.value == 100


# ── Rendering ───────────────────────────────────────────────────


class TestRender:
    def test_template_not_found(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "x")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        with pytest.raises(TemplateNotFoundError):
            engine.render("tw", _data())

    def test_render_failure_wrapped(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "{{ data.alerts[5].status }}")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        with pytest.raises(RenderFailedError):
            engine.render("eng", _data())

    def test_undefined_name_fails(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.j2", "{{ cluster }}")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        with pytest.raises(RenderFailedError):
            engine.render("eng", _data())

    @pytest.mark.parametrize(
        ("platform", "expected"),
        [
            ("telegram", "<b>HighCPU</b>"),
            ("slack", "*HighCPU*"),
            ("discord", "**HighCPU**"),
        ],
    )
    def test_render_for_platform_sets_markup(
        self, tmp_path: Path, platform: str, expected: str
    ) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "{{ format_bold(data.platform, data.alert_name) }}")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        assert engine.render_for_platform("eng", platform, _data()) == expected

    def test_render_for_platform_reraises(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with pytest.raises(TemplateNotFoundError):
            engine.render_for_platform("eng", "slack", _data())


class TestReload:
    def test_reload_swaps_templates(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "old")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        assert engine.render("eng", _data()) == "old"

        _write(tmp_path, "alert_template_eng.tmpl", "new")
        engine.reload_templates(tmp_path)
        assert engine.render("eng", _data()) == "new"

    def test_captured_template_survives_reload(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "old")
        engine = _engine(tmp_path)
        registry = engine.load_templates(tmp_path)
        captured = registry["eng"]

        _write(tmp_path, "alert_template_eng.tmpl", "new")
        engine.reload_templates(tmp_path)

        assert captured.render(data=_data()) == "old"
        assert engine.render("eng", _data()) == "new"

    def test_reload_can_add_languages(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "x")
        engine = _engine(tmp_path)
        engine.load_templates(tmp_path)
        _write(tmp_path, "alert_template_tw.j2", "y")
        engine.reload_templates(tmp_path)
        assert engine.available_languages() == ["eng", "tw"]


class TestValidateTemplate:
    def test_valid(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "alert_template_eng.j2", "{{ status }}")
        _engine(tmp_path).validate_template(path)

    def test_invalid(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "alert_template_eng.tmpl", "{% if data.status %}")
        with pytest.raises(TemplateParseError):
            _engine(tmp_path).validate_template(path)


# ── Shipped templates ───────────────────────────────────────────


class TestShippedTemplates:
    @pytest.fixture
    def engine(self) -> TemplateEngine:
        engine = TemplateEngine(config_dir=SHIPPED_CONFIG)
        engine.load_config("full")
        engine.load_templates(SHIPPED_TEMPLATES)
        return engine

    @pytest.mark.parametrize("language", ["eng", "tw", "zh", "ja", "ko"])
    @pytest.mark.parametrize("count", [0, 1, 4])
    def test_render_any_alert_count(self, engine: TemplateEngine, language: str, count: int) -> None:
        alerts = [_alert("firing" if i % 2 == 0 else "resolved") for i in range(count)]
        for platform in ("telegram", "slack", "discord"):
            text = engine.render_for_platform(language, platform, _data(alerts))
            assert "HighCPU" in text

    def test_english_full_profile(self, engine: TemplateEngine) -> None:
        text = engine.render_for_platform("eng", "telegram", _data([_alert(), _alert("resolved")]))
        assert "🚨" in text
        assert "<b>Alert Notification</b>" in text
        assert "CPU above 90%" in text
        assert "2024-03-01 12:00:00" in text
        assert '<a href="http://am:9093">View All Alert Details</a>' in text

    def test_english_minimal_options(self, engine: TemplateEngine) -> None:
        options = engine.get_format_options("minimal")
        text = engine.render_for_platform(
            "eng", "slack", _data([_alert()], format_options=options)
        )
        assert "🚨" not in text
        assert "Pod:" not in text
        assert "http://am:9093" not in text

    def test_simplified_notation_fields(self, engine: TemplateEngine) -> None:
        text = engine.render_for_platform("tw", "slack", _data([_alert("resolved")], firing_count=0))
        assert "警報已解決" in text
        assert "CPU above 90%" in text
        assert "api-7f9c" in text
        assert "2024-03-01 12:30:00" in text

    @pytest.mark.parametrize("language", ["eng", "tw", "zh", "ja", "ko"])
    def test_telegram_values_escaped(self, engine: TemplateEngine, language: str) -> None:
        alert = _alert(annotations={"summary": "latency <p99> & errors"})
        text = engine.render_for_platform(language, "telegram", _data([alert], env="a&b"))
        assert "<p99>" not in text
        assert "latency &lt;p99&gt; &amp; errors" in text
        assert "a&amp;b" in text

    def test_slack_values_unescaped(self, engine: TemplateEngine) -> None:
        alert = _alert(annotations={"summary": "latency <p99> & errors"})
        text = engine.render_for_platform("tw", "slack", _data([alert]))
        assert "latency <p99> & errors" in text

    @pytest.mark.parametrize("language", ["eng", "tw"])
    def test_summary_truncated(self, engine: TemplateEngine, language: str) -> None:
        options = engine.get_format_options("minimal")
        alert = _alert(annotations={"summary": "s" * 150})
        text = engine.render_for_platform(
            language, "discord", _data([alert], format_options=options)
        )
        assert "s" * 100 + "..." in text
        assert "s" * 101 not in text
