"""Tests for TemplateStore — discovery, extension priority, snapshot publishing."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from alert_webhooks.templating.exceptions import (
    AllTemplatesFailedError,
    NoTemplatesFoundError,
    TemplateDirectoryNotFoundError,
    TemplateParseError,
)
from alert_webhooks.templating.store import TemplateStore, scan_template_files
from alert_webhooks.templating.types import NamingConvention, TemplateData


# ── Helpers ─────────────────────────────────────────────────────


def _write(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(body, encoding="utf-8")
    return path


def _render(store: TemplateStore, language: str) -> str:
    template = store.get(language)
    assert template is not None
    return template.render(data=TemplateData(status="firing"))


# ── Scanning ────────────────────────────────────────────────────


class TestScanTemplateFiles:
    def test_finds_languages_by_prefix(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "a")
        _write(tmp_path, "alert_template_tw.j2", "b")
        _write(tmp_path, "README.md", "c")
        _write(tmp_path, "other_eng.tmpl", "d")

        files = scan_template_files(tmp_path, NamingConvention())
        assert set(files) == {"eng", "tw"}
        assert files["eng"].name == "alert_template_eng.tmpl"

    def test_unsupported_extension_ignored(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.txt", "a")
        assert scan_template_files(tmp_path, NamingConvention()) == {}

    def test_empty_language_code_skipped(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_.tmpl", "a")
        assert scan_template_files(tmp_path, NamingConvention()) == {}

    def test_directories_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "alert_template_eng.tmpl").mkdir()
        assert scan_template_files(tmp_path, NamingConvention()) == {}

    def test_higher_priority_extension_wins(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.j2", "simplified")
        _write(tmp_path, "alert_template_eng.tmpl", "native")

        files = scan_template_files(tmp_path, NamingConvention())
        assert files["eng"].suffix == ".tmpl"

    def test_priority_independent_of_enumeration_order(self, tmp_path: Path) -> None:
        j2 = _write(tmp_path, "alert_template_eng.j2", "simplified")
        tmpl = _write(tmp_path, "alert_template_eng.tmpl", "native")

        for order in ([j2, tmpl], [tmpl, j2]):
            with patch.object(Path, "iterdir", return_value=iter(order)):
                files = scan_template_files(tmp_path, NamingConvention())
            assert files["eng"] == tmpl

    def test_custom_priority_order(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.j2", "simplified")
        _write(tmp_path, "alert_template_eng.tmpl", "native")
        naming = NamingConvention(priority_order=[".j2", ".tmpl"])

        files = scan_template_files(tmp_path, naming)
        assert files["eng"].suffix == ".j2"


# ── Loading ─────────────────────────────────────────────────────


class TestTemplateStoreLoad:
    def test_missing_directory(self, tmp_path: Path) -> None:
        store = TemplateStore()
        with pytest.raises(TemplateDirectoryNotFoundError):
            store.load(tmp_path / "nope", NamingConvention())

    def test_no_templates(self, tmp_path: Path) -> None:
        store = TemplateStore()
        with pytest.raises(NoTemplatesFoundError):
            store.load(tmp_path, NamingConvention())

    def test_all_templates_failed(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "{% if %}")
        store = TemplateStore()
        with pytest.raises(AllTemplatesFailedError):
            store.load(tmp_path, NamingConvention())

    def test_partial_failure_keeps_good_templates(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "{{ data.status }}")
        _write(tmp_path, "alert_template_tw.tmpl", "{% for %}")
        store = TemplateStore()

        registry = store.load(tmp_path, NamingConvention())
        assert list(registry) == ["eng"]
        assert store.has("eng")
        assert not store.has("tw")

    def test_native_and_simplified_render(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "native {{ data.status }}")
        _write(tmp_path, "alert_template_tw.j2", "simplified {{ status }}")
        store = TemplateStore()
        store.load(tmp_path, NamingConvention())

        assert _render(store, "eng") == "native firing"
        assert _render(store, "tw") == "simplified firing"

    def test_higher_priority_file_is_rendered(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.j2", "from j2")
        _write(tmp_path, "alert_template_eng.tmpl", "from tmpl")
        store = TemplateStore()
        store.load(tmp_path, NamingConvention())
        assert _render(store, "eng") == "from tmpl"

    def test_snapshot_is_read_only(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "x")
        store = TemplateStore()
        store.load(tmp_path, NamingConvention())
        with pytest.raises(TypeError):
            store.snapshot["tw"] = store.snapshot["eng"]  # type: ignore[index]

    def test_failed_reload_keeps_previous_registry(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "old")
        store = TemplateStore()
        store.load(tmp_path, NamingConvention())

        with pytest.raises(TemplateDirectoryNotFoundError):
            store.load(tmp_path / "gone", NamingConvention())
        assert _render(store, "eng") == "old"

    def test_clear(self, tmp_path: Path) -> None:
        _write(tmp_path, "alert_template_eng.tmpl", "x")
        store = TemplateStore()
        store.load(tmp_path, NamingConvention())
        store.clear()
        assert store.languages() == []


class TestCompileFile:
    def test_syntax_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "alert_template_eng.tmpl", "{% endfor %}")
        with pytest.raises(TemplateParseError):
            TemplateStore().compile_file(path)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(TemplateParseError):
            TemplateStore().compile_file(tmp_path / "missing.tmpl")

    def test_shipped_templates_compile(self) -> None:
        template_dir = Path(__file__).parents[2] / "templates"
        store = TemplateStore()
        registry = store.load(template_dir, NamingConvention())
        assert set(registry) == {"eng", "tw", "zh", "ja", "ko"}
