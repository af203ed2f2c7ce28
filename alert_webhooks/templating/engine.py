"""Template engine — renders alert data with per-language templates."""

from __future__ import annotations

import threading
from pathlib import Path

import jinja2
import structlog

from alert_webhooks.templating import profiles
from alert_webhooks.templating.exceptions import RenderFailedError, TemplateNotFoundError
from alert_webhooks.templating.store import Registry, TemplateStore
from alert_webhooks.templating.types import (
    FormatOptions,
    LanguageConfig,
    TemplateConfig,
    TemplateData,
)

logger = structlog.get_logger(__name__)

_PREVIEW_CHARS = 200


class TemplateEngine:
    """Owns the active TemplateConfig and the compiled-template registry.

    Usage::

        engine = TemplateEngine(config_dir="config")
        engine.load_config("minimal")
        engine.load_templates("templates")
        text = engine.render_for_platform(engine.get_default_language("tw"), "slack", data)
    """

    def __init__(
        self,
        config: TemplateConfig | None = None,
        *,
        config_dir: str | Path = profiles.DEFAULT_CONFIG_DIR,
        store: TemplateStore | None = None,
    ) -> None:
        self._config_dir = Path(config_dir)
        self._config = config or profiles.full_default_config()
        self._store = store or TemplateStore()
        self._config_lock = threading.Lock()

    # ── Configuration ───────────────────────────────────────────

    @property
    def config(self) -> TemplateConfig:
        return self._config

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    def load_config(self, profile: str = profiles.FULL) -> TemplateConfig:
        """Swap in the TemplateConfig for *profile* (file, else hard-coded)."""
        config = profiles.load_template_config(profile, self._config_dir)
        with self._config_lock:
            self._config = config
        return config

    def get_format_options(self, profile: str) -> FormatOptions:
        return profiles.get_format_options(profile, self._config_dir)

    def current_format_options(self) -> FormatOptions:
        return self._config.format_options

    # ── Loading ─────────────────────────────────────────────────

    def load_templates(self, directory: str | Path) -> Registry:
        return self._store.load(directory, self._config.naming_convention)

    def reload_templates(self, directory: str | Path) -> Registry:
        """Rebuild the registry from disk and publish it in one step.

        Renders already holding the previous registry finish with it.
        """
        registry = self._store.load(directory, self._config.naming_convention)
        logger.info("templates_reloaded", template_dir=str(directory), languages=list(registry))
        return registry

    def validate_template(self, path: str | Path) -> None:
        """Raise TemplateParseError if *path* does not compile."""
        self._store.compile_file(path)

    # ── Languages ───────────────────────────────────────────────

    def available_languages(self) -> list[str]:
        return self._store.languages()

    def supported_languages(self) -> list[str]:
        return [lang.code for lang in self._config.supported_languages]

    def supported_language_details(self) -> list[LanguageConfig]:
        return list(self._config.supported_languages)

    def has_language(self, language: str) -> bool:
        return self._store.has(language)

    def get_default_language(self, preferred: str) -> str:
        """Resolve *preferred* to a language that has a compiled template.

        Order: *preferred* itself, then ``fallback_order``, then the first
        loaded language. With nothing loaded *preferred* is returned unchanged
        so the subsequent render reports TemplateNotFoundError.
        """
        registry = self._store.snapshot
        if preferred in registry:
            return preferred
        for fallback in self._config.fallback_order:
            if fallback in registry:
                return fallback
        for language in registry:
            return language
        return preferred

    # ── Rendering ───────────────────────────────────────────────

    def render(self, language: str, data: TemplateData) -> str:
        """Render *data* with the template for *language*.

        Unset format options are resolved against the active config.

        Raises:
            TemplateNotFoundError: no template is loaded for *language*.
            RenderFailedError: template execution failed.
        """
        template = self._store.get(language)
        if template is None:
            raise TemplateNotFoundError(f"template for language '{language}' not found")

        if data.format_options.is_unset():
            logger.debug("format_options_from_config", language=language)
        options = data.format_options.merged_with(self._config.format_options)
        data = data.model_copy(update={"format_options": options})

        try:
            return template.render(data=data)
        except (jinja2.TemplateError, TypeError, ValueError, AttributeError, KeyError) as e:
            raise RenderFailedError(f"failed to execute template '{language}': {e}") from e

    def render_for_platform(self, language: str, platform: str, data: TemplateData) -> str:
        """Render with ``data.platform`` set so markup helpers target *platform*."""
        data = data.model_copy(update={"platform": platform})
        try:
            rendered = self.render(language, data)
        except (TemplateNotFoundError, RenderFailedError) as e:
            logger.error(
                "template_render_failed", language=language, platform=platform, error=str(e)
            )
            raise

        logger.debug(
            "template_rendered",
            language=language,
            platform=platform,
            result_length=len(rendered),
            result_preview=rendered[:_PREVIEW_CHARS],
        )
        return rendered
