"""Format profile resolution — profile file first, hard-coded default second.

Two profiles ship with the service: ``full`` (``alert_config.yaml``) and
``minimal`` (``alert_config.minimal.yaml``). A missing or unparsable profile
file is never fatal: the hard-coded profile of the same shape is used instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from alert_webhooks.templating.types import (
    FormatOptions,
    LanguageConfig,
    NamingConvention,
    TemplateConfig,
    ToggleOption,
    ValueOption,
)

logger = structlog.get_logger(__name__)

FULL = "full"
MINIMAL = "minimal"

DEFAULT_CONFIG_DIR = Path("config")

_DESCRIPTIONS = {
    "show_links": "Show hyperlinks",
    "show_timestamps": "Show start/end timestamps",
    "show_external_url": "Show the Alertmanager external URL",
    "show_generator_url": "Show the per-alert generator URL",
    "show_emoji": "Show emoji",
    "compact_mode": "Compact mode (simplified layout)",
    "max_summary_length": "Maximum summary length",
}


def _options(
    *,
    links: bool,
    timestamps: bool,
    external_url: bool,
    generator_url: bool,
    emoji: bool,
    compact: bool,
    max_summary: int,
) -> FormatOptions:
    def toggle(name: str, enabled: bool) -> ToggleOption:
        return ToggleOption(enabled=enabled, description=_DESCRIPTIONS[name])

    return FormatOptions(
        show_links=toggle("show_links", links),
        show_timestamps=toggle("show_timestamps", timestamps),
        show_external_url=toggle("show_external_url", external_url),
        show_generator_url=toggle("show_generator_url", generator_url),
        show_emoji=toggle("show_emoji", emoji),
        compact_mode=toggle("compact_mode", compact),
        max_summary_length=ValueOption(
            value=max_summary, description=_DESCRIPTIONS["max_summary_length"]
        ),
    )


def full_default_config() -> TemplateConfig:
    """Hard-coded ``full`` profile: every element shown."""
    return TemplateConfig(
        version="1.0.0",
        supported_languages=[
            LanguageConfig(code="eng", name="English", description="English template", fallback=True),
            LanguageConfig(code="tw", name="繁體中文", description="Traditional Chinese template"),
            LanguageConfig(code="zh", name="简体中文", description="Simplified Chinese template"),
            LanguageConfig(code="ko", name="한국어", description="Korean template"),
            LanguageConfig(code="ja", name="日本語", description="Japanese template"),
        ],
        fallback_order=["eng", "tw", "zh", "ko", "ja", "en"],
        naming_convention=NamingConvention(),
        format_options=_options(
            links=True,
            timestamps=True,
            external_url=True,
            generator_url=True,
            emoji=True,
            compact=False,
            max_summary=200,
        ),
    )


def minimal_default_config() -> TemplateConfig:
    """Hard-coded ``minimal`` profile: compact, no links or emoji."""
    return TemplateConfig(
        version="1.0.0",
        supported_languages=[
            LanguageConfig(code="eng", name="English", description="English template", fallback=True),
            LanguageConfig(code="tw", name="繁體中文", description="Traditional Chinese template"),
            LanguageConfig(code="zh", name="简体中文", description="Simplified Chinese template"),
            LanguageConfig(code="ko", name="한국어", description="Korean template"),
        ],
        fallback_order=["eng", "tw", "zh", "en"],
        naming_convention=NamingConvention(),
        format_options=_options(
            links=False,
            timestamps=False,
            external_url=False,
            generator_url=False,
            emoji=False,
            compact=True,
            max_summary=100,
        ),
    )


def default_config(profile: str) -> TemplateConfig:
    if profile == MINIMAL:
        return minimal_default_config()
    return full_default_config()


def profile_path(profile: str, config_dir: str | Path = DEFAULT_CONFIG_DIR) -> Path:
    """``full`` (or empty) maps to ``alert_config.yaml``, others to ``alert_config.<profile>.yaml``."""
    if not profile or profile == FULL:
        return Path(config_dir) / "alert_config.yaml"
    return Path(config_dir) / f"alert_config.{profile}.yaml"


def read_template_config(path: str | Path) -> TemplateConfig:
    """Parse the ``template_config`` section of a profile file.

    Raises:
        OSError: The file could not be read.
        ValueError: The YAML is malformed or does not match the schema.
    """
    with open(path, encoding="utf-8") as f:
        try:
            raw: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict) or not isinstance(raw.get("template_config"), dict):
        raise ValueError(f"{path} has no template_config section")

    try:
        return TemplateConfig.model_validate(raw["template_config"])
    except ValidationError as e:
        raise ValueError(f"invalid template_config in {path}: {e}") from e


def load_template_config(
    profile: str = FULL,
    config_dir: str | Path = DEFAULT_CONFIG_DIR,
) -> TemplateConfig:
    """Resolve *profile* to a complete TemplateConfig.

    Format options missing from the file are filled from the hard-coded
    profile, so the result is always fully populated.
    """
    path = profile_path(profile, config_dir)
    fallback = default_config(profile)
    try:
        loaded = read_template_config(path)
    except (OSError, ValueError) as e:
        logger.warning(
            "template_config_fallback",
            profile=profile or FULL,
            path=str(path),
            error=str(e),
        )
        return fallback

    config = loaded.model_copy(
        update={"format_options": loaded.format_options.merged_with(fallback.format_options)}
    )
    logger.info(
        "template_config_loaded",
        profile=profile or FULL,
        path=str(path),
        version=config.version,
        supported_languages=len(config.supported_languages),
    )
    return config


def get_format_options(
    profile: str,
    config_dir: str | Path = DEFAULT_CONFIG_DIR,
) -> FormatOptions:
    """FormatOptions of *profile* (``full`` or ``minimal``)."""
    return load_template_config(profile, config_dir).format_options
