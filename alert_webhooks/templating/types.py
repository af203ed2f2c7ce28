"""Domain types for template configuration and template data."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ToggleOption(BaseModel):
    """A boolean display toggle with a human description."""

    enabled: bool = False
    description: str = ""


class ValueOption(BaseModel):
    """An integer display setting with a human description."""

    value: int = 0
    description: str = ""


class FormatOptions(BaseModel):
    """Display toggles controlling optional message elements.

    Every field is optional: ``None`` means "not provided" and is resolved
    against a fallback by :meth:`merged_with`. Explicit ``False`` / ``0`` values
    are never replaced.
    """

    show_links: ToggleOption | None = None
    show_timestamps: ToggleOption | None = None
    show_external_url: ToggleOption | None = None
    show_generator_url: ToggleOption | None = None
    show_emoji: ToggleOption | None = None
    compact_mode: ToggleOption | None = None
    max_summary_length: ValueOption | None = None

    def is_unset(self) -> bool:
        """True when no field was explicitly provided."""
        return not any(getattr(self, name) is not None for name in type(self).model_fields)

    def merged_with(self, fallback: FormatOptions) -> FormatOptions:
        """Return a copy where every unset field is taken from *fallback*."""
        update = {
            name: getattr(fallback, name)
            for name in type(self).model_fields
            if getattr(self, name) is None
        }
        return self.model_copy(update=update)

    def enabled(self, name: str) -> bool:
        """Shorthand for ``getattr(self, name).enabled`` that treats unset as off."""
        option = getattr(self, name)
        return bool(option is not None and option.enabled)

    def summary_limit(self) -> int:
        """``max_summary_length`` as an int, 0 when unset."""
        option = self.max_summary_length
        return option.value if option is not None else 0


class LanguageConfig(BaseModel):
    """One entry of ``supported_languages``."""

    code: str
    name: str = ""
    description: str = ""
    fallback: bool = False


class NamingConvention(BaseModel):
    """How template files are named on disk."""

    prefix: str = "alert_template_"
    supported_extensions: list[str] = Field(default_factory=lambda: [".tmpl", ".j2"])
    priority_order: list[str] = Field(default_factory=lambda: [".tmpl", ".j2"])

    def extension_priority(self, ext: str) -> int:
        """Lower is better; extensions missing from ``priority_order`` rank last."""
        try:
            return self.priority_order.index(ext)
        except ValueError:
            return len(self.priority_order)


class TemplateConfig(BaseModel):
    """The ``template_config`` section of a profile file.

    Treated as immutable once loaded; a reload replaces the whole object.
    """

    model_config = ConfigDict(frozen=True)

    version: str = "1.0.0"
    supported_languages: list[LanguageConfig] = Field(default_factory=list)
    fallback_order: list[str] = Field(default_factory=list)
    naming_convention: NamingConvention = Field(default_factory=NamingConvention)
    format_options: FormatOptions = Field(default_factory=FormatOptions)


class AlertData(BaseModel):
    """A single alert as seen by templates."""

    model_config = ConfigDict(frozen=True)

    status: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    starts_at: str = ""
    ends_at: str = ""
    generator_url: str = ""


class TemplateData(BaseModel):
    """Everything a template can reference, derived per render call."""

    status: str = ""
    alert_name: str = ""
    env: str = ""
    severity: str = ""
    namespace: str = ""
    total_alerts: int = 0
    firing_count: int = 0
    resolved_count: int = 0
    alerts: list[AlertData] = Field(default_factory=list)
    external_url: str = ""
    format_options: FormatOptions = Field(default_factory=FormatOptions)
    platform: str = ""
