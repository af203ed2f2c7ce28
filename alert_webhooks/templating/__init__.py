"""Templating subsystem — template discovery, dialect translation and rendering."""

from alert_webhooks.templating.builtin import format_builtin_message
from alert_webhooks.templating.engine import TemplateEngine
from alert_webhooks.templating.exceptions import (
    AllTemplatesFailedError,
    NoTemplatesFoundError,
    RenderFailedError,
    TemplateDirectoryNotFoundError,
    TemplateError,
    TemplateNotFoundError,
    TemplateParseError,
)
from alert_webhooks.templating.profiles import (
    get_format_options,
    load_template_config,
)
from alert_webhooks.templating.store import TemplateStore
from alert_webhooks.templating.translator import translate
from alert_webhooks.templating.types import (
    AlertData,
    FormatOptions,
    LanguageConfig,
    NamingConvention,
    TemplateConfig,
    TemplateData,
    ToggleOption,
    ValueOption,
)

__all__ = [
    "AlertData",
    "AllTemplatesFailedError",
    "FormatOptions",
    "LanguageConfig",
    "NamingConvention",
    "NoTemplatesFoundError",
    "RenderFailedError",
    "TemplateConfig",
    "TemplateData",
    "TemplateDirectoryNotFoundError",
    "TemplateEngine",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateParseError",
    "TemplateStore",
    "ToggleOption",
    "ValueOption",
    "format_builtin_message",
    "get_format_options",
    "load_template_config",
    "translate",
]
