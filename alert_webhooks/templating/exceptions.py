"""Template loading and rendering exceptions."""

from __future__ import annotations


class TemplateError(Exception):
    """Base exception for all templating errors."""


class TemplateDirectoryNotFoundError(TemplateError):
    """The template directory does not exist."""


class NoTemplatesFoundError(TemplateError):
    """No file in the directory matched the naming convention."""


class AllTemplatesFailedError(TemplateError):
    """Template files were found but none of them parsed."""


class TemplateParseError(TemplateError):
    """A single template file could not be read or compiled."""


class TemplateNotFoundError(TemplateError):
    """No compiled template exists for the requested language."""


class RenderFailedError(TemplateError):
    """Executing a compiled template against the data model failed."""
