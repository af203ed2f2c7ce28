"""Per-language template discovery and the compiled-template registry."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

import jinja2
import structlog

from alert_webhooks.templating.exceptions import (
    AllTemplatesFailedError,
    NoTemplatesFoundError,
    TemplateDirectoryNotFoundError,
    TemplateParseError,
)
from alert_webhooks.templating.formatting import TEMPLATE_GLOBALS
from alert_webhooks.templating.translator import needs_translation, translate
from alert_webhooks.templating.types import NamingConvention

logger = structlog.get_logger(__name__)

Registry = Mapping[str, jinja2.Template]

_EMPTY: Registry = MappingProxyType({})


def build_environment() -> jinja2.Environment:
    """Jinja2 environment shared by every compiled template."""
    env = jinja2.Environment(
        loader=jinja2.BaseLoader(),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )
    env.globals.update(TEMPLATE_GLOBALS)
    return env


def _match_extension(file_name: str, naming: NamingConvention) -> str | None:
    for ext in naming.supported_extensions:
        if file_name.endswith(ext):
            return ext
    return None


def scan_template_files(directory: str | Path, naming: NamingConvention) -> dict[str, Path]:
    """Map language code -> template path for every qualifying file.

    Files are visited in name order. When two files share a language code the
    one whose extension ranks earlier in ``priority_order`` wins; ties keep the
    first one seen.
    """
    found: dict[str, tuple[Path, str]] = {}

    for path in sorted(Path(directory).iterdir()):
        if not path.is_file() or not path.name.startswith(naming.prefix):
            continue
        ext = _match_extension(path.name, naming)
        if ext is None:
            continue

        language = path.name[len(naming.prefix) : len(path.name) - len(ext)]
        if not language:
            logger.warning("template_file_name_invalid", file_name=path.name)
            continue

        existing = found.get(language)
        if existing is None:
            found[language] = (path, ext)
            logger.debug("template_file_found", language=language, path=str(path))
            continue

        existing_path, existing_ext = existing
        if naming.extension_priority(ext) < naming.extension_priority(existing_ext):
            found[language] = (path, ext)
            logger.info(
                "template_file_replaced",
                language=language,
                new_path=str(path),
                old_path=str(existing_path),
            )
        else:
            logger.info(
                "template_file_skipped",
                language=language,
                kept_path=str(existing_path),
                skipped_path=str(path),
            )

    return {language: path for language, (path, _ext) in found.items()}


class TemplateStore:
    """Loads templates from disk and serves them from an immutable snapshot.

    Writers build a complete registry off to the side and publish it with a
    single assignment; readers grab :attr:`snapshot` once and never observe a
    half-built registry.
    """

    def __init__(self, environment: jinja2.Environment | None = None) -> None:
        self._env = environment or build_environment()
        self._templates: Registry = _EMPTY
        self._write_lock = threading.Lock()

    @property
    def snapshot(self) -> Registry:
        return self._templates

    def get(self, language: str) -> jinja2.Template | None:
        return self._templates.get(language)

    def has(self, language: str) -> bool:
        return language in self._templates

    def languages(self) -> list[str]:
        return list(self._templates)

    def compile_file(self, path: str | Path) -> jinja2.Template:
        """Read one template file, translating it unless it is native.

        Raises:
            TemplateParseError: unreadable file or invalid template syntax.
        """
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateParseError(f"cannot read template {path}: {e}") from e

        if needs_translation(path.suffix):
            source = translate(source)
            logger.debug("template_translated", path=str(path), length=len(source))

        try:
            return self._env.from_string(source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateParseError(f"failed to parse template {path}: {e}") from e

    def load(self, directory: str | Path, naming: NamingConvention) -> Registry:
        """Scan *directory*, compile every selected file and publish the result.

        Individual parse failures are logged and skipped. On any raised error
        the previously published registry stays in place.

        Raises:
            TemplateDirectoryNotFoundError: *directory* does not exist.
            NoTemplatesFoundError: no file matched the naming convention.
            AllTemplatesFailedError: every matching file failed to parse.
        """
        directory = Path(directory)
        logger.info("template_load_started", template_dir=str(directory))

        if not directory.is_dir():
            raise TemplateDirectoryNotFoundError(
                f"template directory does not exist: {directory}"
            )

        files = scan_template_files(directory, naming)
        if not files:
            raise NoTemplatesFoundError(f"no template files found in directory: {directory}")

        compiled: dict[str, jinja2.Template] = {}
        for language, path in files.items():
            try:
                compiled[language] = self.compile_file(path)
            except TemplateParseError as e:
                logger.warning(
                    "template_load_failed", language=language, path=str(path), error=str(e)
                )
                continue
            logger.info("template_loaded", language=language, path=str(path))

        if not compiled:
            raise AllTemplatesFailedError(f"failed to load any templates from directory: {directory}")

        registry: Registry = MappingProxyType(compiled)
        with self._write_lock:
            self._templates = registry

        logger.info(
            "template_load_completed",
            template_dir=str(directory),
            loaded_count=len(compiled),
            total_found=len(files),
        )
        return registry

    def clear(self) -> None:
        with self._write_lock:
            self._templates = _EMPTY
