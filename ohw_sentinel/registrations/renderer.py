"""
Message renderer using Jinja2.

Templates are written with ``{{name}}`` placeholders. The template text itself
is the i18n key: when the translation catalog has an entry for it, the
translated text is rendered instead.
"""
import logging
from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from .errors import RenderError

logger = logging.getLogger(__name__)


class MessageRenderer:
    """
    Renders message templates with variable substitution.

    Missing variables are errors (StrictUndefined), so a broken translation
    surfaces as RenderError instead of an SMS with a blank in it.
    """

    def __init__(self, translations: Optional[Mapping[str, str]] = None, locale: str = "en"):
        self.translations: Dict[str, str] = dict(translations or {})
        self.locale = locale
        self._env = Environment(
            autoescape=False,  # Plain-text SMS
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self._cache: Dict[str, Template] = {}

    def translate(self, template: str) -> str:
        return self.translations.get(template, template)

    def render(self, template: str, context: Mapping[str, Any], translate: bool = True) -> str:
        """
        Render ``template`` with ``context``.

        Raises:
            RenderError: If the template is invalid or references a missing variable
        """
        source = self.translate(template) if translate else template
        try:
            compiled = self._cache.get(source)
            if compiled is None:
                compiled = self._env.from_string(source)
                self._cache[source] = compiled
            return compiled.render(**context)
        except TemplateError as e:
            logger.debug(f"Template render failed ({self.locale}): {source!r}")
            raise RenderError(f"Failed to render message template: {e}") from e
