"""
Mustache template binding

Binds the document title and rendered HTML body into a mustache template
using chevron. Templates choose their own escaping: {{title}} is
HTML-escaped, {{{content}}} (or {{& content}}) is inserted verbatim, which is
what the already-rendered body needs.
"""

from pathlib import Path
from typing import Any, Dict, Union

import chevron
from chevron.tokenizer import ChevronError

from .log import LOG


class TemplateError(Exception):
    """Raised when a template cannot be loaded or expanded"""
    pass


DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{title}}</title>
<style>
body {
  max-width: 46em;
  margin: 2em auto;
  padding: 0 1em;
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
  line-height: 1.5;
  color: #24292f;
}
pre { padding: 1em; overflow: auto; background: #f6f8fa; border-radius: 4px; }
code { font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace; }
table { border-collapse: collapse; }
th, td { padding: 0.3em 0.8em; border: 1px solid #d0d7de; }
svg { display: block; max-width: 100%; height: auto; margin: 1em auto; }
blockquote { margin: 0; padding: 0 1em; color: #57606a; border-left: 0.25em solid #d0d7de; }
.footnotes { font-size: 0.9em; }
</style>
</head>
<body>
{{{content}}}
</body>
</html>
"""


class Template:
    """
    A mustache template ready to be rendered any number of times

    Attributes:
        source: Template text
        name: Where the template came from, used in error messages
    """

    def __init__(self, source: str = DEFAULT_TEMPLATE, name: str = "<default>") -> None:
        self.source = source
        self.name = name

    @classmethod
    def fromFile(cls, path: Union[str, Path]) -> "Template":
        """
        Load a template from disk

        Raises:
            TemplateError: If the file cannot be read or decoded
        """
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(f"Failed to load template {path}: {e}")
        LOG(f"Loaded template {path} ({len(source)} characters)", level=2)
        return cls(source, name=str(path))

    def render(self, context: Dict[str, Any]) -> str:
        """
        Expand the template against a context

        Args:
            context: Mapping of placeholder names to values
                     (the pipeline passes {"title": ..., "content": ...})

        Returns:
            Expanded document text

        Raises:
            TemplateError: On template syntax errors
        """
        try:
            return chevron.render(self.source, context)
        except ChevronError as e:
            raise TemplateError(f"Template {self.name}: {e}")
