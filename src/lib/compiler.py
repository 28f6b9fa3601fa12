"""
Compiler for Markdown notebooks to standalone HTML

Runs the rendering pipeline for one document:

    source text
      -> EventParser.events_parse()   markdown-it event stream
      -> PikchrTransformer            pikchr fences become inline SVG
      -> list()                       buffered: two consumers follow
      -> heading_extract()            title
      -> EventParser.html_serialize() content
      -> Template.render()            output document

Nothing survives between renders. The server builds the whole pipeline
again for every request, so edits to the source show up on reload.
"""

import sys
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from ..config import appsettings
from .heading import heading_extract
from .log import LOG
from .markdown import EventParser
from .template import Template
from .transformer import PikchrTransformer


class InputError(Exception):
    """Raised when the source document cannot be read"""
    pass


class OutputError(Exception):
    """Raised when the rendered document cannot be written"""
    pass


class Compiler:
    """
    Compiles Markdown source to a complete HTML document

    Responsibilities:
    - Read the source document
    - Parse, transform and buffer the event stream
    - Extract the title and serialize the body
    - Bind both into the template
    - Write the finished document to its sink
    """

    def __init__(
        self,
        template: Optional[Template] = None,
        render: Optional[Callable[[str], str]] = None,
        language: Optional[str] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            template: Output template (built-in default if omitted)
            render: Diagram renderer, str -> svg str, raising DiagramError.
                    Defaults to the pikchr executable.
            language: Fence label of diagram blocks (settings default)
        """
        self.template = template or Template()
        self.render = render
        self.language = language or appsettings.diagram_language

    def source_read(self, path: Union[str, Path]) -> str:
        """
        Read the Markdown source

        Raises:
            InputError: File missing, unreadable or not UTF-8
        """
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"Failed to read {path}: {e}")
        LOG(f"Read {len(source)} characters from {path}", level=2)
        return source

    def html_compile(self, source: str) -> Tuple[str, str]:
        """
        Render Markdown to a title and an HTML body fragment

        Args:
            source: Markdown text

        Returns:
            (title, content); title is "" when there is no level-1 heading
        """
        parser = EventParser()
        events = list(
            PikchrTransformer(
                parser.events_parse(source),
                render=self.render,
                language=self.language,
            )
        )
        LOG(f"Parsed {len(events)} events", level=3)

        title = heading_extract(events) or ""
        content = parser.html_serialize(events)
        LOG(f"Title: {title!r}, body {len(content)} characters", level=2)
        return title, content

    def document_render(self, source: str) -> str:
        """
        Render Markdown source to the complete output document

        Raises:
            TemplateError: Template expansion failed
        """
        title, content = self.html_compile(source)
        return self.template.render({"title": title, "content": content})

    def document_compile(self, path: Union[str, Path]) -> str:
        """Read and render the document at path"""
        return self.document_render(self.source_read(path))

    def document_write(self, document: str, output: Optional[str] = None) -> None:
        """
        Write a rendered document to a file, or stdout when output is None

        The document is complete before the sink is opened, so a failed
        render never leaves a truncated output file behind.

        Raises:
            OutputError: The sink could not be written
        """
        try:
            if output is None:
                sys.stdout.write(document)
                sys.stdout.flush()
            else:
                Path(output).write_text(document, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Failed to write {output or '<stdout>'}: {e}")
        LOG(f"Wrote {len(document)} characters to {output or '<stdout>'}", level=2)
