"""
Pikchr code block transformer

Stream filter that replaces fenced code blocks labelled "pikchr" with the
rendered diagram:

    Start(CodeBlock(Fenced("pikchr"))), Text(source), End(...)
        -> Html(svg)            when the diagram renders
        -> Text(error message)  when it does not

Every other event passes through unchanged and in order. The filter looks
at most two events past a matching fence start and never buffers more.
"""

from typing import Callable, Iterable, Iterator, Optional

from ..models.events import CodeBlock, End, Event, Fenced, Html, Start, Text
from .log import LOG
from .pikchr import DiagramError, Pikchr


class MalformedStreamError(RuntimeError):
    """Raised when a fenced code block is not Start, Text, End"""
    pass


class PikchrTransformer:
    """
    Iterator wrapping an event stream

    Args:
        events: Upstream event stream (consumed lazily)
        render: Callable compiling diagram source to SVG, raising DiagramError
                on failure. Defaults to the pikchr executable.
        language: Fence label selecting diagram blocks, compared exactly

    Example:
        >>> events = EventParser().events_parse(source)
        >>> transformed = list(PikchrTransformer(events))
    """

    def __init__(
        self,
        events: Iterable[Event],
        render: Optional[Callable[[str], str]] = None,
        language: str = "pikchr",
    ) -> None:
        self.events: Iterator[Event] = iter(events)
        self.render = render or Pikchr().render
        self.language = language
        self.diagram_count = 0

    def __iter__(self) -> "PikchrTransformer":
        return self

    def __next__(self) -> Event:
        event = next(self.events)

        if not isinstance(event, Start):
            return event
        if not isinstance(event.tag, CodeBlock):
            return event
        if not isinstance(event.tag.kind, Fenced):
            return event
        if event.tag.kind.label != self.language:
            return event

        body = next(self.events, None)
        if not isinstance(body, Text):
            raise MalformedStreamError(
                f"Fenced {self.language} block must contain a text event, got {body!r}"
            )
        close = next(self.events, None)
        if not isinstance(close, End):
            raise MalformedStreamError(
                f"Fenced {self.language} block must be closed, got {close!r}"
            )

        self.diagram_count += 1
        return self.diagram_render(body.text)

    def diagram_render(self, source: str) -> Event:
        """
        Render one diagram to its replacement event

        Errors are shown in the document rather than aborting the render.
        """
        try:
            svg = self.render(source)
        except DiagramError as e:
            LOG(f"Diagram {self.diagram_count} failed: {e}", level=1)
            return Text(str(e))
        LOG(f"Diagram {self.diagram_count} rendered ({len(svg)} bytes)", level=2)
        return Html(svg)
