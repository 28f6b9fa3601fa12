"""
Markup event and tag models

Defines the event stream vocabulary shared by the Markdown adapter, the
diagram transformer, the heading extractor and the HTML serializer.

Every event keeps a reference to the markdown-it token it was built from so
the serializer can hand the original token back to markdown-it's renderer.
Tokens and the inline flag are excluded from equality: two events are equal
when they mean the same thing, which keeps event lists easy to compare.

Example:
    >>> Start(Heading(1)) == Start(Heading(1))
    True
    >>> Text("Hello")
    Text(text='Hello')
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Fenced:
    """Code block opened by a backtick or tilde fence, with its language label"""
    label: str


@dataclass(frozen=True)
class Indented:
    """Code block introduced by indentation (no language label)"""


CodeBlockKind = Union[Fenced, Indented]


@dataclass(frozen=True)
class CodeBlock:
    kind: CodeBlockKind


@dataclass(frozen=True)
class Heading:
    """ATX or setext heading, level 1..6"""
    level: int


@dataclass(frozen=True)
class Element:
    """
    Any other block or span tag

    The name is the markdown-it token type with its _open/_close suffix
    removed (e.g. "paragraph", "em", "table", "footnote_block").
    """
    name: str


Tag = Union[CodeBlock, Heading, Element]


@dataclass(frozen=True)
class Start:
    tag: Tag
    token: Optional[Any] = field(default=None, compare=False, repr=False)
    inline: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class End:
    tag: Tag
    token: Optional[Any] = field(default=None, compare=False, repr=False)
    inline: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class Text:
    text: str
    token: Optional[Any] = field(default=None, compare=False, repr=False)
    inline: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class Html:
    html: str
    token: Optional[Any] = field(default=None, compare=False, repr=False)
    inline: bool = field(default=False, compare=False, repr=False)


@dataclass(frozen=True)
class Passthrough:
    """
    Event the pipeline never inspects (rules, breaks, inline code, images...)

    Attributes:
        kind: markdown-it token type, kept for readability and comparison
        token: The token to hand back to the renderer unchanged
    """
    kind: str
    token: Optional[Any] = field(default=None, compare=False, repr=False)
    inline: bool = field(default=False, compare=False, repr=False)


Event = Union[Start, End, Text, Html, Passthrough]
