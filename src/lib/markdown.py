"""
Markdown event parser and HTML serializer

Adapts markdown-it-py to the event stream the rendering pipeline works on.

markdown-it produces a two-level token list: block tokens, some of which are
"inline" containers holding span tokens as children. The pipeline wants one
flat, ordered stream of Start/End/Text/Html events instead, so:

    events_parse()    flattens tokens into events (inline children are
                      spliced in place of their container, fenced and
                      indented code blocks become Start/Text/End triples)
    html_serialize()  regroups events into tokens and hands them to
                      markdown-it's own HTML renderer

Enabled syntax: CommonMark plus tables, strikethrough, footnotes, task lists
and smart punctuation (typographer replacements and smart quotes).

One EventParser is created per render. It owns the markdown-it env, which
carries footnote definitions from parsing through to serialization.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from ..models.events import (
    CodeBlock,
    Element,
    End,
    Event,
    Fenced,
    Heading,
    Html,
    Indented,
    Passthrough,
    Start,
    Tag,
    Text,
)


def markdown_make() -> MarkdownIt:
    """Build a markdown-it instance with the notebook's extension set"""
    md = MarkdownIt("commonmark", {"typographer": True})
    md.enable(["table", "strikethrough", "replacements", "smartquotes"])
    md.use(footnote_plugin)
    md.use(tasklists_plugin)
    return md


def tag_fromToken(token: Token) -> Tag:
    """
    Map an opening or closing markdown-it token to its Tag

    Args:
        token: Token with nesting 1 or -1

    Returns:
        Heading for h1..h6, Element named after the token type otherwise
        ("paragraph_open" and "paragraph_close" both give Element("paragraph"))
    """
    if token.type in ("heading_open", "heading_close"):
        return Heading(int(token.tag[1:]))
    name = token.type.removesuffix("_open").removesuffix("_close")
    return Element(name)


class EventParser:
    """
    Markdown source to event stream, event stream to HTML

    Attributes:
        md: Configured MarkdownIt instance
        env: markdown-it environment shared by parse and render
    """

    def __init__(self, md: Optional[MarkdownIt] = None) -> None:
        self.md = md or markdown_make()
        self.env: Dict[str, Any] = {}

    def events_parse(self, source: str) -> Iterator[Event]:
        """
        Parse Markdown source into a single-pass event stream

        Args:
            source: Markdown text

        Returns:
            Iterator over events in document order
        """
        tokens = self.md.parse(source, self.env)
        return self.tokens_flatten(tokens, inline=False)

    def tokens_flatten(self, tokens: Iterable[Token], inline: bool) -> Iterator[Event]:
        for token in tokens:
            if token.type == "inline":
                yield from self.tokens_flatten(token.children or [], inline=True)
            elif token.type in ("fence", "code_block"):
                if token.type == "fence":
                    tag = CodeBlock(Fenced(unescapeAll(token.info).strip()))
                else:
                    tag = CodeBlock(Indented())
                yield Start(tag, token, inline)
                yield Text(token.content, token, inline)
                yield End(tag, token, inline)
            elif token.type in ("html_block", "html_inline"):
                yield Html(token.content, token, inline)
            elif token.type == "text":
                yield Text(token.content, token, inline)
            elif token.nesting == 1:
                yield Start(tag_fromToken(token), token, inline)
            elif token.nesting == -1:
                yield End(tag_fromToken(token), token, inline)
            else:
                yield Passthrough(token.type, token, inline)

    def token_make(self, event: Event) -> Token:
        """
        Build a token for an event that does not carry one

        Only Html and Text events can be created outside the parser (the
        diagram transformer emits them in place of code blocks).

        Raises:
            ValueError: For any other tokenless event
        """
        if isinstance(event, Html):
            kind = "html_inline" if event.inline else "html_block"
            return Token(kind, "", 0, content=event.html, block=not event.inline)
        if isinstance(event, Text):
            return Token("text", "", 0, content=event.text, block=not event.inline)
        raise ValueError(f"Cannot serialize {event!r}: no source token")

    def tokens_rebuild(self, events: Iterable[Event]) -> List[Token]:
        """
        Regroup events into a markdown-it token list

        Inline events are collected under a fresh "inline" container.
        Consecutive events sharing one token (the Start/Text/End triple of a
        code block) contribute that token once.
        """
        tokens: List[Token] = []
        group: Optional[Token] = None
        previous: Optional[Token] = None

        for event in events:
            token = event.token
            if token is not None and token is previous:
                continue
            previous = token
            if token is None:
                token = self.token_make(event)

            if event.inline:
                if group is None:
                    group = Token("inline", "", 0, children=[])
                    tokens.append(group)
                group.children.append(token)
            else:
                group = None
                tokens.append(token)

        return tokens

    def html_serialize(self, events: Iterable[Event]) -> str:
        """
        Render events to an HTML fragment

        Args:
            events: Event stream, typically transformed and buffered

        Returns:
            HTML body fragment (empty string for an empty stream)
        """
        tokens = self.tokens_rebuild(events)
        return self.md.renderer.render(tokens, self.md.options, self.env)
