"""
Title extraction tests
"""

from mdnotebook.lib.heading import heading_extract
from mdnotebook.lib.markdown import EventParser
from mdnotebook.models.events import (
    Element,
    End,
    Heading,
    Html,
    Passthrough,
    Start,
    Text,
)


def title_of(source):
    return heading_extract(list(EventParser().events_parse(source)))


class TestFromEvents:
    """Test the extraction rule on hand-built streams"""

    def test_first_text_in_h1(self):
        events = [Start(Heading(1)), Text("Hello"), Text(" world"), End(Heading(1))]
        assert heading_extract(events) == "Hello"

    def test_empty_stream(self):
        assert heading_extract([]) is None

    def test_lower_level_headings_ignored(self):
        events = [Start(Heading(2)), Text("Section"), End(Heading(2))]
        assert heading_extract(events) is None

    def test_h1_after_h2(self):
        events = [
            Start(Heading(2)), Text("Sub"), End(Heading(2)),
            Start(Heading(1)), Text("Main"), End(Heading(1)),
        ]
        assert heading_extract(events) == "Main"

    def test_formatted_first_child_gives_nothing(self):
        """A nested tag start ends the search in that heading"""
        events = [
            Start(Heading(1)),
            Start(Element("em")), Text("Hello"), End(Element("em")),
            End(Heading(1)),
        ]
        assert heading_extract(events) is None

    def test_later_plain_h1_is_found(self):
        """A formatted h1 does not hide a later plain one"""
        events = [
            Start(Heading(1)), Start(Element("em")), Text("A"), End(Element("em")), End(Heading(1)),
            Start(Heading(1)), Text("B"), End(Heading(1)),
        ]
        assert heading_extract(events) == "B"

    def test_text_outside_heading_ignored(self):
        events = [
            Start(Element("paragraph")), Text("intro"), End(Element("paragraph")),
            Start(Heading(1)), End(Heading(1)),
            Start(Element("paragraph")), Text("after"), End(Element("paragraph")),
        ]
        assert heading_extract(events) is None

    def test_non_tag_events_do_not_reset(self):
        """Raw HTML and inline code are skipped over"""
        events = [Start(Heading(1)), Html("<br>"), Passthrough("code_inline"), Text("x")]
        assert heading_extract(events) == "x"


class TestFromMarkdown:
    """Test extraction on parsed Markdown"""

    def test_atx_heading(self):
        assert title_of("# Hello") == "Hello"

    def test_setext_heading(self):
        assert title_of("Hello\n=====\n\nbody\n") == "Hello"

    def test_heading_after_intro(self):
        assert title_of("Intro paragraph.\n\n# Title\n\n# Second\n") == "Title"

    def test_no_heading(self):
        assert title_of("Body only.") is None

    def test_emphasized_heading(self):
        assert title_of("# *Hello*") is None

    def test_heading_with_trailing_formatting(self):
        """Only the first text fragment is used"""
        assert title_of("# Hello *world*") == "Hello "

    def test_smart_punctuation_applies(self):
        assert title_of('# "Quoted"') == "“Quoted”"
