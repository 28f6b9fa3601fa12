"""
Document title extraction

The title is the first text fragment directly inside the first level-1
heading. Inline formatting is not flattened: "# *Hello*" has no title,
because the heading's first child is an emphasis start, not text.
"""

from typing import Iterable, Optional

from ..models.events import Event, Heading, Start, Text


def heading_extract(events: Iterable[Event]) -> Optional[str]:
    """
    Return the text of the first top-level heading, or None

    Args:
        events: Buffered event stream (read once, not modified)

    Returns:
        The first Text inside an h1, None if there is none
    """
    in_h1 = False
    for event in events:
        if in_h1 and isinstance(event, Text):
            return event.text
        if isinstance(event, Start):
            in_h1 = isinstance(event.tag, Heading) and event.tag.level == 1
    return None
