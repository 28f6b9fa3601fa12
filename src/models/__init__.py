"""
Models package for mdnotebook

Contains data structures and type definitions for the rendering pipeline.
"""

from .state import ProgramState, pipeline
from .events import (
    Event,
    Start,
    End,
    Text,
    Html,
    Passthrough,
    Tag,
    Heading,
    CodeBlock,
    Element,
    Fenced,
    Indented,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "Event",
    "Start",
    "End",
    "Text",
    "Html",
    "Passthrough",
    "Tag",
    "Heading",
    "CodeBlock",
    "Element",
    "Fenced",
    "Indented",
]
