"""
mdnotebook - Markdown notebooks with inline pikchr diagrams

Renders a Markdown document through a mustache template into a standalone
HTML page, drawing ```pikchr fenced blocks as inline SVG.
"""

__version__ = "1.0.0"

from .lib import Compiler, Template, LOG, state_connectToLogger

__all__ = ["Compiler", "Template", "LOG", "state_connectToLogger", "__version__"]
