"""
mdnotebook - Markdown notebooks with inline pikchr diagrams

Renders one Markdown document into a standalone HTML page.
"""

__version__ = "1.0.0"

from .log import LOG, state_connectToLogger
from .compiler import Compiler, InputError, OutputError
from .template import Template, TemplateError, DEFAULT_TEMPLATE
from .pikchr import Pikchr, DiagramError
from .server import create_app, serve, address_parse, BindError

__all__ = [
    "Compiler",
    "InputError",
    "OutputError",
    "Template",
    "TemplateError",
    "DEFAULT_TEMPLATE",
    "Pikchr",
    "DiagramError",
    "create_app",
    "serve",
    "address_parse",
    "BindError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
