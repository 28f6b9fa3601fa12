#!/usr/bin/env python3
"""
mdnotebook - Markdown notebooks with inline pikchr diagrams

Renders a single Markdown document into a standalone HTML page by binding
the rendered body and the document title into a mustache template.

Markdown dialect:
    - CommonMark with tables, strikethrough, footnotes and task lists
    - Smart punctuation (quotes, dashes, ellipses)
    - ```pikchr fenced blocks drawn as inline SVG; diagram errors appear in
      the page instead of stopping the render

Template context:
    title    Text of the first "# heading" ("" if none)
    content  Rendered HTML body; use {{{content}}} to insert it unescaped

Usage:
    mdnotebook FILE [-o NAME] [-t TEMPLATE] [-s HOST]

Examples:
    # Render to stdout
    mdnotebook notes.md

    # Render to a file with a custom template
    mdnotebook notes.md -o notes.html -t page.mustache

    # Preview at http://127.0.0.1:8000/, re-rendered on every reload
    mdnotebook notes.md -s 127.0.0.1:8000

    # Preview at http://127.0.0.1:8000/notes.html
    mdnotebook notes.md -o notes.html -s 127.0.0.1:8000
"""

import sys
from argparse import ArgumentParser
from typing import List, Optional

from .lib import (
    Compiler,
    Template,
    DEFAULT_TEMPLATE,
    InputError,
    OutputError,
    TemplateError,
    BindError,
    address_parse,
    serve,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline


parser = ArgumentParser(
    prog="mdnotebook",
    description="Render a Markdown notebook with pikchr diagrams to standalone HTML",
)

parser.add_argument("input", metavar="FILE", type=str, help="Markdown source file")

parser.add_argument(
    "-o",
    "--output",
    metavar="NAME",
    default=None,
    type=str,
    help="set output file name (in serve mode: the path the document is served at)",
)

parser.add_argument(
    "-t",
    "--template",
    metavar="TEMPLATE",
    default=None,
    type=str,
    help="mustache template file (default: built-in template)",
)

parser.add_argument(
    "-s",
    "--serve",
    metavar="HOST",
    default=None,
    type=str,
    help="serve the working directory and the rendered document at HOST (IP:PORT)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase log verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def template_load(inputstate: ProgramState) -> ProgramState:
    """
    Load the output template.

    Returns:
        ProgramState with templateSource set to the --template file contents,
        or the built-in template

    Exits:
        1 if the template file cannot be read
    """
    state = inputstate.copy()

    if not state.template:
        state.templateSource = DEFAULT_TEMPLATE
        LOG("Using built-in template", level=2)
        return state

    try:
        state.templateSource = Template.fromFile(state.template).source
    except TemplateError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def host_parse(inputstate: ProgramState) -> ProgramState:
    """
    Parse the --serve address (no-op in file mode).

    Returns:
        ProgramState with bindAddress and bindPort set

    Exits:
        1 if the address is not IP:PORT
    """
    state = inputstate.copy()
    if state.serve is None:
        return state

    try:
        state.bindAddress, state.bindPort = address_parse(state.serve)
    except BindError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    LOG(f"Bind address: {state.bindAddress}:{state.bindPort}", level=2)
    return state


def document_output(inputstate: ProgramState) -> ProgramState:
    """
    Render the document to its sink, or run the preview server.

    In file mode the document goes to --output, or stdout. In serve mode
    this stage blocks until the server is stopped.

    Exits:
        1 if the source cannot be read, the template fails to expand, or the
        output cannot be written
    """
    state = inputstate.copy()

    if state.serve is not None:
        serve(state, state.bindAddress, state.bindPort)
        state.outputOK = True
        return state

    LOG(f"Rendering {state.input}", level=1)
    compiler = Compiler(Template(state.templateSource, name=state.template or "<default>"))
    try:
        document = compiler.document_compile(state.input)
        compiler.document_write(document, state.output)
    except (InputError, TemplateError, OutputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    state.outputOK = True
    return state


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point - render a notebook or serve it.

    Orchestrates the pipeline:
        1. template_load: Read --template or use the built-in one
        2. host_parse: Validate --serve address
        3. document_output: Write the document, or serve it

    Args:
        argv: Command line arguments (sys.argv[1:] when None)
    """
    options = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)

    state_connectToLogger(state)

    pipeline(state, template_load, host_parse, document_output)


if __name__ == "__main__":
    main()
