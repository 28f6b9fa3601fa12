"""
Preview server

Serves the working directory and re-renders the notebook on every request,
so edits to the source (or to images and stylesheets next to it) show up on
reload without restarting.

Routing:
    - any GET for an existing file under the root is served as-is
    - otherwise the document is rendered if the path is "/" and no
      --output was given, or if the path (without its leading "/") equals
      the --output argument exactly
    - anything else is 404 "File not found"

Render failures are returned as 400 with the error message as body; a
missing source file is a 404.
"""

import ipaddress
from pathlib import Path
from typing import Optional, Tuple, Union

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.exceptions import HTTPException
from fastapi.staticfiles import StaticFiles

from ..models.state import ProgramState
from . import __version__
from .compiler import Compiler, InputError
from .log import LOG
from .template import Template, TemplateError


NOT_FOUND = "File not found"


class BindError(Exception):
    """Raised when a --serve address is not IP:PORT"""
    pass


def address_parse(host: str) -> Tuple[str, int]:
    """
    Parse a socket address of the form IP:PORT

    IPv6 addresses must be bracketed ("[::1]:8000").

    Args:
        host: Address string from --serve

    Returns:
        (address, port)

    Raises:
        BindError: If host is not a valid socket address
    """
    address, sep, port = host.rpartition(":")
    if not sep or not address:
        raise BindError(f"Invalid address {host!r}: expected IP:PORT")

    bracketed = address.startswith("[") and address.endswith("]")
    if bracketed:
        address = address[1:-1]

    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        raise BindError(f"Invalid address {host!r}: {address!r} is not an IP address")
    if (ip.version == 6) != bracketed:
        raise BindError(f"Invalid address {host!r}: only IPv6 addresses take brackets")

    if not port.isdigit() or int(port) > 65535:
        raise BindError(f"Invalid address {host!r}: bad port {port!r}")

    return str(ip), int(port)


def route_matches(path: str, output: Optional[str]) -> bool:
    """Whether a request path (leading "/" removed) addresses the document"""
    if output is None:
        return path == ""
    return path == output


def create_app(params: ProgramState, root: Optional[Union[str, Path]] = None) -> FastAPI:
    """
    Build the preview application

    Args:
        params: Program state (input, output, templateSource)
        root: Directory served for static files (working directory by default)

    Returns:
        FastAPI app
    """
    root = Path(root) if root is not None else Path.cwd()
    if params.templateSource:
        template = Template(params.templateSource, name=params.template or "<default>")
    else:
        template = Template()

    app = FastAPI(
        title="mdnotebook",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def requests_log(request: Request, call_next):
        response = await call_next(request)
        LOG(f"{request.method} {request.url.path} - {response.status_code}", level=1)
        return response

    def document_fallback(request: Request, exc: HTTPException) -> HTMLResponse:
        path = request.url.path.removeprefix("/")
        if not route_matches(path, params.output):
            return HTMLResponse(NOT_FOUND, status_code=404)

        compiler = Compiler(template)
        try:
            document = compiler.document_compile(params.input)
        except InputError as e:
            LOG(str(e), level=1)
            return HTMLResponse(NOT_FOUND, status_code=404)
        except TemplateError as e:
            LOG(str(e), level=1)
            return HTMLResponse(str(e), status_code=400)

        return HTMLResponse(document)

    # StaticFiles raises 404 for anything that is not a file under root;
    # the handler is sync so renders run in the threadpool, off the event loop.
    app.add_exception_handler(404, document_fallback)
    app.mount("/", StaticFiles(directory=root), name="assets")

    return app


def serve(params: ProgramState, address: str, port: int) -> None:
    """Run the preview server until interrupted"""
    app = create_app(params)
    LOG(f"Serving {params.input} on http://{address}:{port}/{params.output or ''}", level=1)
    uvicorn.run(
        app,
        host=address,
        port=port,
        log_level="info" if params.verbosity >= 3 else "warning",
    )
