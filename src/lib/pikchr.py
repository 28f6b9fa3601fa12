"""
Pikchr diagram engine

Compiles pikchr diagram source to an inline <svg> element by running the
pikchr command-line tool. A failure for one diagram is reported as a
DiagramError carrying pikchr's own message; the transformer turns that
into inline text so the rest of the document still renders.
"""

import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from ..config import AppSettings, appsettings
from .log import LOG


class DiagramError(Exception):
    """Raised when a diagram cannot be rendered"""
    pass


class Pikchr:
    """
    Renders pikchr source through the pikchr executable

    Usage:
        svg = Pikchr().render('box "A"; arrow; box "B"')
    """

    def __init__(self, settings: Optional[AppSettings] = None) -> None:
        self.settings = settings or appsettings

    def render(self, source: str) -> str:
        """
        Render one diagram

        Args:
            source: pikchr diagram source (may be empty)

        Returns:
            pikchr output: SVG markup, or a comment for an empty diagram

        Raises:
            DiagramError: pikchr missing, timed out, or rejected the source
        """
        with tempfile.TemporaryDirectory(prefix="mdnotebook-") as tmpdir:
            source_file = Path(tmpdir) / "diagram.pikchr"
            source_file.write_text(source, encoding="utf-8")
            args = self.settings.pikchrArgs_make(str(source_file))
            LOG(f"Running {' '.join(args)}", level=3)

            try:
                result = subprocess.run(
                    args,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    timeout=self.settings.pikchr_timeout,
                )
            except FileNotFoundError:
                raise DiagramError(
                    f"pikchr executable not found: {self.settings.pikchr_command}"
                )
            except subprocess.TimeoutExpired:
                raise DiagramError(
                    f"pikchr timed out after {self.settings.pikchr_timeout:g}s"
                )

        output = result.stdout.strip()
        if result.returncode != 0:
            message = output or result.stderr.strip()
            raise DiagramError(message or f"pikchr exited with status {result.returncode}")

        return output
