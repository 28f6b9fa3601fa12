"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDNOTEBOOK_ prefix (e.g., MDNOTEBOOK_PIKCHR_COMMAND=/opt/bin/pikchr).

Settings can also be loaded from a .env file in the working directory.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDNOTEBOOK_ prefix.

    Examples:
        MDNOTEBOOK_PIKCHR_COMMAND=/usr/local/bin/pikchr
        MDNOTEBOOK_PIKCHR_TIMEOUT=30
        MDNOTEBOOK_PIKCHR_DARK_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="MDNOTEBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Diagram configuration
    diagram_language: str = Field(
        default="pikchr",
        description="Fenced code block label rendered as an inline diagram (compared exactly)",
    )

    pikchr_command: str = Field(
        default="pikchr",
        description="Name or path of the pikchr executable",
    )

    pikchr_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds allowed for a single diagram to render",
    )

    pikchr_dark_mode: bool = Field(
        default=False,
        description="Render diagrams with pikchr's dark-mode colour scheme",
    )

    def pikchrArgs_make(self, source_file: str) -> list[str]:
        """
        Build the pikchr command line for one diagram source file.

        Example:
            >>> AppSettings().pikchrArgs_make("diagram.pikchr")
            ['pikchr', '--svg-only', 'diagram.pikchr']
        """
        args = [self.pikchr_command, "--svg-only"]
        if self.pikchr_dark_mode:
            args.append("--dark-mode")
        args.append(source_file)
        return args


# Singleton instance - import this in your code
appsettings = AppSettings()
