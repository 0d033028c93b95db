"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PRAGMATEXT_ prefix (e.g., PRAGMATEXT_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PRAGMATEXT_ prefix.

    Examples:
        PRAGMATEXT_DEFAULT_PREFIX=#pragma
        PRAGMATEXT_STRICT_MODE=true
        PRAGMATEXT_ENCODING=latin-1
    """

    model_config = SettingsConfigDict(
        env_prefix="PRAGMATEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Directive syntax
    default_prefix: str = Field(
        default="//#",
        description="Token marking a directive line when no prefix is given explicitly",
    )

    always_flag: str = Field(
        default="true",
        description="Synthetic flag that is always on and cannot be disabled",
    )

    negation_marker: str = Field(
        default="!",
        description="Leading marker that inverts a flag test (e.g. 'if !debug')",
    )

    encoding: str = Field(
        default="utf-8",
        description="Encoding used to decode directive tokens and encode the prefix",
    )

    # Processing configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: unclosed if/def blocks at end of input are errors",
    )

    # Output configuration
    default_output_suffix: str = Field(
        default=".out",
        description="Suffix appended to the input filename when no output file is named",
    )

    def outputName_make(self, input_name: str, variant: str = "") -> str:
        """
        Generate an output filename for an input file and optional variant.

        Args:
            input_name: Name of the annotated source file
            variant: Variant name, inserted before the suffix when given

        Returns:
            Output filename

        Example:
            >>> settings = AppSettings()
            >>> settings.outputName_make('config.txt')
            'config.txt.out'
            >>> settings.outputName_make('config.txt', 'debug')
            'config.txt.debug.out'
        """
        if variant:
            return f"{input_name}.{variant}{self.default_output_suffix}"
        return f"{input_name}{self.default_output_suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
