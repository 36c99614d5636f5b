"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use STY2DTX_ prefix (e.g., STY2DTX_AUTHOR="Jane Doe").

Settings can also be loaded from a .env file in the working directory.
"""

from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Provides the default values of the template variables and optional
    default template files.

    Examples:
        STY2DTX_AUTHOR="Jane Doe"
        STY2DTX_EMAIL=jane@example.org
        STY2DTX_TEMPLATE=~/texmf/sty2dtx/mytemplate.dtx
    """

    model_config = SettingsConfigDict(
        env_prefix="STY2DTX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Template variable defaults
    author: str = Field(
        default="<+author+>",
        description="Default author name",
    )

    email: str = Field(
        default="<+email+>",
        description="Default author email address",
    )

    maintainer: str = Field(
        default="",
        description="Default maintainer (empty: same as author)",
    )

    version: str = Field(
        default="v1.0",
        description="Default version string",
    )

    date: str = Field(
        default="<+date+>",
        description="Default release date",
    )

    description: str = Field(
        default="<+description+>",
        description="Default one line description",
    )

    type: str = Field(
        default="package",
        description="Default file type: 'package' or 'class'",
    )

    # Template configuration
    template: Optional[str] = Field(
        default=None,
        description="Template file used instead of the built-in .dtx template",
    )

    ins_template: Optional[str] = Field(
        default=None,
        description="Template file used instead of the built-in .ins template",
    )

    def variables_default(self) -> Dict[str, str]:
        """
        Default template variables.

        Returns:
            Dict of variable name to value; empty values are left out

        Example:
            >>> AppSettings().variables_default()["version"]
            'v1.0'
        """
        variables = {
            "author": self.author,
            "email": self.email,
            "maintainer": self.maintainer,
            "version": self.version,
            "date": self.date,
            "description": self.description,
            "type": self.type,
        }
        return {name: value for name, value in variables.items() if value}


# Singleton instance - import this in your code
appsettings = AppSettings()
