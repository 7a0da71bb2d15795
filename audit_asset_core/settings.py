"""Core configuration settings for asset saving.

@public

Settings are loaded from environment variables with .env file support via
pydantic-settings. Every variable carries the ``AUDIT_ASSETS_`` prefix.

Environment variables:
    AUDIT_ASSETS_DEFAULT_PASS_NAME: Gathering pass that receives marker events
    AUDIT_ASSETS_WRITE_BUFFER_SIZE: Buffer size in bytes for streamed trace files
    AUDIT_ASSETS_JSON_INDENT: Indent for devtools log and filmstrip JSON files
    AUDIT_ASSETS_KEEP_PARTIAL_TRACES: Keep a trace file after a serialization failure

Example:
    >>> from audit_asset_core.settings import settings
    >>> print(settings.default_pass_name)
    defaultPass

Note:
    Settings are loaded once at module import and frozen. The process must be
    restarted to pick up changes to environment variables or the .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for trace and asset persistence.

    @public

    Attributes:
        default_pass_name: Name of the gathering pass whose trace receives
                           synthetic metric marker events.

        write_buffer_size: Bytes buffered between the streaming trace writer
                           and the file. Bounds memory together with the size
                           of the largest single trace event.

        json_indent: Indentation used for the devtools log and the filmstrip
                     JSON files.

        keep_partial_traces: When False (the default) a trace file is deleted
                             after a serialization failure. When True the
                             partial file is left on disk for inspection.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_ASSETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    default_pass_name: str = "defaultPass"
    write_buffer_size: int = Field(default=1024 * 1024, gt=0)
    json_indent: int = Field(default=2, ge=0)
    keep_partial_traces: bool = False


settings = Settings()
"""Global settings instance.

@public

Access this instance rather than creating new Settings objects.
"""
