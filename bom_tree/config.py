"""Runtime settings for the Part service client and tree builder.

Values come from ``BOM_TREE_*`` environment variables, for example
``BOM_TREE_BASE_URL=http://plm.local/api/boms``. Invalid values fail when the
settings object is constructed, not on first use.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_DEPTH = 64


class BOMTreeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BOM_TREE_", extra="ignore")

    base_url: str = Field(
        default="http://localhost:8080/api/boms",
        description="Base URL of the Part service; routes such as /parts are appended",
    )
    timeout_s: float = Field(default=10.0, gt=0, description="Timeout applied to every request")
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Deepest occurrence the tree builder expands before marking a cycle",
    )
    log_level: str = Field(default="INFO", description="Level used by configure_logging()")
    default_creator: str | None = Field(
        default=None,
        description="Creator recorded on new parts that do not name one",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("base_url must not be empty")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"
