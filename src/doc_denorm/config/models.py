"""Pydantic models for store profiles and declared directives."""

from typing import Literal

from pydantic import BaseModel, Field

from doc_denorm.denormalize.directive import DirectiveOptions


# ============================================================================
# Configuration Models
# ============================================================================


class StoreProfile(BaseModel):
    """Document store profile from denorm.toml."""

    provider: Literal["memory", "postgres"] = "postgres"
    url: str = ""
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    table: str = "documents"


class DenormConfig(BaseModel):
    """Complete configuration from denorm.toml."""

    profiles: dict[str, StoreProfile] = Field(default_factory=dict)
    directives: dict[str, list[DirectiveOptions]] = Field(default_factory=dict)
    default_profile: str | None = None
    strict_inverses: bool = False
