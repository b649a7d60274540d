"""
Pydantic models used across the pipeline for validation and serialization.
These are pure data objects; the matching core works on its own dataclasses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


# ── Gazetteer source models ───────────────────────────────────────────

class GazetteerNode(BaseModel):
    """One entry of the nested province → city → district hierarchy."""
    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    children: list[GazetteerNode] = Field(
        default_factory=list,
        validation_alias=AliasChoices("children", "childs"),
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, v):
        """Codes occasionally arrive as JSON numbers."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("code")
    @classmethod
    def digits_only(cls, v: str) -> str:
        if not (v.isascii() and v.isdigit()):
            raise ValueError(f"administrative code must be decimal digits, got {v!r}")
        return v


# ── Ingestion models ──────────────────────────────────────────────────

class NewsRecord(BaseModel):
    """A single article row from the news CSV."""
    record_id: str
    newspaper: str
    text: str


# ── Output models ─────────────────────────────────────────────────────

class MatchOut(BaseModel):
    text: str
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    sentence: int = Field(0, ge=0, description="Index of the sentence within the document")
    code: str


class TaggedRecord(BaseModel):
    """One line of JSON Lines output."""
    record_id: str
    newspaper: Optional[str] = None
    origin_code: Optional[str] = None
    matches: list[MatchOut] = Field(default_factory=list)


# ── API models ────────────────────────────────────────────────────────

class TagRequest(BaseModel):
    text: str = Field(..., min_length=1)
    origin_code: Optional[str] = Field(None, description="Publisher's home region code")
    newspaper: Optional[str] = Field(None, description="Resolved to an origin code if origin_code is absent")


class TagResponse(BaseModel):
    origin_code: Optional[str] = None
    sentences: int = 0
    matches: list[MatchOut] = Field(default_factory=list)


class GeoUnitResponse(BaseModel):
    name: str
    code: str
    level: int
    ancestors: list[str] = Field(default_factory=list, description="Ancestor codes, nearest first")


class LookupResponse(BaseModel):
    name: str
    units: list[GeoUnitResponse]


class HealthResponse(BaseModel):
    status: str = "ok"
    gazetteer_names: int = 0
    newspapers: int = 0
