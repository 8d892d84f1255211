from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edgarcards.services.normalize import pad_cik

T = TypeVar("T")


class ReferenceRow(BaseModel):
    # one registry entry; the wire shape matches the cached JSON list
    ticker: str
    cik: str
    name: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("ticker", mode="before")
    @classmethod
    def _upper_ticker(cls, v) -> str:
        return str(v or "").strip().upper()

    @field_validator("cik", mode="before")
    @classmethod
    def _pad_cik(cls, v) -> str:
        return pad_cik(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v) -> str:
        return str(v or "")


class FilingRecord(BaseModel):
    cik: str
    company: str
    form: str
    filed_at: Optional[str] = None
    title: str
    source_url: str
    primary_doc_url: Optional[str] = None
    items: List[str] = Field(default_factory=list)
    badges: List[str] = Field(default_factory=list)
    amount_usd: Optional[float] = None

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a best-effort step.
    Either carries a value, or a `degraded` reason the caller must branch on.
    """
    value: Optional[T] = None
    degraded: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.degraded is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def degrade(cls, reason: str) -> "Outcome[T]":
        return cls(degraded=reason or "unknown")
