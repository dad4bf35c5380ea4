"""
Pydantic schemas for scan sessions and scan outcomes.
"""
from typing import Optional
from enum import Enum
from pydantic import Field, field_validator

from stockcheck.core.config import settings
from stockcheck.schemas.base import CamelModel
from stockcheck.schemas.stock_check import ExpectedItem, ScannedItem, WrongScan


class OutcomeKind(str, Enum):
    """Classification of a single barcode submission."""
    IGNORED = "ignored"
    DUPLICATE = "duplicate"
    WRONG_BOX = "wrong_box"
    NOT_EXPECTED = "not_expected"
    MATCHED = "matched"


class ScanOutcome(CamelModel):
    """Result of a scan, rendered as a transient notification."""
    kind: OutcomeKind
    barcode: str = ""
    expected_prefix: Optional[str] = None
    actual_prefix: Optional[str] = None
    progress: Optional[int] = None
    total: Optional[int] = None

    @property
    def message(self) -> str:
        if self.kind == OutcomeKind.MATCHED:
            return f"{self.progress} out of {self.total} - {self.barcode}"
        if self.kind == OutcomeKind.DUPLICATE:
            return f"Already scanned: {self.barcode}"
        if self.kind == OutcomeKind.WRONG_BOX:
            return f"Wrong box! Expected {self.expected_prefix}, got {self.actual_prefix}"
        if self.kind == OutcomeKind.NOT_EXPECTED:
            return f"Barcode {self.barcode} not in expected list"
        return ""


class ScanSession(CamelModel):
    """In-progress verification of one godown x product-type batch."""
    product_prefix: str = ""
    expected_items: list[ExpectedItem] = Field(default_factory=list)
    scanned_items: list[ScannedItem] = Field(default_factory=list)
    missing_items: list[ExpectedItem] = Field(default_factory=list)
    wrong_scans: list[WrongScan] = Field(default_factory=list)
    is_scanning: bool = False


class ScanSessionCreate(CamelModel):
    godown_id: int
    product_prefix: str = Field(..., min_length=1)

    @field_validator("product_prefix")
    @classmethod
    def prefix_has_configured_length(cls, v: str) -> str:
        """Scans compare the first PRODUCT_PREFIX_LENGTH characters, so the prefix must be exactly that long."""
        if len(v) != settings.product_prefix_length:
            raise ValueError(f"productPrefix must be {settings.product_prefix_length} characters")
        return v


class ScanSessionState(ScanSession):
    """Server-hosted session as returned by the API."""
    id: str
    godown_id: int
    godown_name: str
    product_type: str
    progress_percent: int = 0


class ScanRequest(CamelModel):
    barcode: str = ""


class MarkFoundRequest(CamelModel):
    barcode: str = Field(..., min_length=1)


class SessionSubmitRequest(CamelModel):
    submitted_by: Optional[str] = None
