"""
Pydantic schemas for request/response validation.
"""
from stockcheck.schemas.base import CamelModel
from stockcheck.schemas.godown import (
    GodownBase, GodownCreate, GodownResponse,
    GodownItemCreate, GodownItemsCreate, GodownItemsCreateResponse
)
from stockcheck.schemas.stock_check import (
    ReportStatus, ExpectedItem, ScannedItem, WrongScan,
    ProductType, ProductTypeListResponse, GodownItemResponse, GodownItemListResponse,
    ReportPayload, ReportSubmitResponse, ReportResponse, ReportListResponse,
    ReportDetailResponse, ReportStatusUpdate, ReportStatusUpdateResponse,
    AddMissingItemsRequest, AddMissingItemsResponse, StockCheckStatistics
)
from stockcheck.schemas.scan_session import (
    OutcomeKind, ScanOutcome, ScanSession, ScanSessionCreate, ScanSessionState,
    ScanRequest, MarkFoundRequest, SessionSubmitRequest
)

__all__ = [
    "CamelModel",

    # Godown schemas
    "GodownBase", "GodownCreate", "GodownResponse",
    "GodownItemCreate", "GodownItemsCreate", "GodownItemsCreateResponse",

    # Stock check schemas
    "ReportStatus", "ExpectedItem", "ScannedItem", "WrongScan",
    "ProductType", "ProductTypeListResponse", "GodownItemResponse", "GodownItemListResponse",
    "ReportPayload", "ReportSubmitResponse", "ReportResponse", "ReportListResponse",
    "ReportDetailResponse", "ReportStatusUpdate", "ReportStatusUpdateResponse",
    "AddMissingItemsRequest", "AddMissingItemsResponse", "StockCheckStatistics",

    # Scan session schemas
    "OutcomeKind", "ScanOutcome", "ScanSession", "ScanSessionCreate", "ScanSessionState",
    "ScanRequest", "MarkFoundRequest", "SessionSubmitRequest",
]
