"""
SQLAlchemy models for the stock check service.
Import all models here to ensure they're registered with SQLAlchemy.
"""
from stockcheck.models.godown import Godown, GodownItem
from stockcheck.models.stock_check import StockCheckReport

__all__ = [
    "Godown",
    "GodownItem",
    "StockCheckReport",
]
