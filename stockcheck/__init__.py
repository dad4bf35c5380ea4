"""Godown stock checking: barcode scan sessions and stock check reports."""

__version__ = "1.0.0"
