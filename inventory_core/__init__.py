"""Offline-resilient client for the spreadsheet-backed inventory service."""

__version__ = "0.1.0"
