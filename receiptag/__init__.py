"""Photograph, OCR, tag and store paper receipts."""

__version__ = "0.1.0"
