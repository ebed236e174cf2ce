"""Unified command-line interface for receiptag.

Usage:
    receiptag parse [file|-] [--json]
    receiptag scan <image> [--project NAME --subject KEY]
    receiptag scan <image> --interactive
    receiptag serve [--port]
    receiptag list
    receiptag status
"""
