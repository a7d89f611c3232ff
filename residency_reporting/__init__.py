"""
Residency Expiry Reporting Module

This module tracks employee residency-card expirations from a published
spreadsheet export and generates Arabic email reports for expired and
soon-to-expire cards. It is completely isolated from the Streamlit dashboard,
which only consumes its read-only records and helpers.
"""

__version__ = "1.0.0"
