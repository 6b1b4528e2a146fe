"""
colsieve: streaming column projection for typed record pages.

Drops or keeps named columns of a typed schema and rewrites every record
page by page, preserving column order, types and null-ness.
"""

__version__ = "1.0.0"
