"""Spreadsheet reading (pandas + openpyxl)."""
