"""Spreadsheet intake and report export."""
