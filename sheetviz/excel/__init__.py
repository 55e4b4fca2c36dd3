"""Workbook / delimited-text extraction and layout heuristics."""
