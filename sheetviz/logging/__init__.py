"""Logging setup and the batch error log."""
