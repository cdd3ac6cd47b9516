"""Shared helpers: logging setup and ANSI styling."""
