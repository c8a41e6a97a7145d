"""Shared utilities (logging helpers)."""
