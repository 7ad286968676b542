"""Shared utilities (logging, JSON helpers)."""
