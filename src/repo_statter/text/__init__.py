"""Commit message text processing."""

from .processor import TextProcessor

__all__ = ["TextProcessor"]
