"""Persistent stores used by komments."""

from .history import HistoryStore

__all__ = ["HistoryStore"]
