"""Append-only JSON-lines journal of signals, trades, summaries and errors."""

from journal.writer import JournalWriter

__all__ = ["JournalWriter"]
