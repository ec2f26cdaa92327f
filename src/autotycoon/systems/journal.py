"""Player-facing journal, mirrored to the process log."""

from __future__ import annotations

import logging
from datetime import datetime

from autotycoon.records import BankruptcyRecord, EntryKind, LogEntry, TransactionDetails
from autotycoon.roles import Economy

log = logging.getLogger("autotycoon.journal")

JOURNAL_CAP = 50
_LEVELS = {"success": logging.INFO, "info": logging.INFO, "danger": logging.WARNING}


def post(
    ec: Economy,
    date: datetime,
    kind: EntryKind,
    message: str,
    *,
    details: TransactionDetails | BankruptcyRecord | None = None,
) -> LogEntry:
    """Prepend a journal entry (newest first, capped at 50)."""
    entry = LogEntry(date=date.date().isoformat(), kind=kind, message=message, details=details)
    ec.logs.insert(0, entry)
    del ec.logs[JOURNAL_CAP:]
    log.log(_LEVELS[kind], "[%s] %s", entry.date, message)
    return entry
