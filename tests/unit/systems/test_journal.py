from __future__ import annotations

import logging

import pytest

from autotycoon.systems.journal import JOURNAL_CAP, post
from tests.helpers.factories import at, mock_economy


def test_post_prepends_newest_first() -> None:
    ec = mock_economy()
    post(ec, at(1950, 2, 1), "info", "first")
    post(ec, at(1950, 2, 2), "success", "second")

    assert [e.message for e in ec.logs] == ["second", "first"]
    assert ec.logs[0].date == "1950-02-02"
    assert ec.logs[0].kind == "success"


def test_journal_is_capped() -> None:
    ec = mock_economy()
    for i in range(JOURNAL_CAP + 10):
        post(ec, at(1950, 2, 1), "info", f"entry {i}")

    assert len(ec.logs) == JOURNAL_CAP
    assert ec.logs[0].message == f"entry {JOURNAL_CAP + 9}"
    assert ec.logs[-1].message == "entry 10"


def test_danger_entries_log_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    ec = mock_economy()
    with caplog.at_level(logging.WARNING, logger="autotycoon.journal"):
        post(ec, at(1951, 6, 1), "danger", "Strike at the docks")
    assert "Strike at the docks" in caplog.text
    assert caplog.records[-1].levelno == logging.WARNING
