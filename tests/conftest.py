"""Shared fixtures for Budget Tracker tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def sample_records():
    """Plain documents as a store would return them."""
    return [
        {"_id": "a1", "date": "2024-03-01", "type": "income", "amount": 1000, "category": "Salary"},
        {"_id": "a2", "date": "2024-03-05", "type": "expense", "amount": "45.10", "category": "Groceries"},
        {"_id": "a3", "date": "2024-03-05", "type": "expense", "amount": 0.1, "category": "Fees"},
        {"_id": "a4", "date": "2024-03-15", "type": "expense", "amount": 200, "category": "Rent"},
        {"_id": "a5", "date": "2024-02-29", "type": "income", "amount": "100.25"},
        {"_id": "a6", "date": "2024-01-02", "type": "expense", "amount": "19.99", "category": "Groceries"},
    ]


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "BUDGET_TRACKER_DEFAULT_FREQUENCY",
        "BUDGET_TRACKER_ERROR_POLICY",
        "BUDGET_TRACKER_DATABASE_URI",
        "BUDGET_TRACKER_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
