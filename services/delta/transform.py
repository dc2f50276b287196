"""
Helpers for reshaping Delta API responses before they reach the dashboards.
"""

from __future__ import annotations

from typing import Any

BALANCE_FIELDS = ("available_balance", "wallet_balance", "balance")


def normalize_balances(payload: Any) -> Any:
    """
    Ensure every wallet record carries a ``balance`` field.

    Depending on the account type Delta reports ``available_balance`` or
    ``wallet_balance``; the dashboards only read ``balance``. Records keep
    all of their original fields.
    """
    if not isinstance(payload, dict):
        return payload
    records = payload.get("result")
    if not isinstance(records, list):
        return payload
    normalized = dict(payload)
    normalized["result"] = [_with_balance_alias(record) for record in records]
    return normalized


def _with_balance_alias(record: Any) -> Any:
    if not isinstance(record, dict):
        return record
    return {**record, "balance": _first_present(record)}


def _first_present(record: dict) -> Any:
    for field in BALANCE_FIELDS:
        value = record.get(field)
        if value is not None:
            return value
    return 0
