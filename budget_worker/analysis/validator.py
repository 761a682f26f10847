"""Strict parsing of the reasoning engine's raw output into a StatementRecord.

The engine output is untrusted text. parse_statement() never raises: it
returns either a ValidStatement or a StatementParseError tagged with the
error code the pipeline records.
"""

import json
import math
from dataclasses import dataclass
from datetime import date
from typing import Any

from budget_worker.analysis.models import Category, StatementRecord, Transaction
from budget_worker.database.models import ErrorCode

_MAX_TRANSACTIONS = 2000
_VALID_CATEGORIES = frozenset(c.value for c in Category)


@dataclass(frozen=True)
class ValidStatement:
    record: StatementRecord


@dataclass(frozen=True)
class StatementParseError:
    code: ErrorCode
    message: str


StatementParseResult = ValidStatement | StatementParseError


class _SchemaViolation(Exception):
    pass


def parse_statement(raw: str | None) -> StatementParseResult:
    """Decode and validate raw engine output."""
    if raw is None or not raw.strip():
        return StatementParseError(ErrorCode.MODEL_EMPTY_RESPONSE, "Model returned an empty body")

    try:
        data = json.loads(_strip_code_fences(raw), parse_constant=_reject_constant)
    except (ValueError, RecursionError, _SchemaViolation) as exc:
        # ValueError covers JSONDecodeError and the int digit limit; deep nesting recurses.
        return StatementParseError(ErrorCode.MODEL_MALFORMED_JSON, f"Invalid JSON response: {exc}")

    try:
        record = _build_record(data)
    except _SchemaViolation as exc:
        return StatementParseError(ErrorCode.MODEL_MALFORMED_JSON, str(exc))
    return ValidStatement(record)


def transactions_from_items(items: Any) -> list[Transaction]:
    """Rebuild transactions from a stored items list.

    Raises:
        ValueError: if an item does not match the transaction schema.
    """
    try:
        return _build_transactions(items)
    except _SchemaViolation as exc:
        raise ValueError(str(exc)) from exc


def _strip_code_fences(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned


def _reject_constant(name: str) -> Any:
    raise _SchemaViolation(f"non-finite number {name} is not allowed")


def _build_record(data: Any) -> StatementRecord:
    if not isinstance(data, dict):
        raise _SchemaViolation("JSON response must be an object")
    for key in ("totalSpent", "transactions", "summary", "advice"):
        if key not in data:
            raise _SchemaViolation(f"Missing required top-level field: {key}")
    return StatementRecord(
        total_spent=_number(data["totalSpent"], "'totalSpent'"),
        transactions=_build_transactions(data["transactions"]),
        summary=_string(data["summary"], "'summary'"),
        advice=_string(data["advice"], "'advice'"),
    )


def _build_transactions(raw: Any) -> list[Transaction]:
    if not isinstance(raw, list):
        raise _SchemaViolation("'transactions' must be a list")
    if len(raw) > _MAX_TRANSACTIONS:
        raise _SchemaViolation(
            f"Too many transactions: {len(raw)} (max {_MAX_TRANSACTIONS})"
        )
    return [_build_transaction(item, i) for i, item in enumerate(raw)]


def _build_transaction(raw: Any, index: int) -> Transaction:
    where = f"Transaction at index {index}"
    if not isinstance(raw, dict):
        raise _SchemaViolation(f"{where} must be an object")
    category = raw.get("category")
    if category not in _VALID_CATEGORIES:
        raise _SchemaViolation(
            f"{where}: 'category' must be one of {sorted(_VALID_CATEGORIES)}, got {category!r}"
        )
    return Transaction(
        date=_iso_date(raw.get("date"), f"{where}: 'date'"),
        merchant=_string(raw.get("merchant"), f"{where}: 'merchant'"),
        amount=_number(raw.get("amount"), f"{where}: 'amount'"),
        category=Category(category),
    )


def _number(value: Any, label: str) -> float:
    # bool is an int subclass; true/false are not amounts.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _SchemaViolation(f"{label} must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise _SchemaViolation(f"{label} is too large") from exc
    if not math.isfinite(number):
        raise _SchemaViolation(f"{label} must be finite")
    return number


def _string(value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise _SchemaViolation(f"{label} must be a string")
    return value


def _iso_date(value: Any, label: str) -> date:
    if not isinstance(value, str):
        raise _SchemaViolation(f"{label} must be an ISO-8601 date string")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise _SchemaViolation(f"{label} must be an ISO-8601 date, got {value!r}") from exc
