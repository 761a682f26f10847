"""Tests for the StatementAnalyzer (AI-powered statement analysis)."""

import json
from unittest.mock import MagicMock, patch

import pytest

from budget_worker.analysis.analyzer import StatementAnalyzer
from budget_worker.analysis.client_base import BaseAnalysisClient, CompletionResponse
from budget_worker.analysis.exceptions import (
    AnalysisEmptyResponseError,
    AnalysisMalformedResponseError,
    AnalysisNetworkError,
)
from budget_worker.database.models import ErrorCode


def _make_client(content: str = "", total_tokens: int = 321) -> MagicMock:
    client = MagicMock(spec=BaseAnalysisClient)
    client.model = "test-model"
    client.create_chat_completion.return_value = CompletionResponse(
        content=content, model="test-model-2025", total_tokens=total_tokens
    )
    return client


def _valid_json_response(transactions: list[dict[str, object]] | None = None) -> str:
    return json.dumps({
        "totalSpent": 42.1,
        "transactions": transactions if transactions is not None else [{
            "date": "2025-01-05",
            "merchant": "Grocery Mart",
            "amount": 42.1,
            "category": "Food",
        }],
        "summary": "Mostly groceries.",
        "advice": "Cook at home.",
    })


class TestAnalyzeSuccess:
    def test_returns_outcome_with_metadata(self) -> None:
        analyzer = StatementAnalyzer(client=_make_client(_valid_json_response()))
        outcome = analyzer.analyze("statement text")
        assert outcome.record.total_spent == 42.1
        assert len(outcome.record.transactions) == 1
        assert outcome.model_id == "test-model-2025"
        assert outcome.token_usage == 321

    def test_falls_back_to_client_model(self) -> None:
        client = _make_client(_valid_json_response())
        client.create_chat_completion.return_value = CompletionResponse(
            content=_valid_json_response(), model=""
        )
        outcome = StatementAnalyzer(client=client).analyze("text")
        assert outcome.model_id == "test-model"

    def test_passes_input_text_and_schema_to_prompt(self) -> None:
        client = _make_client(_valid_json_response())
        StatementAnalyzer(client=client).analyze("CARD STATEMENT JANUARY")
        kwargs = client.create_chat_completion.call_args.kwargs
        assert "CARD STATEMENT JANUARY" in kwargs["user_prompt"]
        assert "totalSpent" in kwargs["user_prompt"]
        assert kwargs["json_schema"]["required"] == [
            "totalSpent", "transactions", "summary", "advice",
        ]

    def test_clamps_temperature_to_zero_to_point_two(self) -> None:
        client = _make_client(_valid_json_response())
        StatementAnalyzer(client=client, temperature=0.9).analyze("text")
        assert client.create_chat_completion.call_args.kwargs["temperature"] == 0.2


class TestAnalyzeFailures:
    def test_non_json_response_is_malformed(self) -> None:
        analyzer = StatementAnalyzer(client=_make_client("I cannot read this statement."))
        with pytest.raises(AnalysisMalformedResponseError, match="Invalid JSON") as exc_info:
            analyzer.analyze("text")
        assert exc_info.value.code is ErrorCode.MODEL_MALFORMED_JSON

    def test_schema_violation_is_malformed(self) -> None:
        content = _valid_json_response([{"date": "2025-01-05", "merchant": "X",
                                         "amount": 1, "category": "Pets"}])
        analyzer = StatementAnalyzer(client=_make_client(content))
        with pytest.raises(AnalysisMalformedResponseError, match="category"):
            analyzer.analyze("text")

    def test_blank_response_is_empty(self) -> None:
        analyzer = StatementAnalyzer(client=_make_client("  "))
        with pytest.raises(AnalysisEmptyResponseError) as exc_info:
            analyzer.analyze("text")
        assert exc_info.value.code is ErrorCode.MODEL_EMPTY_RESPONSE

    def test_network_errors_propagate(self) -> None:
        client = _make_client()
        client.create_chat_completion.side_effect = AnalysisNetworkError("network timeout")
        with pytest.raises(AnalysisNetworkError, match="network timeout") as exc_info:
            StatementAnalyzer(client=client).analyze("text")
        assert exc_info.value.code is ErrorCode.MODEL_CALL_FAILED


class TestDebugLogging:
    def test_logs_prompt_in_debug(self) -> None:
        analyzer = StatementAnalyzer(client=_make_client(_valid_json_response()))
        with patch("budget_worker.analysis.analyzer.Log") as mock_log:
            analyzer.analyze("test text")
        assert "prompt" in mock_log.debug.call_args_list[0].args[0].lower()

    def test_logs_transaction_count_in_info(self) -> None:
        analyzer = StatementAnalyzer(client=_make_client(_valid_json_response([])))
        with patch("budget_worker.analysis.analyzer.Log") as mock_log:
            analyzer.analyze("test text")
        assert any("0 transactions" in c.args[0] for c in mock_log.info.call_args_list)
