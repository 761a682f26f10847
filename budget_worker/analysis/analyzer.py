"""AI-powered statement analyzer."""

import json
from pathlib import Path

from budget_worker.analysis.base import BaseAnalyzer
from budget_worker.analysis.client_base import BaseAnalysisClient, CompletionResponse
from budget_worker.analysis.exceptions import (
    AnalysisEmptyResponseError,
    AnalysisMalformedResponseError,
)
from budget_worker.analysis.models import AnalysisOutcome
from budget_worker.analysis.prompt_loader import load_json_schema, load_prompt_template
from budget_worker.analysis.validator import StatementParseError, parse_statement
from budget_worker.database.models import ErrorCode
from budget_worker.logging.logger import Log

DEFAULT_SYSTEM_PROMPT = (
    "You extract structured spending data from financial statements. "
    "Answer with JSON only."
)


class StatementAnalyzer(BaseAnalyzer):
    """Analyzes statement text with a reasoning engine client and validates the answer."""

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        temperature: float = 0.0,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._json_schema = load_json_schema(json_schema_path)
        self._json_schema_dict = json.loads(self._json_schema)

    def analyze(self, text: str) -> AnalysisOutcome:
        prompt = self._build_prompt(text)
        Log.debug(f"Analysis prompt:\n{prompt}")

        response = self._call_ai(prompt)
        Log.debug(f"AI raw response:\n{response.content}")

        parsed = parse_statement(response.content)
        if isinstance(parsed, StatementParseError):
            if parsed.code is ErrorCode.MODEL_EMPTY_RESPONSE:
                raise AnalysisEmptyResponseError(parsed.message)
            raise AnalysisMalformedResponseError(parsed.message)

        record = parsed.record
        Log.info(
            f"Analysis complete: {len(record.transactions)} transactions, "
            f"{response.total_tokens} tokens"
        )
        return AnalysisOutcome(
            record=record,
            model_id=response.model or self._client.model,
            token_usage=response.total_tokens,
        )

    def _build_prompt(self, text: str) -> str:
        return self._prompt_template.format(
            statement_text=text,
            json_schema=self._json_schema,
        )

    def _call_ai(self, prompt: str) -> CompletionResponse:
        return self._client.create_chat_completion(
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
        )
