"""Offline analysis client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseAnalysisClient and register the provider in AnalyzerFactory.
"""

import json
from typing import ClassVar

from budget_worker.analysis.client_base import BaseAnalysisClient, CompletionResponse


class ExampleClientAdapter(BaseAnalysisClient):
    """Returns a fixed, valid statement without any network calls.

    Useful for local development and end-to-end runs without an API key.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "totalSpent": 0,
        "transactions": [],
        "summary": "No spending was analyzed.",
        "advice": "",
    }

    @property
    def model(self) -> str:
        return "example"

    def create_chat_completion(
        self,
        *,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> CompletionResponse:
        _ = temperature, system_prompt, user_prompt, json_schema
        return CompletionResponse(content=json.dumps(self.DEFAULT_RESPONSE), model=self.model)
