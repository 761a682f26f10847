import httpx
import openai

from budget_worker.analysis.client_base import BaseAnalysisClient, CompletionResponse
from budget_worker.analysis.config import AnalysisClientConfig
from budget_worker.analysis.exceptions import AnalysisEmptyResponseError, AnalysisNetworkError


class OpenAIClientAdapter(BaseAnalysisClient):
    """Reasoning engine client built on the OpenAI-compatible chat API."""

    def __init__(self, config: AnalysisClientConfig) -> None:
        self._config = config
        self._client = openai.OpenAI(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            base_url=config.base_url,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._config.model

    def create_chat_completion(
        self,
        *,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> CompletionResponse:
        try:
            response = self._client.chat.completions.create(
                model=self._config.model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "statement_analysis",
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AnalysisNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise AnalysisNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AnalysisEmptyResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise AnalysisEmptyResponseError("AI returned empty response")
        usage = response.usage
        return CompletionResponse(
            content=content,
            model=response.model or self._config.model,
            total_tokens=usage.total_tokens if usage is not None else 0,
        )
