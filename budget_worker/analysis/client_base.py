from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionResponse:
    """Raw provider output plus the accounting needed for result metadata."""

    content: str
    model: str
    total_tokens: int = 0


class BaseAnalysisClient(ABC):
    """Contract for provider-specific reasoning engine clients."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier requested from the provider."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> CompletionResponse:
        """Return provider response content as plain text.

        Raises:
            AnalysisNetworkError: if the provider cannot be reached or rejects the call.
            AnalysisEmptyResponseError: if the provider returns no content.
        """
