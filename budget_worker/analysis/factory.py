from typing import ClassVar

from budget_worker.analysis.analyzer import StatementAnalyzer
from budget_worker.analysis.base import BaseAnalyzer
from budget_worker.analysis.config import AnalysisClientConfig
from budget_worker.analysis.example_client_adapter import ExampleClientAdapter
from budget_worker.analysis.openai_client_adapter import OpenAIClientAdapter
from budget_worker.config.settings import Settings


class AnalyzerFactory:
    """Creates the configured statement analyzer."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalyzer:
        """Create a configured analyzer from application settings."""
        provider = settings.analysis_provider.strip().lower()
        if provider == "example":
            return StatementAnalyzer(client=ExampleClientAdapter())
        client = OpenAIClientAdapter(cls.build_client_config(provider, settings))
        return StatementAnalyzer(client=client, temperature=settings.analysis_temperature)

    @classmethod
    def build_client_config(cls, provider: str, settings: Settings) -> AnalysisClientConfig:
        """Resolve the explicit client configuration for one provider."""
        base_url = cls._resolve_base_url(provider, settings)
        return AnalysisClientConfig(
            api_key=cls._provider_setting(settings, provider, "api_key"),
            model=cls._provider_setting(settings, provider, "model_name"),
            timeout_seconds=float(cls._provider_setting(settings, provider, "timeout_seconds")),
            base_url=base_url,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.analysis_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "analysis_openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")

    @staticmethod
    def _provider_setting(settings: Settings, provider: str, name: str) -> str:
        value = getattr(settings, f"analysis_{provider}_{name}")
        return value if isinstance(value, str) else str(value)
