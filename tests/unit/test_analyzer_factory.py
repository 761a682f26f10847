"""Tests for AnalyzerFactory."""

from unittest.mock import patch

import pytest

from budget_worker.analysis.analyzer import StatementAnalyzer
from budget_worker.analysis.config import AnalysisClientConfig
from budget_worker.analysis.factory import AnalyzerFactory
from budget_worker.config.settings import Settings


class TestAnalyzerFactory:
    def test_creates_offline_analyzer_for_example_provider(self) -> None:
        analyzer = AnalyzerFactory.create(Settings(analysis_provider="example"))
        assert isinstance(analyzer, StatementAnalyzer)
        assert analyzer.analyze("any text").record.transactions == []

    def test_passes_explicit_config_to_openai_adapter(self) -> None:
        settings = Settings(
            analysis_provider="openai",
            analysis_openai_api_key="openai-key",
            analysis_openai_model_name="gpt-4o",
            analysis_openai_timeout_seconds=42,
        )
        with patch("budget_worker.analysis.factory.OpenAIClientAdapter") as mock_adapter:
            analyzer = AnalyzerFactory.create(settings)
        assert isinstance(analyzer, StatementAnalyzer)
        mock_adapter.assert_called_once_with(
            AnalysisClientConfig(
                api_key="openai-key", model="gpt-4o", timeout_seconds=42.0, base_url=None
            )
        )

    def test_uses_provider_default_base_url_for_openrouter(self) -> None:
        settings = Settings(
            analysis_provider="openrouter",
            analysis_openrouter_api_key="k",
            analysis_openrouter_model_name="m",
        )
        config = AnalyzerFactory.build_client_config("openrouter", settings)
        assert config.base_url == "https://openrouter.ai/api/v1"
        assert config.timeout_seconds == 60.0

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(
            analysis_provider="openai_compatible",
            analysis_openai_compatible_model_name="m",
        )
        with pytest.raises(ValueError, match="base_url is required"):
            AnalyzerFactory.create(settings)

    def test_openai_compatible_uses_configured_base_url(self) -> None:
        settings = Settings(
            analysis_openai_compatible_base_url=" http://llm.internal/v1 ",
            analysis_openai_compatible_model_name="m",
        )
        config = AnalyzerFactory.build_client_config("openai_compatible", settings)
        assert config.base_url == "http://llm.internal/v1"

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown analysis provider"):
            AnalyzerFactory.create(Settings(analysis_provider="carrier-pigeon"))

    def test_missing_model_name_fails_fast(self) -> None:
        settings = Settings(analysis_provider="groq", analysis_groq_api_key="k")
        with pytest.raises(ValueError, match="model"):
            AnalyzerFactory.create(settings)
