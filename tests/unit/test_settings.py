import pytest
from pydantic import ValidationError

from budget_worker.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_job_poll_interval(self) -> None:
        s = Settings()
        assert s.job_poll_interval_seconds == 5

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_analysis_provider(self) -> None:
        s = Settings()
        assert s.analysis_provider == "openai"

    def test_default_stage_timeouts(self) -> None:
        s = Settings()
        assert s.extraction_timeout_seconds == 60.0
        assert s.analysis_timeout_seconds == 120.0


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_files_root(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FILES_ROOT", "/srv/statements")
        s = Settings()
        assert s.files_root == "/srv/statements"

    def test_loads_analysis_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANALYSIS_TIMEOUT_SECONDS", "12.5")
        s = Settings()
        assert s.analysis_timeout_seconds == 12.5


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXTRACTION_TIMEOUT_SECONDS", "soon")
        with pytest.raises(ValidationError):
            Settings()
