"""Tests for prompt template and JSON schema loading."""

import json
from pathlib import Path

import pytest

from budget_worker.analysis.exceptions import AnalysisError
from budget_worker.analysis.prompt_loader import load_json_schema, load_prompt_template


class TestLoadPromptTemplate:
    def test_loads_default_template(self) -> None:
        template = load_prompt_template()
        assert "{statement_text}" in template
        assert "{json_schema}" in template

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Analyze {statement_text}")
        assert load_prompt_template(custom) == "Analyze {statement_text}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AnalysisError, match="Failed to load prompt"):
            load_prompt_template(Path("/nonexistent/file.txt"))


class TestLoadJsonSchema:
    def test_default_schema_lists_closed_categories(self) -> None:
        schema = json.loads(load_json_schema())
        category = schema["properties"]["transactions"]["items"]["properties"]["category"]
        assert category["enum"] == [
            "Food", "Shopping", "Transport", "Utilities", "Travel", "Transaction", "Other",
        ]

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AnalysisError, match="Failed to load JSON schema"):
            load_json_schema(Path("/nonexistent/schema.json"))
