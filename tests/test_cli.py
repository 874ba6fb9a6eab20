"""Tests for the command-line interface."""
import io
import json
import subprocess
import sys
from pathlib import Path

import pytest

from ingredient_engine.cli import main

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def recipe_file(tmp_path):
    """Write a small OCR text file."""
    path = tmp_path / "recipe.txt"
    path.write_text("2 cups flour\n\n250 g farine\nsalt to taste\n", encoding="utf-8")
    return path


class TestCli:
    """Tests for ingredient-parse."""

    def test_markdown_output(self, recipe_file, capsys):
        main([str(recipe_file)])
        captured = capsys.readouterr()
        assert "# Ingredients" in captured.out
        assert "- 2 cups flour" in captured.out
        assert "Parsed 3 ingredients" in captured.err

    def test_json_output(self, recipe_file, capsys):
        main([str(recipe_file), "--output", "json"])
        data = json.loads(capsys.readouterr().out)
        assert [i["name"] for i in data["ingredients"]] == ["flour", "farine", "salt to taste"]

    def test_language_hint(self, recipe_file, capsys):
        main([str(recipe_file), "--output", "json", "--language", "fr"])
        data = json.loads(capsys.readouterr().out)
        assert data["ingredients"][1]["unit"]["name"] == "grams"

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("eggs\n"))
        main(["--output", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["ingredients"][0]["confidence"] == 0.5

    def test_summary(self, recipe_file, capsys):
        main([str(recipe_file), "--summary"])
        assert "Ingredients by Measurement" in capsys.readouterr().out

    def test_output_file_both(self, recipe_file, tmp_path, capsys):
        target = tmp_path / "out.txt"
        main([str(recipe_file), "--output", "both", "--output-file", str(target)])
        assert (tmp_path / "out.md").read_text(encoding="utf-8").startswith("# Ingredients")
        data = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
        assert data["parsed_count"] == 3
        assert capsys.readouterr().out == ""

    def test_missing_input_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing.txt")])
        assert exc_info.value.code == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_invalid_config(self, recipe_file, tmp_path, capsys):
        config = tmp_path / "engine.yaml"
        config.write_text("parsing:\n  default_language: de\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(recipe_file), "--config", str(config)])
        assert exc_info.value.code == 1
        assert "parsing.default_language" in capsys.readouterr().err

    def test_config_default_language(self, recipe_file, tmp_path, capsys):
        config = tmp_path / "engine.yaml"
        config.write_text("parsing:\n  default_language: fr\n", encoding="utf-8")
        main([str(recipe_file), "--config", str(config), "--output", "json"])
        data = json.loads(capsys.readouterr().out)
        # "salt to taste" has no French indicator phrase
        assert data["ingredients"][2]["confidence"] == 0.5

    def test_invalid_language_choice(self, recipe_file):
        with pytest.raises(SystemExit):
            main([str(recipe_file), "--language", "de"])

    def test_verbose_logs_each_record_once(self):
        """Module handlers and the root handler must not both print a record."""
        result = subprocess.run(
            [sys.executable, "-m", "ingredient_engine.cli", "--verbose"],
            input="2 cups flour\n",
            capture_output=True,
            text=True,
            cwd=PROJECT_ROOT,
            check=True,
        )
        assert result.stderr.count("Parsed 1 ingredients (0 unparsed)") == 1
        assert result.stderr.count("Line 1 [en]") == 1
