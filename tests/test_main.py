import json
from pathlib import Path

import pytest

import main
from core.parsers.deterministic_parser import parse_deterministic


@pytest.mark.parametrize("output", main.OUTPUT_CHOICES)
def test_render_output_is_json_serializable(output: str, multi_page_script: str) -> None:
    rendered = main.render_output(parse_deterministic(multi_page_script), output, "Issue One")
    json.dumps(rendered)


def test_render_output_rejects_unknown_shape(multi_page_script: str) -> None:
    with pytest.raises(ValueError):
        main.render_output(parse_deterministic(multi_page_script), "pdf")


@pytest.mark.integration
def test_cli_prints_canonical_json(tmp_path: Path, multi_page_script: str, capsys: pytest.CaptureFixture[str]) -> None:
    script = tmp_path / "issue.txt"
    script.write_text(multi_page_script, encoding="utf-8")

    assert main.main([str(script)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["parser_source"] == "deterministic"
    assert [page["page_number"] for page in payload["pages"]] == [1, 2]


@pytest.mark.integration
def test_cli_storyboard_output_uses_title(tmp_path: Path, scenario_a: str, capsys: pytest.CaptureFixture[str]) -> None:
    script = tmp_path / "issue.txt"
    script.write_text(scenario_a, encoding="utf-8")

    assert main.main([str(script), "--output", "storyboard", "--title", "Issue One"]) == 0
    assert json.loads(capsys.readouterr().out)["title"] == "Issue One"


@pytest.mark.integration
def test_cli_missing_file_returns_error(tmp_path: Path) -> None:
    assert main.main([str(tmp_path / "missing.txt")]) == 1
