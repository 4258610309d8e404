"""
Unit tests for the command-line interface.
"""

import json

import pytest

from project_pulse.cli import main, parse_arguments


class TestCli:
    """Test cases for the project-pulse command."""

    def test_parse_arguments(self):
        args = parse_arguments(["analyze", "--sample", "--timeout", "3", "--json-logs"])

        assert args.command == "analyze"
        assert args.sample is True
        assert args.timeout == 3.0
        assert args.json_logs is True

    def test_source_is_required(self):
        with pytest.raises(SystemExit):
            parse_arguments(["analyze"])

    def test_input_and_sample_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_arguments(["analyze", "--sample", "--input", "project.json"])

    def test_analyze_sample_prints_json(self, capsys):
        exit_code = main(["analyze", "--sample", "--timeout", "30"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert set(output) >= {"team_insights", "dependency_analysis", "overall_health", "agent_states"}
        assert 0 <= output["overall_health"]["score"] <= 100

    def test_analyze_input_file(self, tmp_path, capsys, sample_project_dict):
        path = tmp_path / "project.json"
        path.write_text(json.dumps(sample_project_dict), encoding="utf-8")

        exit_code = main(["analyze", "--input", str(path), "--timeout", "30"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert len(output["team_insights"]) == 4

    def test_missing_input_file(self, tmp_path):
        assert main(["analyze", "--input", str(tmp_path / "absent.json")]) == 1
