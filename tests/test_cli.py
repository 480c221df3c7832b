"""Tests for the command line demo."""

import json

import pytest

from cvdrisk.cli import SAMPLE_PATIENT, main


class TestCli:
    """Test CLI runs."""

    def test_sample_json(self, capsys):
        """Test the sample patient scores with both models."""
        assert main(["--sample", "--json"]) == 0
        outcomes = json.loads(capsys.readouterr().out)
        assert [o["model"] for o in outcomes] == ["framingham_2008", "qrisk3_2017"]
        assert all(o["success"] for o in outcomes)
        framingham = outcomes[0]
        assert {m["name"] for m in framingham["modifiers"]} == {
            "lipoprotein_a", "family_history", "south_asian_ancestry",
        }

    def test_file_single_model(self, tmp_path, capsys):
        """Test a profile file with a single model and pretty output."""
        path = tmp_path / "patient.json"
        path.write_text(json.dumps(SAMPLE_PATIENT))
        assert main(["--file", str(path), "--model", "qrisk3"]) == 0
        out = capsys.readouterr().out
        assert "QRISK3_2017" in out
        assert "Heart age" in out

    def test_missing_file(self, tmp_path):
        """Test a missing file exits with status 1."""
        assert main(["--file", str(tmp_path / "nope.json")]) == 1

    def test_failed_calculation_exit_code(self, tmp_path, capsys):
        """Test an out-of-domain profile exits with status 2."""
        path = tmp_path / "child.json"
        path.write_text(json.dumps({**SAMPLE_PATIENT, "age": 10}))
        assert main(["--file", str(path), "--json"]) == 2
        outcomes = json.loads(capsys.readouterr().out)
        assert all(o["error_type"] == "validation" for o in outcomes)

    def test_source_required(self):
        """Test either --file or --sample is required."""
        with pytest.raises(SystemExit):
            main([])
