"""Tests for the generator CLI."""

from __future__ import annotations

import json

import pytest

from generator import default_output_path, load_inputs, main, parse_args

from tests.conftest import make_lease_inputs


@pytest.fixture
def lease_file(tmp_path):
    path = tmp_path / "lease.json"
    path.write_text(json.dumps(make_lease_inputs()))
    return path


class TestLoadInputs:
    """Tests for generator.load_inputs()."""

    def test_no_path_is_empty_map(self):
        assert load_inputs(None) == {}

    def test_reads_object(self, lease_file):
        assert load_inputs(str(lease_file))["tenant_name"] == "Maria Delgado"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_inputs(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_inputs(str(path))

    def test_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="Expected a JSON object"):
            load_inputs(str(path))


class TestArgs:
    def test_defaults(self):
        args = parse_args(["--template", "invoice"])
        assert args.format == "pdf"
        assert args.input is None
        assert not args.verbose

    def test_default_output_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOCGEN_OUTPUT_DIR", str(tmp_path))
        assert default_output_path("invoice", "json") == tmp_path / "invoice.json"


class TestMain:
    """Tests for generator.main() exit codes and outputs."""

    def test_list(self):
        assert main(["--list"]) == 0

    def test_missing_template_argument(self):
        assert main([]) == 2

    def test_unknown_template(self):
        assert main(["--template", "nope"]) == 1

    def test_missing_input_file(self, tmp_path):
        assert main(["--template", "invoice", "--input", str(tmp_path / "missing.json")]) == 1

    def test_json_output(self, lease_file, tmp_path):
        out = tmp_path / "lease.json.out"
        code = main([
            "--template", "florida_lease", "--input", str(lease_file),
            "--format", "json", "--output", str(out),
        ])
        assert code == 0
        payload = json.loads(out.read_text())
        assert payload["template"] == "florida_lease"
        assert payload["status"] == "success"

    def test_pdf_output_to_default_dir(self, lease_file, tmp_path, monkeypatch):
        monkeypatch.setenv("DOCGEN_OUTPUT_DIR", str(tmp_path / "dist"))
        assert main(["--template", "docgen://templates/florida_lease", "--input", str(lease_file)]) == 0
        assert (tmp_path / "dist" / "florida_lease.pdf").read_bytes().startswith(b"%PDF")

    def test_empty_input_still_renders(self, tmp_path):
        out = tmp_path / "notice.pdf"
        assert main(["--template", "three_day_notice", "--output", str(out)]) == 0
        assert out.exists()
