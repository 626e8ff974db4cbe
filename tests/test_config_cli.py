"""
Tests for configuration access, file helpers and the command line.
"""

import json

import pytest

import main
from config import ConfigurationManager, get_config
from invoice_parser.utils.exceptions import (
    ConfigurationError,
    InputFileNotFoundError,
    UnsupportedFileTypeError,
)
from invoice_parser.utils.helpers import collect_input_files, safe_filename


@pytest.fixture
def custom_config(tmp_path):
    """Write a settings file and drop the shared instance around the test"""
    def _write(content):
        path = tmp_path / "settings.yaml"
        path.write_text(content, encoding="utf-8")
        return path

    ConfigurationManager.reset()
    yield _write
    ConfigurationManager.reset()


class TestConfiguration:
    """Tests for the YAML configuration"""

    def test_dot_keys(self):
        assert get_config("financial.default_tax_rate") == 21
        assert get_config("locale.primary.name") == "Dutch"
        assert get_config("payment.terms_template") == "{days} dagen"

    def test_default_for_missing_key(self):
        assert get_config("nonexistent.key", "fallback") == "fallback"

    def test_singleton(self):
        assert ConfigurationManager() is ConfigurationManager()

    def test_reset(self):
        first = ConfigurationManager()
        ConfigurationManager.reset()
        second = ConfigurationManager()
        assert first is not second
        assert second.get("financial.default_tax_rate") == 21

    def test_custom_file(self, custom_config):
        path = custom_config("locale: {}\nfinancial:\n  default_tax_rate: 9\nline_items: {}\n")
        assert ConfigurationManager(str(path)).get("financial.default_tax_rate") == 9
        assert get_config("financial.default_tax_rate") == 9

    def test_missing_section(self, custom_config):
        path = custom_config("locale: {}\nfinancial: {}\n")
        with pytest.raises(ConfigurationError) as excinfo:
            ConfigurationManager(str(path))
        assert excinfo.value.details == {"missing_sections": ["line_items"]}

    def test_missing_file(self, custom_config, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigurationManager(str(tmp_path / "missing.yaml"))


class TestHelpers:
    """Tests for input collection"""

    def test_directory_is_sorted(self, tmp_path):
        for name in ["b.txt", "a.txt", "c.pdf"]:
            (tmp_path / name).write_text("x")
        assert [p.name for p in collect_input_files(tmp_path)] == ["a.txt", "b.txt"]

    def test_missing_input(self, tmp_path):
        with pytest.raises(InputFileNotFoundError):
            collect_input_files(tmp_path / "missing.txt")

    def test_extension_case_ignored(self, tmp_path):
        path = tmp_path / "SCAN_002.TXT"
        path.write_text("x")
        assert collect_input_files(path) == [path]

    def test_unsupported_file(self, tmp_path):
        path = tmp_path / "scan.pdf"
        path.write_text("x")
        with pytest.raises(UnsupportedFileTypeError):
            collect_input_files(path)

    def test_safe_filename(self):
        assert safe_filename("invoice:F2024/0091.json") == "invoice_F2024_0091.json"


class TestCommandLine:
    """Tests for main.main"""

    def test_writes_json(self, sample_text, tmp_path):
        source = tmp_path / "scan_001.txt"
        source.write_text(sample_text, encoding='utf-8')
        out_dir = tmp_path / "out"

        exit_code = main.main(["--input", str(source), "--output", str(out_dir), "--no-excel", "--quiet"])

        assert exit_code == 0
        data = json.loads((out_dir / "scan_001.json").read_text(encoding='utf-8'))
        assert data['invoice_number'] == "F2024-0091"

    def test_stdout(self, sample_text, tmp_path, capsys):
        source = tmp_path / "scan_001.txt"
        source.write_text(sample_text, encoding='utf-8')

        exit_code = main.main(["--input", str(source), "--stdout"])

        assert exit_code == 0
        records = json.loads(capsys.readouterr().out)
        assert records[0]['vendor']['company_name'] == "Acme Solutions B.V."

    def test_missing_input(self, tmp_path):
        assert main.main(["--input", str(tmp_path / "missing.txt")]) == 1

    def test_empty_directory(self, tmp_path):
        assert main.main(["--input", str(tmp_path), "--quiet"]) == 1

    def test_invalid_config(self, sample_text, tmp_path, custom_config):
        source = tmp_path / "scan_001.txt"
        source.write_text(sample_text, encoding='utf-8')
        settings = custom_config("locale: {}\n")
        assert main.main(["--input", str(source), "--config", str(settings), "--stdout"]) == 1
