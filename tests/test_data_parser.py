"""Tests for the JSON data parser."""

from pathlib import Path

import pytest

from reportml.exceptions import DataParseError
from reportml.parser.data_parser import parse_data_bytes, parse_data_file, parse_data_string


class TestParseData:
    """Tests for data document decoding."""

    def test_parse_object(self) -> None:
        """Test a JSON object decodes to a dict."""
        data = parse_data_string('{"Title": "Report", "Rows": [{"a": 1}], "Total": 12.5}')
        assert data == {"Title": "Report", "Rows": [{"a": 1}], "Total": 12.5}

    def test_parse_bytes_utf8(self) -> None:
        """Test UTF-8 bytes are decoded."""
        assert parse_data_bytes('{"City": "Zürich"}'.encode("utf-8")) == {"City": "Zürich"}

    def test_invalid_json(self) -> None:
        """Test malformed JSON raises DataParseError."""
        with pytest.raises(DataParseError):
            parse_data_string('{"Title": ')

    @pytest.mark.parametrize("text", ["[1, 2]", '"text"', "42", "null"])
    def test_non_object_rejected(self, text: str) -> None:
        """Test only JSON objects are accepted."""
        with pytest.raises(DataParseError, match="object"):
            parse_data_string(text)

    def test_parse_file(self, tmp_path: Path) -> None:
        """Test reading from a file."""
        path = tmp_path / "data.json"
        path.write_text('{"Region": "EMEA"}', encoding="utf-8")
        assert parse_data_file(path) == {"Region": "EMEA"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises DataParseError naming the path."""
        with pytest.raises(DataParseError) as exc_info:
            parse_data_file(tmp_path / "missing.json")
        assert "missing.json" in exc_info.value.context["path"]
