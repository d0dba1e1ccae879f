"""JSON data document parser.

The data document supplies the values placeholders and data sources are
resolved against. It must decode to a JSON object.
"""

import json
import logging
from pathlib import Path
from typing import Any

from reportml.exceptions.data_parse_error import DataParseError

logger = logging.getLogger(__name__)


def parse_data_file(path: str | Path) -> dict[str, Any]:
    """Read and decode a JSON data file.

    Args:
        path: Path to the JSON document

    Returns:
        Decoded data mapping

    Raises:
        DataParseError: If the file cannot be read or decoded
    """
    data_path = Path(path)
    try:
        raw = data_path.read_bytes()
    except OSError as e:
        raise DataParseError(
            f"Failed to read data file {data_path}: {e}",
            context={"path": str(data_path)},
        ) from e
    return parse_data_bytes(raw)


def parse_data_string(text: str) -> dict[str, Any]:
    """Decode a JSON data document held in a string."""
    return parse_data_bytes(text.encode("utf-8"))


def parse_data_bytes(raw: bytes) -> dict[str, Any]:
    """Decode raw JSON bytes into a data mapping.

    Args:
        raw: JSON document bytes (UTF-8, UTF-16 or UTF-32)

    Returns:
        Decoded data mapping

    Raises:
        DataParseError: If the bytes are not valid JSON or do not decode to
            a JSON object
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DataParseError(
            f"Failed to parse JSON data: {e}",
            context={"error": str(e)},
        ) from e

    if not isinstance(data, dict):
        raise DataParseError(
            f"JSON data must be an object, got {type(data).__name__}",
            context={"type": type(data).__name__},
        )

    logger.debug(f"Parsed data document with {len(data)} top-level key(s)")
    return data
