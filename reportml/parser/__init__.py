"""Template and data parsers.

- parse_template / parse_template_string / parse_template_bytes: XML template
  to Report model
- parse_data_file / parse_data_string / parse_data_bytes: JSON data document
  to a mapping
"""

from reportml.parser.data_parser import parse_data_bytes, parse_data_file, parse_data_string
from reportml.parser.template_parser import (
    apply_defaults,
    parse_template,
    parse_template_bytes,
    parse_template_string,
)

__all__ = [
    "parse_template",
    "parse_template_string",
    "parse_template_bytes",
    "apply_defaults",
    "parse_data_file",
    "parse_data_string",
    "parse_data_bytes",
]
