"""Rendering engine.

- ReportEngine: lifecycle of one document (initialize, pages, sections, output)
- ElementRenderer: per-kind element drawing
- ReportCanvas: cursor-based ReportLab canvas
- StyleRegistry: named style lookup
- DataBinder: placeholder substitution
- format_value: deterministic value formatting
"""

from reportml.engine.binding import DataBinder
from reportml.engine.canvas import ReportCanvas
from reportml.engine.engine import EngineState, ReportEngine
from reportml.engine.formatting import format_value
from reportml.engine.renderer import ElementRenderer
from reportml.engine.style_registry import StyleRegistry

__all__ = [
    "ReportEngine",
    "EngineState",
    "ElementRenderer",
    "ReportCanvas",
    "StyleRegistry",
    "DataBinder",
    "format_value",
]
