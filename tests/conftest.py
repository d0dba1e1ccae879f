"""Pytest configuration and shared fixtures.

This module contains pytest configuration and shared fixtures used
across all test files.
"""

from pathlib import Path

import pytest
from PIL import Image

from reportml.config import Config
from reportml.engine.binding import DataBinder
from reportml.engine.canvas import ReportCanvas
from reportml.engine.renderer import ElementRenderer
from reportml.engine.style_registry import StyleRegistry
from reportml.models.styles import RGBColor, Style

SAMPLE_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<report version="1.0">
  <metadata>
    <name>Sales Report</name>
    <description>Quarterly sales figures</description>
    <author>Finance Team</author>
  </metadata>
  <document orientation="portrait" unit="mm" format="A4">
    <margins top="20" right="15" bottom="20" left="15"/>
  </document>
  <styles>
    <style name="title">
      <fontFamily>Helvetica</fontFamily>
      <fontStyle>B</fontStyle>
      <fontSize>18</fontSize>
      <textColor r="26" g="26" b="26"/>
      <align>C</align>
      <lineHeight>10</lineHeight>
    </style>
    <style name="tableHeader">
      <fontFamily>Helvetica</fontFamily>
      <fontStyle>B</fontStyle>
      <fontSize>10</fontSize>
      <textColor r="255" g="255" b="255"/>
      <fillColor r="0" g="102" b="204"/>
    </style>
    <style name="body">
      <fontFamily>Helvetica</fontFamily>
      <fontSize>10</fontSize>
    </style>
  </styles>
  <header enabled="true" height="15">
    <text style="body" x="15" y="8">{{ .Company }}</text>
  </header>
  <footer enabled="true" height="12">
    <line x1="15" y1="-15" x2="-15" y2="-15" color="gray"/>
  </footer>
  <sections>
    <section name="summary">
      <text style="title">{{ .Title | upper }}</text>
      <keyValueList style="body" keyWidth="40">
        <item key="Region" value="{{ .Region }}"/>
        <item key="Quarter" value="{{ .Quarter }}"/>
      </keyValueList>
      <line x1="15" y1="60" x2="-15" y2="60" color="#cccccc" width="0.5"/>
    </section>
    <section name="details">
      <table dataSource="{{.Sales}}" headerStyle="tableHeader" cellStyle="body" border="true" spacingAfter="5">
        <alternateRowColor r="240" g="240" b="240"/>
        <columns>
          <column header="Product" field="product" width="80"/>
          <column header="Units" field="units" width="40" align="R"/>
          <column header="Revenue" field="revenue" width="60" align="R" format="currency"/>
        </columns>
      </table>
      <list items="{{.Highlights}}" style="body"/>
    </section>
  </sections>
</report>
"""

SAMPLE_DATA = {
    "Company": "Acme Corp",
    "Title": "Quarterly Sales",
    "Region": "EMEA",
    "Quarter": "Q3",
    "Sales": [
        {"product": "Widget", "units": 120, "revenue": 1234.5},
        {"product": "Gadget", "units": 45, "revenue": 99.999},
    ],
    "Highlights": ["Record widget sales", "New gadget line launched"],
}


@pytest.fixture
def sample_template_xml() -> str:
    """Return a template exercising every section-level feature."""
    return SAMPLE_TEMPLATE


@pytest.fixture
def sample_data() -> dict:
    """Return data matching the sample template."""
    return {
        **SAMPLE_DATA,
        "Sales": [dict(row) for row in SAMPLE_DATA["Sales"]],
        "Highlights": list(SAMPLE_DATA["Highlights"]),
    }


@pytest.fixture
def config() -> Config:
    """Create a Config that ignores .env files and uses defaults."""
    return Config(_env_file=None)


@pytest.fixture
def canvas() -> ReportCanvas:
    """Create an A4 mm canvas with 15 unit margins and one page."""
    canvas = ReportCanvas()
    canvas.set_margins(15, 15, 15)
    canvas.set_auto_page_break(True, 15)
    canvas.add_page()
    return canvas


@pytest.fixture
def styles() -> StyleRegistry:
    """Create a registry with a heading and a body style."""
    return StyleRegistry(
        [
            Style(
                name="heading",
                font_family="Helvetica",
                font_style="B",
                font_size=16,
                text_color=RGBColor(r=10, g=20, b=30),
                align="C",
                line_height=9,
            ),
            Style(
                name="shaded",
                fill_color=RGBColor(r=200, g=200, b=200),
            ),
        ]
    )


@pytest.fixture
def binder(sample_data: dict) -> DataBinder:
    """Create a binder over the sample data."""
    return DataBinder(sample_data)


@pytest.fixture
def renderer(
    canvas: ReportCanvas,
    styles: StyleRegistry,
    binder: DataBinder,
    config: Config,
) -> ElementRenderer:
    """Create an element renderer over the shared canvas fixtures."""
    return ElementRenderer(canvas, styles, binder, config)


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    """Write a 40x20 pixel PNG and return its path."""
    path = tmp_path / "logo.png"
    Image.new("RGB", (40, 20), color=(200, 30, 30)).save(path)
    return path
