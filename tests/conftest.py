"""
Pytest configuration and fixtures for svg_painter.

Provides:
- Writer fixtures (100x100 canvas, orthographic camera)
- SVG parsing helpers
- Temporary file fixtures
"""

import re
from pathlib import Path
from typing import List
from xml.etree import ElementTree as ET

import pytest

from svg_painter.writer import SvgWriter

SVG_NS = {'svg': 'http://www.w3.org/2000/svg'}


# ============================================================================
# SVG Analysis Utilities
# ============================================================================

def parse_svg(svg_content: str) -> ET.Element:
    """Parse SVG text into an ElementTree root element."""
    return ET.fromstring(svg_content)


def drawn_elements(svg_content: str) -> List[ET.Element]:
    """Return the drawn primitives (everything after the background rect), in order."""
    root = parse_svg(svg_content)
    children = list(root)
    return [c for c in children if not c.tag.endswith('rect')]


def fill_of(elem: ET.Element) -> str:
    """Extract the rgb(...) color of an element's inline style."""
    match = re.search(r'rgb\(\d+,\d+,\d+\)', elem.get('style', ''))
    return match.group(0) if match else ''


# ============================================================================
# Writer Fixtures
# ============================================================================

@pytest.fixture
def writer() -> SvgWriter:
    """100x100 writer with ortho(0, 100, 0, 100) and identity model-view."""
    w = SvgWriter(100, 100)
    w.ortho(0, 100, 0, 100)
    return w


@pytest.fixture
def front_triangle():
    """Counter-clockwise (front-facing) triangle in world space."""
    return (0.0, 0.0, 0.0), (100.0, 0.0, 0.0), (0.0, 100.0, 0.0)


@pytest.fixture
def back_triangle(front_triangle):
    """Same corners as front_triangle with reversed winding."""
    a, b, c = front_triangle
    return a, c, b


# ============================================================================
# Temporary File Fixtures
# ============================================================================

@pytest.fixture
def tmp_svg_path(tmp_path: Path) -> Path:
    """Temporary path for SVG output."""
    return tmp_path / "output.svg"
