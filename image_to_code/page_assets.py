"""
Static asset loader for the converter page

Loads the CSS and JavaScript files from the package's assets/ directory once
at import time and exposes them as module-level constants:
- PAGE_CSS: Page styling
- PAGE_JS: Paste handling and export buttons

Used by page.py to inline static assets into the rendered HTML.
"""

from __future__ import annotations

from pathlib import Path


def _get_assets_dir() -> Path:
    """Return the path to the assets directory."""
    return Path(__file__).resolve().parent / "assets"


def _load_css() -> str:
    css_path = _get_assets_dir() / "page.css"
    return css_path.read_text(encoding="utf-8").strip()


def _load_js() -> str:
    js_path = _get_assets_dir() / "page.js"
    return js_path.read_text(encoding="utf-8").strip()


PAGE_CSS = _load_css()
PAGE_JS = _load_js()
