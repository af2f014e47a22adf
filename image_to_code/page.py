"""HTML rendering for the paste-and-export page."""

from __future__ import annotations

import html

from .page_assets import PAGE_CSS, PAGE_JS
from .session import SessionState

IMAGE_ENDPOINT = "/image"
BINARY_ENDPOINT = "/export/bin"
SOURCE_ENDPOINT = "/export/source"


def render_page_html(
    *,
    name: str,
    state: SessionState,
    image_endpoint: str = IMAGE_ENDPOINT,
    binary_endpoint: str = BINARY_ENDPOINT,
    source_endpoint: str = SOURCE_ENDPOINT,
) -> str:
    """Render the converter page for the current session state."""
    ready = "true" if state is SessionState.READY else "false"
    attrs = " ".join(
        f'data-{key}="{html.escape(value, quote=True)}"'
        for key, value in (
            ("image-endpoint", image_endpoint),
            ("binary-endpoint", binary_endpoint),
            ("source-endpoint", source_endpoint),
            ("ready", ready),
        )
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>Image to C file</title>
<style>{PAGE_CSS}</style>
</head>
<body>
<main {attrs}>
<h1>Image to C file</h1>
<div>Paste an image and convert it to C code</div>
<div class="preview" data-empty="true"><img alt="" /></div>
<div><input id="export-name" type="text" value="{html.escape(name, quote=True)}" /></div>
<div class="actions">
<button id="download-bin" type="button">Download .bin</button>
<button id="copy-source" type="button">Copy as C Code</button>
</div>
<div class="status"></div>
</main>
<script>{PAGE_JS}</script>
</body>
</html>
"""
