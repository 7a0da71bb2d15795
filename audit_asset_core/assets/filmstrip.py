"""Static HTML viewer for screenshot filmstrips."""

import json
from collections.abc import Sequence
from typing import Any

from audit_asset_core.exceptions import TraceSerializationError

__all__ = ["render_screenshots_html"]

_HTML_TEMPLATE = """<!doctype html>
<meta charset="utf-8">
<title>screenshots</title>
<style>
html {{
  overflow-x: scroll;
  overflow-y: hidden;
  height: 100%;
  background: linear-gradient(to left, #4ca1af, #c4e0e5) fixed;
  padding: 10px;
}}
body {{
  white-space: nowrap;
  width: 100%;
  margin: 0;
}}
img {{
  margin: 4px;
}}
</style>
<body>
<script>
var shots = {frames};

shots.forEach(function(s) {{
  var i = document.createElement('img');
  i.src = s.datauri;
  i.title = s.timestamp;
  document.body.appendChild(i);
}});
</script>
"""


def render_screenshots_html(filmstrip: Sequence[dict[str, Any]]) -> str:
    """Render a filmstrip as a standalone HTML page.

    Frames are embedded as compact inline JSON, e.g.
    ``{"timestamp":674089419.919,"datauri":"data:image/jpeg;base64,..."}``.
    ``</`` is escaped so frame data cannot terminate the script element.
    """
    try:
        frames = json.dumps(list(filmstrip), separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise TraceSerializationError(f"Cannot serialize screenshot filmstrip: {e}") from e
    return _HTML_TEMPLATE.format(frames=frames.replace("</", "<\\/"))
