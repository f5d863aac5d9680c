"""Locate ``<script>`` elements in an HTML document.

The document is tokenized with the standard library HTML parser, which knows
about comments and raw-text script bodies. Each element is reported with the
absolute offsets of its source text so callers can splice replacements into
the original string without re-serializing anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

JAVASCRIPT_TYPES = frozenset(
    {
        "",
        "text/javascript",
        "application/javascript",
        "text/ecmascript",
        "application/ecmascript",
        "module",
    }
)


@dataclass(frozen=True)
class ScriptElement:
    start: int
    start_tag_end: int
    content_end: int
    end: int
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def src(self) -> Optional[str]:
        return self.attributes.get("src")

    @property
    def is_inline_javascript(self) -> bool:
        if "src" in self.attributes:
            return False
        script_type = (self.attributes.get("type") or "").strip().lower()
        return script_type in JAVASCRIPT_TYPES


class _ScriptCollector(HTMLParser):
    def __init__(self, text: str):
        super().__init__(convert_charrefs=False)
        self._text = text
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)
        self._open: Optional[Tuple[int, int, Dict[str, Optional[str]]]] = None
        self.elements: List[ScriptElement] = []

    def _offset(self) -> int:
        line, column = self.getpos()
        return self._line_starts[line - 1] + column

    def _start(self, attrs) -> Tuple[int, int, Dict[str, Optional[str]]]:
        start = self._offset()
        raw = self.get_starttag_text() or ""
        return start, start + len(raw), {name.lower(): value for name, value in attrs}

    def handle_starttag(self, tag, attrs):
        if tag == "script":
            self._open = self._start(attrs)

    def handle_startendtag(self, tag, attrs):
        if tag != "script":
            return
        start, start_tag_end, attributes = self._start(attrs)
        self.elements.append(
            ScriptElement(start, start_tag_end, start_tag_end, start_tag_end, attributes)
        )

    def handle_endtag(self, tag):
        if tag != "script" or self._open is None:
            return
        start, start_tag_end, attributes = self._open
        self._open = None
        content_end = self._offset()
        close = self._text.find(">", content_end)
        end = close + 1 if close != -1 else len(self._text)
        self.elements.append(
            ScriptElement(start, start_tag_end, content_end, end, attributes)
        )


def find_script_elements(html: str) -> List[ScriptElement]:
    """Return every complete ``<script>`` element in document order."""
    collector = _ScriptCollector(html)
    collector.feed(html)
    collector.close()
    return collector.elements


def find_body_close(html: str) -> Optional[int]:
    """Offset of the last ``</body>`` tag, if any."""
    index = html.lower().rfind("</body")
    return index if index != -1 else None
