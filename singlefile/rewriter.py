from __future__ import annotations

import re
import warnings
from typing import Dict, List, Tuple

from singlefile.artifacts import ArtifactRole
from singlefile.blob_script import blob_url_expr
from singlefile.errors import SubstitutionError
from singlefile.html_scan import find_body_close, find_script_elements

LOADER_SUFFIX = ".loader.js"

CONFIG_KEYS: Dict[ArtifactRole, str] = {
    ArtifactRole.DATA: "dataUrl",
    ArtifactRole.FRAMEWORK: "frameworkUrl",
    ArtifactRole.CODE: "codeUrl",
}

# Still loaded from separate files when present.
EXTERNAL_CONFIG_KEYS = ("symbolsUrl", "streamingAssetsUrl")


def _config_pattern(key: str) -> re.Pattern[str]:
    return re.compile(
        r"(?P<prefix>(?P<kq>[\"']?)\b"
        + re.escape(key)
        + r"(?P=kq)\s*:\s*)(?P<q>[\"'])(?:\\.|(?!(?P=q))[^\\\n])*(?P=q)"
    )


def _report(message: str, *, strict: bool) -> None:
    if strict:
        raise SubstitutionError(message)
    warnings.warn(message, UserWarning, stacklevel=3)


def _splice(html: str, replacements: List[Tuple[int, int, str]]) -> str:
    for start, end, text in sorted(replacements, reverse=True):
        html = html[:start] + text + html[end:]
    return html


def escape_script_text(text: str) -> str:
    """Keep ``text`` from closing its surrounding script element early."""
    return re.sub(r"</(script)", r"<\\/\1", text, flags=re.IGNORECASE)


def _is_loader_src(src: str | None) -> bool:
    if not src:
        return False
    path = src.split("?", 1)[0].split("#", 1)[0]
    return path.endswith(LOADER_SUFFIX)


def inline_loader(html: str, loader_text: str, *, strict: bool = False) -> str:
    """Replace external loader ``<script src>`` elements with the loader source."""
    inline = f"<script>{escape_script_text(loader_text)}</script>"
    replacements = [
        (element.start, element.end, inline)
        for element in find_script_elements(html)
        if _is_loader_src(element.src)
    ]
    if not replacements:
        _report(
            f"No <script src=\"...{LOADER_SUFFIX}\"> element found; loader was not inlined.",
            strict=strict,
        )
        return html
    return _splice(html, replacements)


def insert_blob_script(html: str, blob_script: str, *, strict: bool = False) -> str:
    """Insert ``blob_script`` right before the first inline JavaScript element."""
    for element in find_script_elements(html):
        if element.is_inline_javascript:
            return html[: element.start] + blob_script + html[element.start :]

    _report(
        "No inline <script> element found to precede with the blob script.",
        strict=strict,
    )
    position = find_body_close(html)
    if position is None:
        position = len(html)
    return html[:position] + blob_script + html[position:]


def rewrite_config_urls(html: str, *, strict: bool = False) -> str:
    """Point the data/framework/code config entries at the blob URLs.

    Only the first quoted-string assignment of each key inside an inline
    script body is rewritten.
    """
    bodies = [
        (element.start_tag_end, element.content_end)
        for element in find_script_elements(html)
        if element.is_inline_javascript
    ]

    replacements: List[Tuple[int, int, str]] = []
    missing: List[str] = []
    for role, key in CONFIG_KEYS.items():
        pattern = _config_pattern(key)
        match = None
        for body_start, body_end in bodies:
            match = pattern.search(html, body_start, body_end)
            if match is not None:
                break
        if match is None:
            missing.append(key)
            continue
        replacements.append(
            (match.start(), match.end(), match.group("prefix") + blob_url_expr(role))
        )

    if missing:
        _report(
            "Config entries not found as quoted string values: " + ", ".join(missing) + ".",
            strict=strict,
        )

    rewritten = _splice(html, replacements)

    for key in EXTERNAL_CONFIG_KEYS:
        if _config_pattern(key).search(rewritten):
            warnings.warn(
                f"'{key}' is left unchanged and still references an external file.",
                UserWarning,
                stacklevel=2,
            )
    return rewritten
