from __future__ import annotations

from typing import Dict, Iterable

from singlefile.artifacts import ArtifactRole
from singlefile.payloads import EncodedPayload

BLOB_URLS_VAR = "unityBlobUrls"

BLOB_URL_KEYS: Dict[ArtifactRole, str] = {
    ArtifactRole.FRAMEWORK: "framework",
    ArtifactRole.CODE: "code",
    ArtifactRole.DATA: "data",
}


def blob_url_expr(role: ArtifactRole) -> str:
    return f"{BLOB_URLS_VAR}.{BLOB_URL_KEYS[role]}"


def _emit_prelude() -> str:
    return f"""\
var {BLOB_URLS_VAR} = {{}};
function base64ToBlob(base64, type) {{
    var binary = atob(base64);
    var len = binary.length;
    var buffer = new ArrayBuffer(len);
    var view = new Uint8Array(buffer);
    for (var i = 0; i < len; i++) {{
        view[i] = binary.charCodeAt(i);
    }}
    return new Blob([buffer], {{type: type}});
}}"""


def _emit_payload(payload: EncodedPayload) -> str:
    return (
        f"{blob_url_expr(payload.role)} = URL.createObjectURL("
        f"base64ToBlob('{payload.base64_text}', '{payload.media_type}'));"
    )


def build_blob_script(payloads: Iterable[EncodedPayload]) -> str:
    """Return a ``<script>`` block turning embedded payloads into blob URLs.

    The URLs live as long as the loaded document; they are exposed as
    ``unityBlobUrls.framework``, ``unityBlobUrls.code`` and
    ``unityBlobUrls.data``.
    """
    by_role = {payload.role: payload for payload in payloads}
    missing = [role.label for role in BLOB_URL_KEYS if role not in by_role]
    if missing:
        raise ValueError(f"Missing payloads for: {', '.join(missing)}.")

    lines = ["<script>", _emit_prelude()]
    for role in BLOB_URL_KEYS:
        lines.append(_emit_payload(by_role[role]))
    lines.append("</script>")
    return "\n".join(lines) + "\n"
