from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from singlefile.artifacts import ArtifactRole

MEDIA_TYPES: Dict[ArtifactRole, str] = {
    ArtifactRole.FRAMEWORK: "application/javascript",
    ArtifactRole.CODE: "application/wasm",
    ArtifactRole.DATA: "application/octet-stream",
}


@dataclass(frozen=True)
class EncodedPayload:
    role: ArtifactRole
    media_type: str
    base64_text: str
    size: int

    def decode(self) -> bytes:
        return base64.b64decode(self.base64_text)


def encode_artifact(role: ArtifactRole, path: Path) -> EncodedPayload:
    """Read ``path`` as raw bytes and return its base64 payload."""
    if role not in MEDIA_TYPES:
        raise ValueError(f"No embedded media type for {role.label}.")
    raw = Path(path).read_bytes()
    return EncodedPayload(
        role=role,
        media_type=MEDIA_TYPES[role],
        base64_text=base64.b64encode(raw).decode("ascii"),
        size=len(raw),
    )
