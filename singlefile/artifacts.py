from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List

from singlefile.errors import AmbiguousArtifactError, MissingArtifactError

DEFAULT_BUILD_FOLDER = "Build"
DEFAULT_HOST_DOCUMENT = "index.html"


class ArtifactRole(Enum):
    HOST_DOCUMENT = "host document"
    LOADER = "loader script"
    FRAMEWORK = "framework script"
    CODE = "wasm code module"
    DATA = "data archive"

    @property
    def label(self) -> str:
        return self.value


# Searched inside the build folder, in this order.
BUILD_FOLDER_PATTERNS: Dict[ArtifactRole, str] = {
    ArtifactRole.LOADER: "*.loader.js",
    ArtifactRole.FRAMEWORK: "*.framework.js",
    ArtifactRole.CODE: "*.wasm",
    ArtifactRole.DATA: "*.data",
}


@dataclass(frozen=True)
class BuildArtifactSet:
    host_document: Path
    loader: Path
    framework: Path
    code: Path
    data: Path

    def path_for(self, role: ArtifactRole) -> Path:
        return {
            ArtifactRole.HOST_DOCUMENT: self.host_document,
            ArtifactRole.LOADER: self.loader,
            ArtifactRole.FRAMEWORK: self.framework,
            ArtifactRole.CODE: self.code,
            ArtifactRole.DATA: self.data,
        }[role]


def _match_single(
    build_folder: Path,
    role: ArtifactRole,
    pattern: str,
    *,
    strict: bool,
) -> Path:
    matches: List[Path] = sorted(
        path for path in build_folder.glob(pattern) if path.is_file()
    )
    if not matches:
        raise MissingArtifactError(
            f"{role.label.capitalize()} not found (expected '{pattern}').",
            role=role,
            path=build_folder,
        )
    if len(matches) > 1:
        if strict:
            raise AmbiguousArtifactError(
                f"Several files match the {role.label} pattern '{pattern}'.",
                role=role,
                candidates=matches,
            )
        warnings.warn(
            f"Several files match the {role.label} pattern '{pattern}'; "
            f"using '{matches[0].name}'.",
            UserWarning,
            stacklevel=3,
        )
    return matches[0]


def locate_artifacts(
    build_dir: Path,
    *,
    build_folder: str = DEFAULT_BUILD_FOLDER,
    host_document: str = DEFAULT_HOST_DOCUMENT,
    strict: bool = False,
) -> BuildArtifactSet:
    """Find the host document and the four generated build files.

    Nothing is read here: a failure leaves the build directory untouched and
    no output is produced.
    """
    build_dir = Path(build_dir)
    folder = build_dir / build_folder
    if not folder.is_dir():
        raise MissingArtifactError(
            f"Build folder '{build_folder}' not found.",
            path=folder,
        )

    found = {
        role: _match_single(folder, role, pattern, strict=strict)
        for role, pattern in BUILD_FOLDER_PATTERNS.items()
    }

    document_path = build_dir / host_document
    if not document_path.is_file():
        raise MissingArtifactError(
            f"{host_document} not found in build directory.",
            role=ArtifactRole.HOST_DOCUMENT,
            path=build_dir,
        )

    return BuildArtifactSet(
        host_document=document_path,
        loader=found[ArtifactRole.LOADER],
        framework=found[ArtifactRole.FRAMEWORK],
        code=found[ArtifactRole.CODE],
        data=found[ArtifactRole.DATA],
    )
