from __future__ import annotations

import warnings
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

from singlefile.artifacts import (
    DEFAULT_BUILD_FOLDER,
    DEFAULT_HOST_DOCUMENT,
    ArtifactRole,
    BuildArtifactSet,
    locate_artifacts,
)
from singlefile.blob_script import BLOB_URL_KEYS, build_blob_script
from singlefile.config import SingleFileConfig
from singlefile.errors import ArtifactReadError, OutputWriteError
from singlefile.payloads import EncodedPayload, encode_artifact
from singlefile.player_build import PlayerBuildReport, run_player_build
from singlefile.rewriter import (
    inline_loader,
    insert_blob_script,
    rewrite_config_urls,
)


@dataclass(frozen=True)
class BundleResult:
    output_path: Path
    artifacts: BuildArtifactSet
    payloads: List[EncodedPayload]
    bytes_written: int
    warnings: List[str] = field(default_factory=list)
    build_report: Optional[PlayerBuildReport] = None


def _read_text(role: ArtifactRole, path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ArtifactReadError(
            f"{role.label.capitalize()} is not valid UTF-8 text "
            f"(byte 0x{exc.object[exc.start]:02x} at offset {exc.start}).",
            role=role,
            path=path,
        ) from exc
    except OSError as exc:
        raise ArtifactReadError(
            f"Cannot read {role.label}: {exc.strerror or exc}.",
            role=role,
            path=path,
        ) from exc


def _encode(role: ArtifactRole, path: Path) -> EncodedPayload:
    try:
        return encode_artifact(role, path)
    except OSError as exc:
        raise ArtifactReadError(
            f"Cannot read {role.label}: {exc.strerror or exc}.",
            role=role,
            path=path,
        ) from exc


def rewrite_document(
    html: str,
    loader_text: str,
    payloads: List[EncodedPayload],
    *,
    strict: bool = False,
) -> str:
    """Apply every substitution to ``html`` and return the new document.

    Config entries are rewritten while the loader is still external, so the
    loader's own source is never searched for config keys.
    """
    html = rewrite_config_urls(html, strict=strict)
    html = inline_loader(html, loader_text, strict=strict)
    return insert_blob_script(html, build_blob_script(payloads), strict=strict)


def bundle(
    build_dir: Path,
    output_path: Path,
    *,
    build_folder: str = DEFAULT_BUILD_FOLDER,
    host_document: str = DEFAULT_HOST_DOCUMENT,
    strict: bool = False,
) -> BundleResult:
    """Turn a WebGL build directory into one self-contained HTML document.

    Args:
        build_dir: Root of the platform build (holds the host document and
            the build folder).
        output_path: Where the rewritten document is written. Overwritten
            if it exists.
        build_folder: Name of the subfolder holding the generated files.
        host_document: Name of the host document inside ``build_dir``.
        strict: Raise on ambiguous artifacts and unmatched substitutions.
            By default the first match is used, unmatched substitutions
            are skipped, and both are reported as warnings.

    Returns:
        A :class:`BundleResult` describing what was written.

    Raises:
        MissingArtifactError: A required file is absent. Nothing is written.
        ArtifactReadError: The host document or loader is unreadable or not
            UTF-8. Nothing is written.
        OutputWriteError: The output path cannot be written.
        AmbiguousArtifactError: Several files match one pattern (strict only).
        SubstitutionError: The document lacks an expected shape (strict only).
            Nothing is written.
    """
    output_path = Path(output_path)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")

        artifacts = locate_artifacts(
            build_dir,
            build_folder=build_folder,
            host_document=host_document,
            strict=strict,
        )
        html = _read_text(ArtifactRole.HOST_DOCUMENT, artifacts.host_document)
        loader_text = _read_text(ArtifactRole.LOADER, artifacts.loader)
        payloads = [_encode(role, artifacts.path_for(role)) for role in BLOB_URL_KEYS]
        html = rewrite_document(html, loader_text, payloads, strict=strict)

    messages = [str(record.message) for record in caught]
    for record in caught:
        warnings.warn(record.message, record.category, stacklevel=2)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(
            f"Cannot write bundled document: {exc.strerror or exc}.",
            path=output_path,
        ) from exc

    return BundleResult(
        output_path=output_path,
        artifacts=artifacts,
        payloads=payloads,
        bytes_written=len(html.encode("utf-8")),
        warnings=messages,
    )


def build_single_file(config: SingleFileConfig) -> BundleResult:
    """Run the external build when configured, then bundle its output.

    The bundler never runs when the external build fails. The build report
    is attached to the result.
    """
    report = None
    if config.build_command:
        report = run_player_build(
            config.build_command,
            config.build_dir,
            cwd=config.build_cwd,
        )

    result = bundle(
        config.build_dir,
        config.resolved_output_path,
        build_folder=config.build_folder,
        host_document=config.host_document,
        strict=config.strict,
    )
    return replace(result, build_report=report)
