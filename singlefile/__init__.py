"""Public Python API for singlefile.

The package turns a WebGL build directory into one self-contained HTML
document. ``bundle`` is the main entry point; ``build_single_file`` also runs
the external platform build first when one is configured.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from singlefile.artifacts import ArtifactRole, BuildArtifactSet, locate_artifacts
from singlefile.blob_script import BLOB_URLS_VAR, build_blob_script
from singlefile.bundler import BundleResult, build_single_file, bundle
from singlefile.config import SingleFileConfig, load_config
from singlefile.errors import (
    AmbiguousArtifactError,
    ArtifactReadError,
    ConfigError,
    ExternalBuildError,
    MissingArtifactError,
    OutputWriteError,
    SingleFileBuildError,
    SubstitutionError,
)
from singlefile.payloads import EncodedPayload, encode_artifact

try:
    __version__: str = version("singlefile")
except PackageNotFoundError:  # pragma: no cover - editable local fallback
    __version__ = "0.1.0"


def about(*, print_output: bool = True) -> str:
    """Return and optionally print the bundled document contract.

    Args:
        print_output: Whether to print the returned summary.

    Returns:
        Human-readable summary string.

    Example:
        >>> from singlefile import about
        >>> "Blob URLs" in about(print_output=False)
        True
    """
    text = (
        f"singlefile {__version__}\n"
        "Inputs: <build>/index.html and <build>/Build/*.loader.js, *.framework.js, *.wasm, *.data.\n"
        "Loader: the external loader <script src> is replaced by an inline script.\n"
        f"Blob URLs: framework, wasm and data are embedded as base64 and exposed as {BLOB_URLS_VAR}.*.\n"
        "Config: dataUrl, frameworkUrl and codeUrl point at the blob URLs; symbolsUrl and "
        "streamingAssetsUrl are left unchanged.\n"
        "Output: written once, after every check passed; existing files are overwritten."
    )
    if print_output:
        print(text)
    return text


__all__ = [
    "__version__",
    "about",
    "ArtifactRole",
    "BuildArtifactSet",
    "BundleResult",
    "EncodedPayload",
    "SingleFileConfig",
    "BLOB_URLS_VAR",
    "bundle",
    "build_blob_script",
    "build_single_file",
    "encode_artifact",
    "load_config",
    "locate_artifacts",
    "AmbiguousArtifactError",
    "ArtifactReadError",
    "ConfigError",
    "ExternalBuildError",
    "MissingArtifactError",
    "OutputWriteError",
    "SingleFileBuildError",
    "SubstitutionError",
]
