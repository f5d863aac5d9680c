from pathlib import Path
from typing import Optional, Sequence


def _format_with_context(
    message: str,
    *,
    path: Optional[Path] = None,
    candidates: Sequence[Path] = (),
) -> str:
    details = []
    if path is not None:
        details.append(f"Location: {path}")
    if candidates:
        details.append("Candidates: " + ", ".join(sorted(p.name for p in candidates)))
    if not details:
        return message
    return f"{message}\n" + "\n".join(details)


class SingleFileBuildError(Exception):
    """Base single-file build error."""


class ConfigError(SingleFileBuildError):
    """Raised when a configuration file or option is invalid."""

    def __init__(self, message: str, *, path: Optional[Path] = None):
        super().__init__(_format_with_context(message, path=path))


class ExternalBuildError(SingleFileBuildError):
    """Raised when the upstream platform build step does not succeed."""

    def __init__(self, message: str, *, returncode: Optional[int] = None, output: str = ""):
        self.returncode = returncode
        self.output = output
        if output:
            message = f"{message}\nOutput (tail):\n{output}"
        super().__init__(message)


class MissingArtifactError(SingleFileBuildError):
    """Raised when a required build artifact is absent."""

    def __init__(self, message: str, *, role=None, path: Optional[Path] = None):
        self.role = role
        super().__init__(_format_with_context(message, path=path))


class AmbiguousArtifactError(SingleFileBuildError):
    """Raised when several files match one artifact pattern."""

    def __init__(self, message: str, *, role=None, candidates: Sequence[Path] = ()):
        self.role = role
        self.candidates = list(candidates)
        super().__init__(_format_with_context(message, candidates=candidates))


class SubstitutionError(SingleFileBuildError):
    """Raised when an expected document shape is not found."""


class ArtifactReadError(SingleFileBuildError):
    """Raised when a located artifact cannot be read or decoded."""

    def __init__(self, message: str, *, role=None, path: Optional[Path] = None):
        self.role = role
        super().__init__(_format_with_context(message, path=path))


class OutputWriteError(SingleFileBuildError):
    """Raised when the bundled document cannot be written."""

    def __init__(self, message: str, *, path: Optional[Path] = None):
        super().__init__(_format_with_context(message, path=path))
