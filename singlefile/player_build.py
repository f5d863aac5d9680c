from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from singlefile.errors import ExternalBuildError

_OUTPUT_TAIL_LINES = 20


@dataclass(frozen=True)
class PlayerBuildReport:
    command: Sequence[str]
    returncode: int
    total_size: int


def _tail(text: str) -> str:
    lines = text.strip().splitlines()
    return "\n".join(lines[-_OUTPUT_TAIL_LINES:])


def directory_size(path: Path) -> int:
    if not path.exists():
        return 0
    return sum(entry.stat().st_size for entry in path.rglob("*") if entry.is_file())


def run_player_build(
    command: Sequence[str],
    build_dir: Path,
    *,
    cwd: Optional[Path] = None,
) -> PlayerBuildReport:
    """Run the external platform build and check it produced ``build_dir``.

    The command is expected to build the configured scene for the WebGL
    target into ``build_dir`` (for Unity, a batch-mode invocation of an
    editor build method).
    """
    if not command:
        raise ExternalBuildError("Build command is empty.")
    try:
        completed = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise ExternalBuildError(f"Build failed: cannot run '{command[0]}': {exc}") from exc

    if completed.returncode != 0:
        raise ExternalBuildError(
            f"Build failed with exit code {completed.returncode}.",
            returncode=completed.returncode,
            output=_tail(completed.stderr or completed.stdout or ""),
        )
    if not Path(build_dir).is_dir():
        raise ExternalBuildError(
            f"Build reported success but did not produce {build_dir}.",
            returncode=completed.returncode,
        )
    return PlayerBuildReport(
        command=list(command),
        returncode=completed.returncode,
        total_size=directory_size(Path(build_dir)),
    )
