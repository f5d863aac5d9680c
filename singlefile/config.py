from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from singlefile.artifacts import DEFAULT_BUILD_FOLDER, DEFAULT_HOST_DOCUMENT
from singlefile.errors import ConfigError

DEFAULT_BUILD_DIR = Path("Builds") / "SingleFileBuild"
DEFAULT_CONFIG_NAME = "singlefile.json"

_PATH_KEYS = ("build_dir", "output_path", "build_cwd")


@dataclass(frozen=True)
class SingleFileConfig:
    build_dir: Path = DEFAULT_BUILD_DIR
    output_path: Optional[Path] = None
    build_folder: str = DEFAULT_BUILD_FOLDER
    host_document: str = DEFAULT_HOST_DOCUMENT
    strict: bool = False
    build_command: Optional[List[str]] = None
    build_cwd: Optional[Path] = None

    @property
    def resolved_output_path(self) -> Path:
        """The document is rewritten in place unless an output path is set."""
        if self.output_path is not None:
            return self.output_path
        return self.build_dir / self.host_document

    def with_overrides(self, **overrides: Any) -> "SingleFileConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _coerce(key: str, value: Any, base_dir: Path, source: Path) -> Any:
    if key in _PATH_KEYS:
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' must be a string path.", path=source)
        path = Path(value)
        return path if path.is_absolute() else base_dir / path
    if key == "build_command":
        if isinstance(value, str):
            raise ConfigError(
                "'build_command' must be a list of arguments, not a shell string.",
                path=source,
            )
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError("'build_command' must be a list of strings.", path=source)
        if not value:
            raise ConfigError("'build_command' must not be empty.", path=source)
        return list(value)
    if key == "strict":
        if not isinstance(value, bool):
            raise ConfigError("'strict' must be true or false.", path=source)
        return value
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty string.", path=source)
    return value


def config_from_dict(
    data: Dict[str, Any],
    *,
    base_dir: Path,
    source: Path,
) -> SingleFileConfig:
    known = {f.name for f in fields(SingleFileConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}.", path=source)
    values = {key: _coerce(key, value, base_dir, source) for key, value in data.items()}
    return SingleFileConfig(**values)


def load_config(path: Optional[Path] = None) -> SingleFileConfig:
    """Load a JSON config file.

    With no explicit path, ``singlefile.json`` in the working directory is
    used when present; otherwise defaults apply. Relative paths in the file
    resolve against the file's directory.
    """
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        if not candidate.exists():
            return SingleFileConfig()
        path = candidate

    path = Path(path)
    if not path.exists():
        raise ConfigError("Config file not found.", path=path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON: {exc.msg} (line {exc.lineno}).", path=path) from exc
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object.", path=path)
    return config_from_dict(data, base_dir=path.resolve().parent, source=path)
