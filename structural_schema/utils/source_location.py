from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict, Optional

SourceMap = Dict[str, Dict[str, int]]


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[Path] = None
    yaml_path: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


def lookup_source(source_map: Optional[SourceMap], yaml_path: Optional[str]) -> SourceLocation:
    """Find the closest recorded position for a JSON pointer.

    Errors often point at a key that is absent from the document (a missing
    ``type``, say). In that case the position of the nearest existing parent
    is used, while ``yaml_path`` still names the requested pointer.
    """
    if not source_map or yaml_path is None:
        return SourceLocation(yaml_path=yaml_path)

    candidate = yaml_path
    while True:
        entry = source_map.get(candidate)
        if entry:
            return SourceLocation(
                yaml_path=yaml_path,
                line=entry.get("line"),
                column=entry.get("column"),
            )
        if not candidate:
            break
        candidate = candidate.rsplit("/", 1)[0]

    return SourceLocation(yaml_path=yaml_path)


def _format_file_path(path: Path) -> str:
    env_root = os.environ.get("STRUCTURAL_SCHEMA_SOURCE_ROOT")
    if not env_root:
        return str(path)

    try:
        return str(path.relative_to(Path(env_root)))
    except ValueError:
        return str(path)


def format_source(loc: Optional[SourceLocation]) -> str:
    if not loc:
        return ""

    parts = []
    if loc.file_path is not None:
        file_path = _format_file_path(loc.file_path)
        if loc.line is not None and loc.column is not None:
            parts.append(f"source= {file_path}:{loc.line}:{loc.column} ")
        elif loc.line is not None:
            parts.append(f"source= {file_path}:{loc.line} ")
        else:
            parts.append(f"source= {file_path} ")

    if loc.yaml_path:
        parts.append(f"yaml_path={loc.yaml_path}")

    if not parts:
        return ""

    return " (" + " ".join(parts) + ")"
