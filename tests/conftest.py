from __future__ import annotations

import logging
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from structural_schema.models.parsing.yaml_parser import yaml_parser
from structural_schema.models.structural import (
    Extensions,
    Generic,
    NestedValueValidation,
    Structural,
)


def node(type_: str = "", **kwargs) -> Structural:
    """Build a Structural with the given type and extension flags."""
    extensions = Extensions(
        x_preserve_unknown_fields=kwargs.pop("preserve", False),
        x_embedded_resource=kwargs.pop("embedded", False),
        x_int_or_string=kwargs.pop("int_or_string", False),
    )
    generic = kwargs.pop("generic", None) or Generic(type=type_)
    return Structural(generic=generic, extensions=extensions, **kwargs)


def nested_type(type_: str) -> NestedValueValidation:
    return NestedValueValidation(forbidden_generics=Generic(type=type_))


@pytest.fixture(autouse=True)
def _clear_yaml_cache():
    yaml_parser.clear_cache()
    yield
    yaml_parser.clear_cache()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # the CLI reconfigures root handlers
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def write_file(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
