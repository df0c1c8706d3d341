"""Locate schema documents inside CustomResourceDefinition manifests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator

from ...field import FieldPath

CRD_KIND = "CustomResourceDefinition"


@dataclass(frozen=True)
class SchemaSource:
    """A raw schema document and where it was found."""
    name: str
    fld_path: FieldPath
    raw: Any


def is_crd_manifest(document: Any) -> bool:
    return isinstance(document, dict) and document.get("kind") == CRD_KIND


def iter_manifest_schemas(document: Dict[str, Any]) -> Iterator[SchemaSource]:
    """Yield every schema contained in ``document``.

    For a CustomResourceDefinition these are the per-version
    ``schema.openAPIV3Schema`` entries and the legacy top-level
    ``spec.validation.openAPIV3Schema``. Any other document is taken as a bare
    schema rooted at the empty path.
    """
    if not is_crd_manifest(document):
        yield SchemaSource(name="schema", fld_path=FieldPath(), raw=document)
        return

    spec = document.get("spec")
    if not isinstance(spec, dict):
        return

    spec_path = FieldPath.new("spec")

    validation = spec.get("validation")
    if isinstance(validation, dict) and "openAPIV3Schema" in validation:
        yield SchemaSource(
            name="validation",
            fld_path=spec_path.child("validation", "openAPIV3Schema"),
            raw=validation["openAPIV3Schema"],
        )

    versions = spec.get("versions")
    if not isinstance(versions, list):
        return

    for i, version in enumerate(versions):
        if not isinstance(version, dict):
            continue
        schema = version.get("schema")
        if not isinstance(schema, dict) or "openAPIV3Schema" not in schema:
            continue
        yield SchemaSource(
            name=str(version.get("name", i)),
            fld_path=spec_path.child("versions").index(i).child("schema", "openAPIV3Schema"),
            raw=schema["openAPIV3Schema"],
        )
