from structural_schema.field import FieldPath
from structural_schema.models.parsing.crd_manifest import is_crd_manifest, iter_manifest_schemas


def _crd(spec):
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": "widgets.example.com"},
        "spec": spec,
    }


def test_bare_schema_is_yielded_at_root():
    doc = {"type": "object"}

    sources = list(iter_manifest_schemas(doc))

    assert len(sources) == 1
    assert sources[0].fld_path == FieldPath()
    assert sources[0].raw is doc
    assert not is_crd_manifest(doc)


def test_versions_schemas_are_extracted():
    doc = _crd(
        {
            "versions": [
                {"name": "v1alpha1", "schema": {"openAPIV3Schema": {"type": "object"}}},
                {"name": "v1beta1"},
                {"name": "v1", "schema": {"openAPIV3Schema": {"type": "string"}}},
            ]
        }
    )

    sources = list(iter_manifest_schemas(doc))

    assert [s.name for s in sources] == ["v1alpha1", "v1"]
    assert [str(s.fld_path) for s in sources] == [
        "spec.versions[0].schema.openAPIV3Schema",
        "spec.versions[2].schema.openAPIV3Schema",
    ]
    assert sources[1].raw == {"type": "string"}


def test_legacy_validation_schema_comes_first():
    doc = _crd(
        {
            "validation": {"openAPIV3Schema": {"type": "object"}},
            "versions": [{"name": "v1", "schema": {"openAPIV3Schema": {"type": "object"}}}],
        }
    )

    sources = list(iter_manifest_schemas(doc))

    assert [s.name for s in sources] == ["validation", "v1"]
    assert sources[0].fld_path.to_json_pointer() == "/spec/validation/openAPIV3Schema"


def test_crd_without_schema_yields_nothing():
    assert list(iter_manifest_schemas(_crd({"versions": [{"name": "v1"}]}))) == []
    assert list(iter_manifest_schemas(_crd(None))) == []
