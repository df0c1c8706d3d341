from .schema_decoder import decode_structural
from .crd_manifest import SchemaSource, iter_manifest_schemas, is_crd_manifest
from .yaml_parser import YamlParser, yaml_parser

__all__ = [
    "decode_structural",
    "SchemaSource",
    "iter_manifest_schemas",
    "is_crd_manifest",
    "YamlParser",
    "yaml_parser",
]
