# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structural schema linter for CRD manifests and bare schema files.

Every schema found in a file, across all of its YAML documents, is decoded
and checked for structurality.
Errors are reported with YAML locations when available.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from ..exceptions import SchemaDecodeError, ValidationError
from ..models.parsing.crd_manifest import SchemaSource, is_crd_manifest, iter_manifest_schemas
from ..models.parsing.schema_decoder import decode_structural
from ..models.parsing.yaml_parser import YamlParser, yaml_parser
from ..utils.source_location import SourceLocation, SourceMap, format_source, lookup_source
from ..validation import validate_structural
from .report import LintResult

logger = logging.getLogger(__name__)


class StructuralLinter:
    """Linter for structural schema rules."""

    def __init__(self, parser: Optional[YamlParser] = None):
        self.parser = parser or yaml_parser

    def lint(self, file_path: Path, result: LintResult):
        """Lint every schema contained in the file.

        Args:
            file_path: Path to the file to lint
            result: LintResult to add errors/warnings to
        """
        try:
            documents = self.parser.load_with_source(file_path)
        except ValidationError as e:
            result.add_error(f"Failed to load schema file: {str(e)}")
            return

        if not documents:
            result.add_warning("File contains no YAML documents")
            return

        for document, source_map in documents:
            self._lint_document(file_path, document, source_map, result)

    def _lint_document(self, file_path: Path, document: Any, source_map: SourceMap, result: LintResult):
        if not isinstance(document, dict):
            loc = lookup_source(source_map, "")
            result.add_error(
                f"Document must be a mapping, got {type(document).__name__}",
                line=loc.line,
                column=loc.column,
            )
            return

        if not is_crd_manifest(document) and "apiVersion" in document and "kind" in document:
            loc = lookup_source(source_map, "")
            result.add_warning(
                f"Skipping {document['kind']} manifest: not a CustomResourceDefinition",
                line=loc.line,
                column=loc.column,
            )
            return

        sources = list(iter_manifest_schemas(document))
        if not sources:
            loc = lookup_source(source_map, "/spec")
            result.add_warning(
                "CustomResourceDefinition does not declare any openAPIV3Schema",
                line=loc.line,
                column=loc.column,
                yaml_path=loc.yaml_path,
            )
            return

        for source in sources:
            self._lint_schema(file_path, source, source_map, result)

    def _lint_schema(self, file_path: Path, source: SchemaSource, source_map: SourceMap, result: LintResult):
        base_pointer = source.fld_path.to_json_pointer()
        logger.debug(f"Checking schema '{source.name}' in {file_path}")

        try:
            structural = decode_structural(source.raw, base_pointer=base_pointer)
        except SchemaDecodeError as e:
            for issue in e.issues:
                self._report(file_path, source_map, result, issue.message, issue.yaml_path)
            return

        for err in validate_structural(structural, source.fld_path):
            self._report(file_path, source_map, result, str(err), err.json_pointer, field=err.field)

    @staticmethod
    def _report(
        file_path: Path,
        source_map: SourceMap,
        result: LintResult,
        message: str,
        pointer: Optional[str],
        field: Optional[str] = None,
    ):
        loc = lookup_source(source_map, pointer)
        src = SourceLocation(file_path=file_path, yaml_path=loc.yaml_path, line=loc.line, column=loc.column)
        result.add_error(
            f"{message}{format_source(src)}",
            line=loc.line,
            column=loc.column,
            yaml_path=loc.yaml_path,
            field=field,
        )
