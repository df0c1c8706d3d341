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

"""Linter package for structural schema validation of schema files."""

import logging
from pathlib import Path
from typing import List

from .report import LintResult
from .structural_linter import StructuralLinter

__all__ = ['lint_files', 'LintResult', 'StructuralLinter']

logger = logging.getLogger(__name__)


def lint_files(file_paths: List[Path]) -> List[LintResult]:
    """Lint a list of schema files.

    Args:
        file_paths: List of file paths to lint

    Returns:
        List of LintResult objects, one per file
    """
    results = []

    structural_linter = StructuralLinter()

    for file_path in file_paths:
        result = LintResult(file_path)

        try:
            structural_linter.lint(file_path, result)
        except Exception as e:
            logger.debug("Unexpected error while linting %s", file_path, exc_info=True)
            result.add_error(f"Unexpected error during linting: {str(e)}")

        results.append(result)

    return results
