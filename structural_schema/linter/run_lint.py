#!/usr/bin/env python3
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

"""CLI entry point for linting structural schemas."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from ..config import validator_config
from . import lint_files, LintResult

SCHEMA_FILE_EXTENSIONS = ['.yaml', '.yml', '.json']

logger = logging.getLogger(__name__)


def find_schema_files(paths: List[str]) -> List[Path]:
    """Find all schema files (YAML or JSON) in given paths."""
    schema_files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            print(f"Warning: Path does not exist: {path}", file=sys.stderr)
            continue

        if path.is_file():
            schema_files.append(path)
        elif path.is_dir():
            for ext in SCHEMA_FILE_EXTENSIONS:
                schema_files.extend(path.rglob(f'*{ext}'))
        else:
            print(f"Warning: Path is neither file nor directory: {path}", file=sys.stderr)

    return sorted(set(schema_files))


def _print_human(results: List[LintResult]) -> None:
    for result in results:
        if result.errors or result.warnings:
            print(f"\n{result.file_path}:")
            for error in result.errors:
                line_info = f":{error['line']}" if 'line' in error else ""
                print(f"  ERROR{line_info}: {error['message']}")
            for warning in result.warnings:
                line_info = f":{warning['line']}" if 'line' in warning else ""
                print(f"  WARNING{line_info}: {warning['message']}")


def _print_json(results: List[LintResult]) -> None:
    output = {
        'files': len(results),
        'errors': sum(len(r.errors) for r in results),
        'warnings': sum(len(r.warnings) for r in results),
        'results': [
            {
                'file': str(r.file_path),
                'errors': r.errors,
                'warnings': r.warnings,
            }
            for r in results
        ]
    }
    print(json.dumps(output, indent=2))


def _print_github_actions(results: List[LintResult]) -> None:
    for result in results:
        for error in result.errors:
            print(f"::error file={result.file_path},line={error.get('line', 1)}::{error['message']}")
        for warning in result.warnings:
            print(f"::warning file={result.file_path},line={warning.get('line', 1)}::{warning['message']}")


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the linter CLI."""
    parser = argparse.ArgumentParser(
        description='Check that CustomResourceDefinition schemas are structural',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='File paths or directories to lint (default: current directory)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument(
        '--log-level',
        default=None,
        help='Log level of the tool itself (default: from STRUCTURAL_SCHEMA_LOG_LEVEL)',
    )

    args = parser.parse_args(argv)

    if args.log_level:
        validator_config.log_level = args.log_level
    validator_config.set_logging()

    if not args.paths:
        args.paths = ['.']

    schema_files = find_schema_files(args.paths)

    if not schema_files:
        print("No schema files found.", file=sys.stderr)
        sys.exit(1)

    logger.debug(f"Linting {len(schema_files)} schema file(s)")
    results = lint_files(schema_files)

    if args.format == 'json':
        _print_json(results)
    elif args.format == 'github-actions':
        _print_github_actions(results)
    else:
        _print_human(results)

    total_errors = sum(len(r.errors) for r in results)
    if total_errors > 0:
        sys.exit(1)
    if args.format == 'human':
        print("Lint succeeded with no errors.")
    sys.exit(0)


if __name__ == '__main__':
    main()
