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

"""Custom exceptions for the structural schema validator."""

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class SchemaIssue:
    """A problem found while decoding a raw schema document."""
    message: str
    yaml_path: Optional[str] = None


class StructuralSchemaError(Exception):
    """Base exception for structural-schema related errors."""
    pass


class ConfigurationError(StructuralSchemaError):
    """Exception raised for invalid validator configuration."""
    pass


class ValidationError(StructuralSchemaError):
    """Exception raised when a schema file cannot be loaded or parsed."""
    pass


class SchemaDecodeError(ValidationError):
    """Exception raised when a raw document cannot be decoded into a schema tree."""

    def __init__(self, message: str, issues: Optional[Sequence[SchemaIssue]] = None):
        self.issues: List[SchemaIssue] = list(issues or [])
        if self.issues:
            details = "\n".join(
                f"  - {issue.yaml_path or '/'}: {issue.message}" for issue in self.issues
            )
            message = f"{message}:\n{details}"
        super().__init__(message)


class AggregateFieldError(StructuralSchemaError):
    """Exception wrapping a list of field errors, for callers that prefer raising."""

    def __init__(self, errors):
        self.errors = list(errors)
        if len(self.errors) == 1:
            message = str(self.errors[0])
        else:
            message = "[" + ", ".join(str(e) for e in self.errors) + "]"
        super().__init__(message)
