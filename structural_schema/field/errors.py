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

"""Structured field errors returned by the validator."""

from __future__ import annotations

import json
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, List, Optional

from ..exceptions import AggregateFieldError
from .path import FieldPath


class ErrorType(Enum):
    REQUIRED = "Required value"
    INVALID = "Invalid value"
    FORBIDDEN = "Forbidden"

    def __str__(self) -> str:
        return self.value


def _format_value(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True)
    except (TypeError, ValueError):
        return repr(value)


@dataclass(frozen=True)
class FieldError:
    type: ErrorType
    field: str
    bad_value: Any = None
    detail: str = ""
    path: Optional[FieldPath] = dataclass_field(default=None, compare=False, repr=False)

    def error_body(self) -> str:
        if self.type == ErrorType.INVALID:
            body = f"{self.type}: {_format_value(self.bad_value)}"
        else:
            body = str(self.type)
        if self.detail:
            body = f"{body}: {self.detail}"
        return body

    @property
    def json_pointer(self) -> str:
        if self.path is None:
            return ""
        return self.path.to_json_pointer()

    def __str__(self) -> str:
        if not self.field:
            return self.error_body()
        return f"{self.field}: {self.error_body()}"


ErrorList = List[FieldError]


def required(path: FieldPath, detail: str) -> FieldError:
    """A mandatory field is absent."""
    return FieldError(ErrorType.REQUIRED, str(path), None, detail, path)


def invalid(path: FieldPath, value: Any, detail: str) -> FieldError:
    """A field carries a value that is not allowed."""
    return FieldError(ErrorType.INVALID, str(path), value, detail, path)


def forbidden(path: FieldPath, detail: str) -> FieldError:
    """A field must not be set at all."""
    return FieldError(ErrorType.FORBIDDEN, str(path), None, detail, path)


def to_aggregate(errors: ErrorList) -> Optional[AggregateFieldError]:
    if not errors:
        return None
    return AggregateFieldError(errors)
