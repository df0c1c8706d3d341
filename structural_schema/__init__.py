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

"""Structural schema validation for custom resource schemas."""

__version__ = "0.1.0"

from .field import ErrorList, ErrorType, FieldError, FieldPath
from .models.structural import (
    Extensions,
    Generic,
    NestedValueValidation,
    StructOrBool,
    Structural,
    ValueValidation,
)
from .models.parsing.schema_decoder import decode_structural
from .validation import Level, validate_structural

__all__ = [
    "ErrorList",
    "ErrorType",
    "FieldError",
    "FieldPath",
    "Extensions",
    "Generic",
    "NestedValueValidation",
    "StructOrBool",
    "Structural",
    "ValueValidation",
    "decode_structural",
    "Level",
    "validate_structural",
]
