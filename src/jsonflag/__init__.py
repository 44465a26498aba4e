# Copyright 2026 Firefly Software Solutions Inc.
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
"""jsonflag: command-line flags for every field of a dataclass or pydantic model.

Each exported field, nested records included, becomes a flag value that
parses text into the field in place.  Primitives use their usual literal
syntax, byte buffers use base64, and lists, maps and records use JSON.
"""

from jsonflag.containers import ValueKind
from jsonflag.discovery import (
    FilterFunc,
    FilterResult,
    exclude_paths,
    filter_value,
    max_depth,
    new,
    recursive,
    skip_records,
)
from jsonflag.exceptions import (
    DecodeException,
    FormatException,
    JsonFlagException,
    OverflowException,
)
from jsonflag.kinds import (
    Complex64,
    Complex128,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Ref,
    StructField,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from jsonflag.naming import dash_case, json_camel_case, json_name, name, snake_case, usage
from jsonflag.value import Value

__all__ = [
    "Complex128",
    "Complex64",
    "DecodeException",
    "FilterFunc",
    "FilterResult",
    "Float32",
    "Float64",
    "FormatException",
    "Int16",
    "Int32",
    "Int64",
    "Int8",
    "JsonFlagException",
    "OverflowException",
    "Ref",
    "StructField",
    "Uint",
    "Uint16",
    "Uint32",
    "Uint64",
    "Uint8",
    "Value",
    "ValueKind",
    "dash_case",
    "exclude_paths",
    "filter_value",
    "json_camel_case",
    "json_name",
    "max_depth",
    "name",
    "new",
    "recursive",
    "skip_records",
    "snake_case",
    "usage",
]
