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

"""YAML schema document parser with source tracking."""

import yaml
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ...config import validator_config
from ...exceptions import ValidationError
from ...field.path import jp_escape
from ...utils.source_location import SourceMap

logger = logging.getLogger(__name__)


# (data, source_map) for one YAML document of a stream
Document = Tuple[Any, SourceMap]


class YamlParser:
    """YAML parser returning documents together with a line/column source map.

    Files may hold several documents separated by ``---``; every document gets
    its own source map, with pointers relative to that document's root.
    """

    def __init__(self, cache_enabled: Optional[bool] = None):
        """Initialize YAML parser.

        Args:
            cache_enabled: Whether to enable caching. If None, uses global config.
        """
        self.cache_enabled = cache_enabled if cache_enabled is not None else validator_config.cache_enabled
        self._cache: Dict[Path, List[Document]] = {}

    @staticmethod
    def build_source_map(root: Optional[yaml.nodes.Node]) -> SourceMap:
        """Build a mapping from JSON pointers to 1-based line/column.

        Uses PyYAML's node tree (yaml.compose) so locations are tracked without
        changing the data returned by safe_load. The walk keeps an explicit
        stack so deeply nested documents do not hit the recursion limit. A node
        reached again through an alias keeps the location of its first path.
        """
        source_map: SourceMap = {}
        if root is None:
            return source_map

        visited = set()
        stack = [(root, "")]
        while stack:
            node, path = stack.pop()
            if id(node) in visited:
                continue
            visited.add(id(node))

            mark = getattr(node, "start_mark", None)
            if mark is not None:
                # PyYAML marks are 0-based
                source_map[path] = {"line": int(mark.line) + 1, "column": int(mark.column) + 1}

            if isinstance(node, yaml.nodes.MappingNode):
                for key_node, value_node in node.value:
                    key = getattr(key_node, "value", None)
                    if key is None:
                        continue
                    stack.append((value_node, f"{path}/{jp_escape(str(key))}"))
            elif isinstance(node, yaml.nodes.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    stack.append((item_node, f"{path}/{idx}"))

        return source_map

    def load_with_source(self, file_path: Union[str, Path]) -> List[Document]:
        """Load a YAML (or JSON) file and return one (data, source_map) per document.

        Raises:
            ValidationError: If the file cannot be read or parsed
        """
        path = Path(file_path)

        if not path.exists():
            raise ValidationError(f"Schema file not found: {path}")

        if not path.is_file():
            raise ValidationError(f"Path is not a file: {path}")

        if self.cache_enabled and path in self._cache:
            logger.debug(f"Loading schema document from cache: {path}")
            return self._cache[path]

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ValidationError(f"Failed to read schema file {path}: {exc}")

        logger.debug(f"Loading schema document: {path}")
        documents = self.load_string_with_source(content, origin=str(path))

        if self.cache_enabled:
            self._cache[path] = documents

        return documents

    def load_string_with_source(self, content: str, origin: str = "<string>") -> List[Document]:
        """Load every YAML document of a string and return (data, source_map) pairs.

        Empty documents (e.g. a trailing ``---``) are dropped.
        """
        try:
            data = list(yaml.safe_load_all(content))
            nodes = list(yaml.compose_all(content, Loader=yaml.SafeLoader))
        except yaml.YAMLError as exc:
            raise ValidationError(f"Failed to parse YAML {origin}: {exc}")

        return [
            (document, self.build_source_map(node))
            for document, node in zip(data, nodes)
            if document is not None
        ]

    def clear_cache(self):
        """Clear the document cache."""
        self._cache.clear()
        logger.debug("Schema document cache cleared")


# Global parser instance
yaml_parser = YamlParser()
