"""Read AMD loader configuration files.

Two formats are accepted:

- ``.json`` files holding the configuration object directly.
- JavaScript files, parsed with tree-sitter. The configuration object is
  taken from the first of these forms found in the file::

      require.config({...});        requirejs.config({...});
      require({...});               requirejs({...});
      var require = {...};          module.exports = {...};
      ({...});

Only literal values are converted (strings, numbers, booleans, null, arrays
and objects). Anything else, such as a function, becomes ``None``.

Example:
    >>> config = read_config('js/main.js')
    >>> config['paths']['jquery']
    'vendor/jquery.min'
"""

import codecs
import json
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import tree_sitter_javascript as ts_javascript
from tree_sitter import Language, Parser

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

CONFIG_CALLS = {"require.config", "requirejs.config", "require", "requirejs"}
CONFIG_TARGETS = {"require", "requirejs", "module.exports", "window.require"}

# A double-quoted string (kept) or a line or block comment (dropped)
JSON_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)


class ConfigParseError(ValueError):
    """Raised when a configuration file has no readable configuration object."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class JavaScriptConfigParser:
    """Extracts a loader configuration object from JavaScript source.

    Attributes:
        file_path: Path reported in errors.
        source: Source code as bytes.
    """

    def __init__(self, file_path: str, source: str):
        self.file_path = file_path
        self.source = source.encode("utf-8")

    def parse(self) -> Dict[str, Any]:
        """Parse the source and return the configuration as a dict.

        Raises:
            ConfigParseError: On syntax errors or when no configuration
                object is present.
        """
        parser = Parser(Language(ts_javascript.language()))
        tree = parser.parse(self.source)

        if tree.root_node.has_error:
            raise ConfigParseError(self.file_path, "invalid JavaScript")

        node = self._find_config(tree.root_node)
        if node is None:
            raise ConfigParseError(self.file_path, "no configuration object found")

        try:
            return self._to_python(node)
        except RecursionError:
            raise ConfigParseError(self.file_path, "configuration nested too deeply") from None

    def _get_node_text(self, node: "Node") -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def _named(self, node: "Node"):
        return [child for child in node.named_children if child.type != "comment"]

    def _unwrap(self, node: Optional["Node"]) -> Optional["Node"]:
        while node is not None and node.type == "parenthesized_expression":
            children = self._named(node)
            node = children[0] if children else None
        return node

    def _find_config(self, root: "Node") -> Optional["Node"]:
        """Depth-first search for the configuration object literal.

        Uses an explicit stack so deeply nested sources do not exhaust the
        interpreter's recursion limit.
        """
        stack = [root]
        while stack:
            node = stack.pop()
            candidate = self._config_candidate(node)
            if candidate is not None:
                return candidate
            stack.extend(reversed(node.children))
        return None

    def _config_candidate(self, node: "Node") -> Optional["Node"]:
        """Return the object literal ``node`` passes as configuration, if any."""
        candidate = None
        node_type = node.type

        if node_type == "call_expression":
            function = node.child_by_field_name("function")
            arguments = node.child_by_field_name("arguments")
            if function is not None and arguments is not None:
                if self._get_node_text(function) in CONFIG_CALLS:
                    args = self._named(arguments)
                    if args:
                        candidate = self._unwrap(args[0])
        elif node_type == "variable_declarator":
            name = node.child_by_field_name("name")
            if name is not None and self._get_node_text(name) in CONFIG_TARGETS:
                candidate = self._unwrap(node.child_by_field_name("value"))
        elif node_type == "assignment_expression":
            left = node.child_by_field_name("left")
            if left is not None and self._get_node_text(left) in CONFIG_TARGETS:
                candidate = self._unwrap(node.child_by_field_name("right"))
        elif node_type == "expression_statement" and node.parent is not None:
            # A bare ({...}) at the top level of the file
            if node.parent.type == "program":
                children = self._named(node)
                if children and children[0].type == "parenthesized_expression":
                    candidate = self._unwrap(children[0])

        if candidate is not None and candidate.type == "object":
            return candidate
        return None

    def _to_python(self, node: Optional["Node"]) -> Any:
        """Convert a literal expression node to the equivalent Python value."""
        node = self._unwrap(node)
        if node is None:
            return None

        node_type = node.type
        if node_type == "object":
            return self._object(node)
        if node_type == "array":
            return [self._to_python(child) for child in self._named(node)]
        if node_type == "string":
            return self._string(node)
        if node_type == "template_string":
            if any(child.type == "template_substitution" for child in node.named_children):
                return None
            return self._get_node_text(node)[1:-1]
        if node_type == "number":
            return self._number(self._get_node_text(node))
        if node_type == "unary_expression":
            text = self._get_node_text(node).replace(" ", "")
            if text[:1] in "+-" and text[1:]:
                value = self._number(text[1:])
                if value is not None:
                    return -value if text[0] == "-" else value
            return None
        if node_type == "true":
            return True
        if node_type == "false":
            return False
        return None

    def _object(self, node: "Node") -> Dict[str, Any]:
        result = {}
        for child in self._named(node):
            if child.type == "pair":
                key = self._key(child.child_by_field_name("key"))
                if key is not None:
                    result[key] = self._to_python(child.child_by_field_name("value"))
            elif child.type == "shorthand_property_identifier":
                result[self._get_node_text(child)] = None
        return result

    def _key(self, node: Optional["Node"]) -> Optional[str]:
        if node is None:
            return None
        if node.type == "string":
            return self._string(node)
        if node.type == "computed_property_name":
            return None
        return self._get_node_text(node)

    def _string(self, node: "Node") -> str:
        parts = []
        for child in node.named_children:
            text = self._get_node_text(child)
            if child.type == "escape_sequence":
                parts.append(codecs.decode(text, "unicode_escape"))
            else:
                parts.append(text)
        return "".join(parts)

    @staticmethod
    def _number(text: str) -> Optional[Union[int, float]]:
        try:
            return int(text, 0)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None


def strip_json_comments(content: str) -> str:
    """Remove ``//`` and ``/* */`` comments from JSON text.

    Comment markers inside string values, such as '//cdn.example.com', are
    left alone.

    Example:
        >>> strip_json_comments('{"a": "//x"} // note')
        '{"a": "//x"} '
    """
    return JSON_COMMENT_RE.sub(lambda match: match.group(1) or "", content)


def read_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and parse an AMD loader configuration file.

    Args:
        path: Path to a ``.json`` or JavaScript configuration file.

    Returns:
        The configuration as a dict.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If a JSON file is malformed.
        ConfigParseError: If a JavaScript file is malformed or holds no
            configuration object.
    """
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    logger.debug(f"read config file {path}")

    if path.suffix.lower() == ".json":
        config = json.loads(strip_json_comments(content))
    else:
        config = JavaScriptConfigParser(str(path), content).parse()

    if not isinstance(config, dict):
        raise ConfigParseError(str(path), "configuration is not an object")
    return config
