"""Loader configuration with defaulted fields.

A raw AMD configuration is a loosely-typed mapping: ``baseUrl``, ``paths``
and ``map`` are all optional and any of them may be malformed. ``LoaderConfig``
is built once per resolution so the resolution code never has to check for
missing sections.

Example:
    >>> config = LoaderConfig.from_mapping({"baseUrl": "js", "paths": {"jquery": "vendor/jquery"}})
    >>> config.base_url
    'js/'
    >>> config.match_path("jquery/ui")
    'vendor/jquery/ui'
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

SEPARATORS = ("/", "\\")
WILDCARD = "*"


def _segment_prefixes(module_id: str):
    """Yield (prefix, rest) pairs for a module id, longest prefix first."""
    parts = module_id.split("/")
    for i in range(len(parts), 0, -1):
        yield "/".join(parts[:i]), "/".join(parts[i:])


def _replace_prefix(module_id: str, table: Mapping[str, str]) -> Optional[str]:
    """Replace the longest segment prefix of ``module_id`` found in ``table``."""
    for prefix, rest in _segment_prefixes(module_id):
        if prefix in table:
            target = table[prefix]
            if not rest:
                return target
            return target.rstrip("/") + "/" + rest
    return None


def _clean_paths(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}

    paths = {}
    for alias, target in raw.items():
        # Only the first fallback location is honored
        if isinstance(target, (list, tuple)):
            target = target[0] if target else None
        if isinstance(target, str):
            paths[str(alias)] = target
    return paths


def _clean_map(raw: Any) -> Dict[str, Dict[str, str]]:
    if not isinstance(raw, Mapping):
        return {}

    cleaned = {}
    for owner, table in raw.items():
        if not isinstance(table, Mapping):
            continue
        cleaned[str(owner)] = {
            str(dep): target for dep, target in table.items() if isinstance(target, str)
        }
    return cleaned


@dataclass
class LoaderConfig:
    """Effective loader configuration for a single resolution.

    Attributes:
        base_url: Root all module ids resolve against, always ending in '/'.
        paths: Alias -> target fragment.
        map: Owner module id (or '*') -> {dependency: replacement}.
        config_dir: Directory of the configuration file, if one is known.
        base_url_declared: Whether ``base_url`` came from the configuration
            itself rather than a default.
    """

    base_url: str = "./"
    paths: Dict[str, str] = field(default_factory=dict)
    map: Dict[str, Dict[str, str]] = field(default_factory=dict)
    config_dir: Optional[str] = None
    base_url_declared: bool = False

    def __post_init__(self):
        # Exactly one trailing separator; a bare "/" stays "/"
        separator = self.base_url[-1] if self.base_url.endswith(SEPARATORS) else "/"
        self.base_url = self.base_url.rstrip("/\\") + separator

    @classmethod
    def from_mapping(
        cls,
        raw: Optional[Mapping[str, Any]],
        config_dir: Optional[str] = None,
        default_base: Optional[str] = None,
    ) -> "LoaderConfig":
        """Build a LoaderConfig from a raw configuration mapping.

        The mapping is not modified.

        Args:
            raw: Parsed configuration, or None when there is none.
            config_dir: Directory containing the configuration file.
            default_base: Base to use when neither the configuration nor
                ``config_dir`` provides one.

        Returns:
            A LoaderConfig with every field defaulted.
        """
        raw = raw if isinstance(raw, Mapping) else {}

        base_url = raw.get("baseUrl")
        declared = isinstance(base_url, str) and bool(base_url)
        if not declared:
            base_url = config_dir or default_base or "./"
            logger.debug(f"no baseUrl found in config. Defaulting to {base_url}")

        return cls(
            base_url=base_url,
            paths=_clean_paths(raw.get("paths")),
            map=_clean_map(raw.get("map")),
            config_dir=config_dir,
            base_url_declared=declared,
        )

    def _find_base(self, filepath: str) -> int:
        """Index of the first occurrence of base_url in filepath, or -1.

        The occurrence must begin a path segment, so a base of 'js/' is not
        found inside 'projs/'.
        """
        start = self.base_url.startswith(SEPARATORS)
        idx = filepath.find(self.base_url)
        while idx != -1:
            if start or idx == 0 or filepath[idx - 1] in SEPARATORS:
                return idx
            idx = filepath.find(self.base_url, idx + 1)
        return -1

    def prefix_for(self, filepath: str) -> str:
        """Portion of ``filepath`` that precedes the base URL."""
        idx = self._find_base(filepath)
        if idx != -1:
            return filepath[:idx]
        if self.base_url_declared and self.config_dir and not os.path.isabs(self.base_url):
            return self.config_dir
        return ""

    def module_id(self, filepath: str) -> Optional[str]:
        """Module id of the file at ``filepath``, or None outside the base URL."""
        idx = self._find_base(filepath)
        if idx == -1:
            return None

        module_id = filepath[idx + len(self.base_url) :].replace("\\", "/")
        root, ext = os.path.splitext(module_id)
        return root if ext else module_id

    def match_map(self, dependency: str, owner: Optional[str]) -> Optional[str]:
        """Apply ``map`` to a dependency requested by module ``owner``.

        Entries for the owner (longest segment prefix first) are consulted
        before the '*' entry.

        Returns:
            The replacement dependency, or None when nothing matches.
        """
        if not self.map:
            return None

        if owner:
            for prefix, _ in _segment_prefixes(owner):
                table = self.map.get(prefix)
                if table:
                    replaced = _replace_prefix(dependency, table)
                    if replaced is not None:
                        return replaced

        star = self.map.get(WILDCARD)
        if star:
            return _replace_prefix(dependency, star)
        return None

    def match_path(self, dependency: str) -> Optional[str]:
        """Apply ``paths`` to a dependency, or return None when no alias matches."""
        if not self.paths:
            return None
        return _replace_prefix(dependency, self.paths)
