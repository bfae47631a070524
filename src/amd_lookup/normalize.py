"""Dependency normalization.

Turns a (plugin-stripped) dependency string into a path relative to the
prefix that precedes the base URL. Resolution order, first match wins:

1. ``map`` aliasing (the replacement continues through steps 2-5)
2. Leading ``/``: relative to the base URL alone
3. Leading ``./`` or ``../``: relative to the requesting file's directory
4. ``paths`` aliasing
5. Fallback: relative to the base URL

Example:
    >>> from amd_lookup.config import LoaderConfig
    >>> config = LoaderConfig.from_mapping({"baseUrl": "js", "paths": {"jquery": "vendor/jquery.min.js"}})
    >>> normalize("jquery", "js/app.js", config)
    'js/vendor/jquery.min.js'
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .config import LoaderConfig

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".js"
PLUGIN_SEPARATOR = "!"


class ResolveStrategy(Enum):
    """Which rule produced a normalized path."""

    ABSOLUTE = "absolute"  # /foo, relative to baseUrl
    RELATIVE = "relative"  # ./foo, ../bar
    ALIAS = "alias"  # paths entry
    BASE_URL = "base_url"  # plain module id


@dataclass
class Normalized:
    """Outcome of normalizing one dependency.

    Attributes:
        path: Path relative to the prefix preceding the base URL (see
            ``anchored``).
        strategy: Rule that produced the path.
        module_id: Module id after ``map`` substitution.
        mapped_from: Original dependency if ``map`` replaced it.
        extension_inferred: Whether the default extension was appended.
        anchored: Whether ``path`` is relative to the prefix. A relative
            dependency whose file path and prefix differ in absoluteness
            keeps its own form and is not joined onto the prefix.
    """

    path: str
    strategy: ResolveStrategy
    module_id: str
    mapped_from: Optional[str] = None
    extension_inferred: bool = False
    anchored: bool = True


def split_plugin(dependency: str) -> Tuple[Optional[str], str]:
    """Split 'plugin!resource' into (plugin, resource).

    Example:
        >>> split_plugin("hgn!templates/a")
        ('hgn', 'templates/a')
        >>> split_plugin("templates/a")
        (None, 'templates/a')
    """
    plugin, sep, resource = dependency.partition(PLUGIN_SEPARATOR)
    if not sep:
        return None, dependency
    return plugin, resource


def has_extension(path: str) -> bool:
    """Whether the last path segment already carries an extension.

    Any '.' in the final segment counts, so 'jquery.min' and 'jquery-1.9'
    are both treated as having one.
    """
    return "." in path.replace("\\", "/").rsplit("/", 1)[-1]


def with_extension(path: str) -> Tuple[str, bool]:
    """Append the default extension when ``path`` has none."""
    if has_extension(path):
        return path, False
    return path + DEFAULT_EXTENSION, True


def _is_relative(dependency: str) -> bool:
    return dependency.startswith(("./", "../")) or dependency in (".", "..")


def normalize_dependency(dependency: str, filepath: str, config: LoaderConfig) -> Normalized:
    """Normalize ``dependency`` requested by ``filepath``.

    Args:
        dependency: Dependency string with any plugin prefix removed.
        filepath: Path of the file containing the dependency.
        config: Effective loader configuration.

    Returns:
        Normalized result including the strategy used.
    """
    mapped_from = None
    anchored = True
    owner = config.module_id(filepath)
    mapped = config.match_map(dependency, owner)
    if mapped is not None:
        logger.debug(f"map aliased {dependency} to {mapped} (owner {owner})")
        mapped_from, dependency = dependency, mapped

    if dependency.startswith("/"):
        path, inferred = with_extension(config.base_url + dependency.lstrip("/"))
        strategy = ResolveStrategy.ABSOLUTE

    elif _is_relative(dependency):
        path, inferred = with_extension(
            os.path.normpath(os.path.join(os.path.dirname(filepath), dependency))
        )
        prefix = config.prefix_for(filepath)
        if prefix and os.path.isabs(prefix) == os.path.isabs(path):
            path = os.path.relpath(path, prefix)
        elif prefix:
            # Mixed absolute/relative: keep the path's own form, unanchored
            anchored = False
        strategy = ResolveStrategy.RELATIVE

    else:
        aliased = config.match_path(dependency)
        if aliased is not None:
            logger.debug(f"paths aliased {dependency} to {aliased}")
            path, inferred = with_extension(config.base_url + aliased)
            strategy = ResolveStrategy.ALIAS
        else:
            path, inferred = with_extension(config.base_url + dependency)
            strategy = ResolveStrategy.BASE_URL

    logger.debug(f"normalized {dependency} via {strategy.value} to {path}")
    return Normalized(
        path=path,
        strategy=strategy,
        module_id=dependency,
        mapped_from=mapped_from,
        extension_inferred=inferred,
        anchored=anchored,
    )


def normalize(dependency: str, filepath: str, config: LoaderConfig) -> str:
    """Normalize ``dependency`` to a path relative to the base URL's prefix."""
    return normalize_dependency(dependency, filepath, config).path
