"""Resolve aliased AMD dependency paths to real file paths.

Given a dependency string as written in a module (possibly aliased through
the loader configuration's ``paths`` or ``map`` sections, possibly using the
``plugin!resource`` syntax) and the file that requested it, compute the path
of the file the loader would load. The result is not checked for existence.

Example:
    >>> lookup('jquery', 'js/subdir/a.js', config={'baseUrl': 'js/', 'paths': {'jquery': 'vendor/jquery.min.js'}})
    'js/vendor/jquery.min.js'
    >>> lookup('../../b', 'js/subdir/subsubdir/a.js')
    'js/b.js'
"""

import glob
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .config import LoaderConfig
from .config_reader import read_config
from .normalize import DEFAULT_EXTENSION, ResolveStrategy, normalize_dependency, split_plugin

logger = logging.getLogger(__name__)

ConfigInput = Union[str, os.PathLike, Mapping[str, Any], None]
ConfigReader = Callable[[str], Dict[str, Any]]


@dataclass
class ResolveResult:
    """Result of resolving one dependency.

    Attributes:
        path: Resolved file path (may not exist).
        strategy: Which rule produced the path.
        partial: The dependency string as given.
        plugin: Plugin-loader tag that was stripped, if any.
        module_id: Module id after plugin stripping and ``map`` substitution.
        mapped_from: Dependency before ``map`` substitution, if it applied.
        extension_inferred: Whether the default extension was appended.
    """

    path: str
    strategy: ResolveStrategy
    partial: str
    plugin: Optional[str] = None
    module_id: str = ""
    mapped_from: Optional[str] = None
    extension_inferred: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "path": self.path,
            "strategy": self.strategy.value,
            "partial": self.partial,
            "plugin": self.plugin,
            "module_id": self.module_id,
            "mapped_from": self.mapped_from,
            "extension_inferred": self.extension_inferred,
        }


def join_prefix(prefix: str, normalized: str) -> str:
    """Join ``normalized`` onto ``prefix``.

    Unlike ``os.path.join``, a leading separator in ``normalized`` does not
    discard the prefix.
    """
    if not prefix:
        return os.path.normpath(normalized)
    return os.path.normpath(os.path.join(prefix, normalized.lstrip("/\\")))


def _discover_extension(path: str) -> str:
    """Find an existing sibling of ``path`` that differs only in extension.

    Only single-part extensions are considered, so 'a.mustache' can stand in
    for 'a.js' but 'jquery.min.js' never stands in for 'jquery.js'.
    """
    if os.path.isfile(path):
        return path

    stem = path[: -len(DEFAULT_EXTENSION)]
    stem_name = os.path.basename(stem)
    for candidate in sorted(glob.glob(glob.escape(stem) + ".*")):
        extension = os.path.basename(candidate)[len(stem_name) + 1 :]
        if extension and "." not in extension and os.path.isfile(candidate):
            logger.debug(f"discovered {candidate} for {path}")
            return candidate
    return path


def build_config(
    config: ConfigInput = None,
    filename: str = "",
    config_path: Optional[str] = None,
    directory: Optional[str] = None,
    reader: ConfigReader = read_config,
) -> LoaderConfig:
    """Build the effective LoaderConfig for a resolution.

    Args:
        config: Path to a configuration file, a parsed configuration, or None.
        filename: The file containing the dependency.
        config_path: Path of the configuration file when ``config`` is
            already parsed.
        directory: Root to use when no configuration is supplied at all.
        reader: Callable that reads a configuration file into a dict.

    Returns:
        The LoaderConfig for this call.

    Raises:
        Whatever ``reader`` raises when ``config`` is a path.
    """
    if isinstance(config, (str, os.PathLike)):
        config_path = os.fspath(config)
        logger.debug(f"converting given config file {config_path} to an object")
        config = reader(config_path)

    config_dir = None
    if config_path:
        config_dir = os.path.dirname(os.fspath(config_path)) or os.curdir

    default_base = None
    if not config and directory:
        default_base = directory
    elif filename:
        default_base = os.path.dirname(filename)

    return LoaderConfig.from_mapping(config, config_dir=config_dir, default_base=default_base)


def explain(
    partial: str,
    filename: str,
    config: ConfigInput = None,
    config_path: Optional[str] = None,
    directory: Optional[str] = None,
    reader: ConfigReader = read_config,
    discover_extensions: bool = False,
) -> ResolveResult:
    """Resolve a dependency and report how it was resolved.

    Args:
        partial: The dependency string, e.g. 'hgn!templates/a'.
        filename: Path of the file containing the dependency.
        config: Path to a configuration file, a parsed configuration, or None.
        config_path: Path of the configuration file when ``config`` is
            already parsed; its directory is the default base URL.
        directory: Root used in place of a configuration-derived base when
            no configuration is supplied.
        reader: Callable that reads a configuration file into a dict.
        discover_extensions: Look on disk for a sibling file with a
            different extension when '.js' was inferred and does not exist.

    Returns:
        ResolveResult describing the resolved path.
    """
    logger.debug(f"given config: {config!r}")
    logger.debug(f"given partial: {partial}")
    logger.debug(f"given filename: {filename}")

    loader_config = build_config(config, filename, config_path, directory, reader)
    prefix = loader_config.prefix_for(filename)
    logger.debug(f"filename without base {prefix!r}")

    plugin, dependency = split_plugin(partial)
    if plugin is not None:
        logger.debug(f"stripped plugin loader {plugin}, dependency is now {dependency}")

    normalized = normalize_dependency(dependency, filename, loader_config)
    path = join_prefix(prefix if normalized.anchored else "", normalized.path)
    logger.debug(f"joined file base and normalized to {path}")

    if discover_extensions and normalized.extension_inferred:
        path = _discover_extension(path)

    return ResolveResult(
        path=path,
        strategy=normalized.strategy,
        partial=partial,
        plugin=plugin,
        module_id=normalized.module_id,
        mapped_from=normalized.mapped_from,
        extension_inferred=normalized.extension_inferred,
    )


def lookup(
    partial: str,
    filename: str,
    config: ConfigInput = None,
    config_path: Optional[str] = None,
    directory: Optional[str] = None,
    reader: ConfigReader = read_config,
    discover_extensions: bool = False,
) -> str:
    """Resolve a dependency to a file path.

    Takes the same arguments as :func:`explain`.

    Example:
        >>> lookup('foobar', 'js/a.js', config={'baseUrl': 'js/', 'map': {'*': {'foobar': 'b'}}})
        'js/b.js'
    """
    return explain(
        partial,
        filename,
        config=config,
        config_path=config_path,
        directory=directory,
        reader=reader,
        discover_extensions=discover_extensions,
    ).path


def resolve(config: ConfigInput, dependency_path: str, filepath: str) -> str:
    """Resolve ``dependency_path`` requested by ``filepath`` under ``config``.

    ``config`` may be a path to a configuration file, a parsed configuration
    mapping, or None.
    """
    return lookup(dependency_path, filepath, config=config)
