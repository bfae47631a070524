"""amd_lookup - Resolve aliased AMD dependency paths to real files.

A RequireJS-style loader lets modules refer to each other through aliases:
the ``paths`` and ``map`` sections of its configuration, a ``baseUrl`` that
module ids are relative to, and ``plugin!resource`` loader syntax. This
package computes which file such a reference points at.

Components:
    - lookup / explain / resolve: Resolve a dependency to a file path
    - LoaderConfig: Configuration with defaulted fields
    - read_config: Read JSON or JavaScript configuration files

Example:
    >>> from amd_lookup import lookup
    >>> lookup('foobar', 'js/a.js', config={'baseUrl': 'js/', 'map': {'*': {'foobar': 'b'}}})
    'js/b.js'
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .config import LoaderConfig
from .config_reader import ConfigParseError, JavaScriptConfigParser, read_config, strip_json_comments
from .lookup import ResolveResult, build_config, explain, join_prefix, lookup, resolve
from .normalize import ResolveStrategy, has_extension, normalize, split_plugin

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Resolution
    "lookup",
    "explain",
    "resolve",
    "ResolveResult",
    "ResolveStrategy",
    # Configuration
    "LoaderConfig",
    "build_config",
    "read_config",
    "ConfigParseError",
    "JavaScriptConfigParser",
    "strip_json_comments",
    # Helpers
    "normalize",
    "split_plugin",
    "has_extension",
    "join_prefix",
]
