"""tanlua - tantivy schema, indexing and document bindings for embedded Lua.

Expose tantivy to Lua scripts running inside a Python host through lupa.
"""

__version__ = "0.1.0"
__author__ = "tanlua Contributors"

from tanlua.config import Settings, get_settings
from tanlua.namespace import create_runtime, install

__all__ = ["Settings", "get_settings", "create_runtime", "install", "__version__"]
