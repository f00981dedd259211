"""Extension layer — lifecycle hooks via pluggy.

Discovery: entry points (``chronoform.plugins``) plus single-file plugins
from the workspace's local plugin directory.
INVARIANT: Plugin failures are warnings, never errors.
"""

from chronoform.plugins.manager import PluginManager

__all__ = ["PluginManager"]
