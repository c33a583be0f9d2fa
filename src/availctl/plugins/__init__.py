"""Extension layer — event publication via pluggy.

Discovery: entry_points (pip-installed) in the ``availctl.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from availctl.plugins.event_bus import EventBus
from availctl.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager"]
