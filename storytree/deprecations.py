"""
Deprecation notices for legacy kind separators.

Each notice is logged at most once per process, however many stories or
rebuilds trigger it.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class OneShotWarning:
    """A warning that logs on its first call and stays silent afterwards."""

    def __init__(self, message: str):
        self.message = message
        self._fired = False
        self._lock = threading.Lock()

    def __call__(self) -> bool:
        """Log the message if it has not been logged yet.

        Returns:
            True if this call emitted the warning
        """
        with self._lock:
            if self._fired:
                return False
            self._fired = True
        logger.warning(self.message)
        return True

    @property
    def fired(self) -> bool:
        return self._fired

    def reset(self) -> None:
        """Re-arm the warning (used by tests)."""
        with self._lock:
            self._fired = False


warn_using_hierarchy_separators_and_show_roots = OneShotWarning(
    "You cannot use both the hierarchySeparator/hierarchyRootSeparator and showRoots options. "
    "The separators win and showRoots is ignored."
)

warn_removing_hierarchy_separators = OneShotWarning(
    "hierarchySeparator and hierarchyRootSeparator are deprecated and will be removed. "
    "Use '/' in story kinds, and the showRoots option to promote the first segment to a root."
)

warn_changing_default_hierarchy_separators = OneShotWarning(
    "The default hierarchy separators are changing: "
    "'|' and '.' will no longer create a hierarchy, only '/' will."
)

ALL_WARNINGS = (
    warn_using_hierarchy_separators_and_show_roots,
    warn_removing_hierarchy_separators,
    warn_changing_default_hierarchy_separators,
)


def reset_all() -> None:
    """Re-arm every deprecation notice."""
    for warning in ALL_WARNINGS:
        warning.reset()
