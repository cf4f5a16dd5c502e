"""
Session presence module.

Remembers which identities already produced an attendance record during
the current run.
"""

from typing import List
from ..logging_config import get_logger

logger = get_logger(__name__)


class SessionTracker:
    """
    Names marked present in the current session.

    Lives in memory only; a new run starts empty.
    """

    def __init__(self):
        self._marked: List[str] = []

    def already_marked(self, name: str) -> bool:
        """
        Check whether a name was already marked this session.

        Args:
            name: Identity name

        Returns:
            True if marked
        """
        return name in self._marked

    def mark(self, name: str) -> None:
        """
        Mark a name as present. Marking twice has no further effect.

        Args:
            name: Identity name
        """
        if name in self._marked:
            return
        self._marked.append(name)
        logger.debug(f'Marked {name} for this session')

    @property
    def marked(self) -> List[str]:
        """Marked names in the order they were first seen."""
        return list(self._marked)

    def __len__(self) -> int:
        return len(self._marked)
