"""
Profile store: the answers collected during one interview session.
"""
import logging
from typing import Dict, Optional

logger = logging.getLogger("profile")


class ProfileStore:
    """Mapping from field key to extracted value. Single writer."""

    def __init__(self):
        self._values: Dict[str, str] = {}

    def upsert(self, field: str, value: Optional[str]) -> bool:
        """
        Set ``field`` to ``value``, overwriting any previous answer.

        Blank values are ignored. Returns True if the profile changed.
        """
        if not field or value is None or not value.strip():
            logger.debug(f"Ignoring blank value for field '{field}'")
            return False
        value = value.strip()
        if self._values.get(field) == value:
            return False
        self._values[field] = value
        logger.info(f"Profile updated: {field} = {value}")
        return True

    def get(self, field: str) -> Optional[str]:
        return self._values.get(field)

    def reset_all(self) -> None:
        """Clear every entry."""
        self._values.clear()
        logger.debug("Profile cleared")

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __contains__(self, field: object) -> bool:
        return field in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ProfileStore({self._values!r})"
