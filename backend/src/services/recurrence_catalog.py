"""
Recurrence catalog for well guides.

Maps a well guide id directly to its recurrence period in whole months.
The catalog is read-only and is passed into the services that need it, so
tests can substitute any recurrence values they like.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from core.constants import WELL_GUIDE_RECURRENCE_MONTHS
from services.well_guide_errors import UnknownGuide


class RecurrenceCatalog:
    """Read-only lookup of ``guide_id -> recurrence months``."""

    def __init__(self, recurrence_months: Mapping[int, int]):
        for guide_id, months in recurrence_months.items():
            if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
                raise ValueError(
                    f"Recurrence period for guide {guide_id} must be a positive integer, got {months!r}"
                )
        self._months = MappingProxyType(dict(recurrence_months))

    def recurrence_months(self, guide_id: int) -> int:
        """
        Get the recurrence period for a guide.

        Raises:
            UnknownGuide: If the guide id is not registered
        """
        try:
            return self._months[guide_id]
        except (KeyError, TypeError):
            raise UnknownGuide(guide_id)

    def __contains__(self, guide_id: object) -> bool:
        try:
            return guide_id in self._months
        except TypeError:
            return False

    def guide_ids(self) -> Iterable[int]:
        return sorted(self._months)


_default_catalog: Optional[RecurrenceCatalog] = None


def get_recurrence_catalog() -> RecurrenceCatalog:
    """Get the catalog built from WELL_GUIDE_RECURRENCE_MONTHS."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = RecurrenceCatalog(WELL_GUIDE_RECURRENCE_MONTHS)
    return _default_catalog
