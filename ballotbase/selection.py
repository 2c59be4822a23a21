"""
Selection state for the export dialog.
"""

from typing import Iterable, Iterator, List, Optional

from ballotbase.catalog import fields_in_category
from ballotbase.log import get_logger

logger = get_logger(__name__)


class FieldSelection:
    """
    Ordered set of field keys chosen for export, plus the wildcard flag.

    Fields keep the order in which they were toggled on; that order becomes the
    column order of the export.
    """

    def __init__(self, fields: Optional[Iterable[str]] = None, export_all: bool = False):
        self._fields: List[str] = []
        self.export_all = export_all
        for key in fields or []:
            if key not in self._fields:
                self._fields.append(key)

    def toggle(self, key: str) -> bool:
        """
        Add the field if absent, remove it if present.

        Returns:
            True if the field is selected after the call
        """
        if key in self._fields:
            self._fields.remove(key)
            return False
        self._fields.append(key)
        return True

    def toggle_category(self, category: str) -> None:
        """
        Select every field of a category, or clear them all if all are already selected.
        """
        keys = [d.key for d in fields_in_category(category)]
        if all(key in self._fields for key in keys):
            self._fields = [key for key in self._fields if key not in keys]
        else:
            self._fields.extend(key for key in keys if key not in self._fields)
        logger.debug(f"Toggled category {category}: {len(self._fields)} fields selected")

    def select_all(self, enabled: bool = True) -> None:
        self.export_all = enabled

    def reset(self) -> None:
        self._fields = []
        self.export_all = False

    def includes(self, key: str) -> bool:
        return key in self._fields

    def is_empty(self) -> bool:
        """True when nothing would be exported."""
        return not self._fields and not self.export_all

    @property
    def fields(self) -> List[str]:
        return list(self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldSelection(fields={self._fields!r}, export_all={self.export_all!r})"
