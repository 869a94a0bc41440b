# src/record_store/base/data_object.py

from typing import Dict, Mapping, Optional


class DataObject:
    """
    A bag of named string fields that remembers which fields were written.

    Entities own a DataObject and delegate to it. The changed set maps each
    column written since the last clean checkpoint to the value last written
    to it; it is not a diff against the loaded state.
    """

    __slots__ = ("_data", "_changed")

    def __init__(self, data: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = {}
        self._changed: Dict[str, str] = {}
        if data:
            self.hydrate(data)

    def get(self, field: str) -> str:
        return self._data.get(field, "")

    def set(self, field: str, value: str) -> None:
        self._data[field] = value
        self._changed[field] = value

    def data(self) -> Dict[str, str]:
        """Returns a copy of all fields."""
        return dict(self._data)

    def data_changed(self) -> Dict[str, str]:
        """Returns a copy of the fields written since the last clean checkpoint."""
        return dict(self._changed)

    def is_dirty(self) -> bool:
        return bool(self._changed)

    def mark_clean(self) -> None:
        """Forgets the changed fields. Values are kept."""
        self._changed = {}

    def hydrate(self, data: Mapping[str, str]) -> None:
        """Replaces all fields with `data` and leaves the object clean."""
        self._data = dict(data)
        self._changed = {}

    def __repr__(self) -> str:
        return f"DataObject(data={self._data!r}, changed={sorted(self._changed)!r})"
