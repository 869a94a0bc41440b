# src/record_store/base/record.py

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .clock import Clock, DEFAULT_CLOCK
from .columns import (
    COLUMN_CREATED_AT,
    COLUMN_ID,
    COLUMN_MEMO,
    COLUMN_METAS,
    COLUMN_PAYLOAD,
    COLUMN_RECORD_TYPE,
    COLUMN_SOFT_DELETED_AT,
    COLUMN_UPDATED_AT,
    MAX_DATETIME,
)
from .data_object import DataObject
from .exceptions import DecodeError, EncodeError
from .utils import (
    from_json_object,
    new_record_id,
    now_datetime_string,
    parse_datetime,
    to_json,
)


class Record:
    """
    A single row of the records table.

    Field values are kept as strings exactly as they are stored. Writes go
    through an owned DataObject, so `data_changed()` always reflects the
    columns touched since the record was loaded or last persisted.

    JSON columns (`payload`, `metas`) are decoded on every access; a corrupt
    stored value raises DecodeError instead of yielding an empty result.
    """

    def __init__(self, data: Optional[Mapping[str, str]] = None):
        self._object = DataObject(data)

    @classmethod
    def new(cls, record_type: str, clock: Optional[Clock] = None) -> "Record":
        """Creates an unsaved record with a fresh ID and default values."""
        now = now_datetime_string(clock)
        record = cls()
        record.id = new_record_id()
        record.type = record_type
        record.memo = ""
        record.set(COLUMN_METAS, "")
        record.payload = ""
        record.created_at = now
        record.updated_at = now
        record.soft_deleted_at = MAX_DATETIME
        return record

    @classmethod
    def from_existing_data(cls, data: Mapping[str, str]) -> "Record":
        """Creates a clean record from a row loaded from storage."""
        return cls(data)

    # --- Dirty tracking (delegated) ---

    def get(self, field: str) -> str:
        return self._object.get(field)

    def set(self, field: str, value: str) -> None:
        self._object.set(field, value)

    def data(self) -> Dict[str, str]:
        return self._object.data()

    def data_changed(self) -> Dict[str, str]:
        return self._object.data_changed()

    def is_dirty(self) -> bool:
        return self._object.is_dirty()

    def mark_clean(self) -> None:
        self._object.mark_clean()

    def hydrate(self, data: Mapping[str, str]) -> None:
        self._object.hydrate(data)

    # --- Plain columns ---

    @property
    def id(self) -> str:
        return self.get(COLUMN_ID)

    @id.setter
    def id(self, value: str) -> None:
        self.set(COLUMN_ID, value)

    @property
    def type(self) -> str:
        return self.get(COLUMN_RECORD_TYPE)

    @type.setter
    def type(self, value: str) -> None:
        self.set(COLUMN_RECORD_TYPE, value)

    @property
    def memo(self) -> str:
        return self.get(COLUMN_MEMO)

    @memo.setter
    def memo(self, value: str) -> None:
        self.set(COLUMN_MEMO, value)

    @property
    def payload(self) -> str:
        return self.get(COLUMN_PAYLOAD)

    @payload.setter
    def payload(self, value: str) -> None:
        self.set(COLUMN_PAYLOAD, value)

    @property
    def created_at(self) -> str:
        return self.get(COLUMN_CREATED_AT)

    @created_at.setter
    def created_at(self, value: str) -> None:
        self.set(COLUMN_CREATED_AT, value)

    @property
    def updated_at(self) -> str:
        return self.get(COLUMN_UPDATED_AT)

    @updated_at.setter
    def updated_at(self, value: str) -> None:
        self.set(COLUMN_UPDATED_AT, value)

    @property
    def soft_deleted_at(self) -> str:
        return self.get(COLUMN_SOFT_DELETED_AT)

    @soft_deleted_at.setter
    def soft_deleted_at(self, value: str) -> None:
        self.set(COLUMN_SOFT_DELETED_AT, value)

    def created_at_datetime(self) -> datetime:
        return parse_datetime(self.created_at)

    def updated_at_datetime(self) -> datetime:
        return parse_datetime(self.updated_at)

    def soft_deleted_at_datetime(self) -> datetime:
        return parse_datetime(self.soft_deleted_at)

    def is_soft_deleted(self, clock: Optional[Clock] = None) -> bool:
        """
        True if soft_deleted_at is not after the current instant.

        Raises:
            ValueError: If soft_deleted_at is empty or not a timestamp.
        """
        return self.soft_deleted_at_datetime() <= (clock or DEFAULT_CLOCK).now()

    # --- Metas ---

    def metas(self) -> Dict[str, str]:
        """
        Decodes the metas column.

        Raises:
            DecodeError: If the stored metas are not a JSON object of strings.
        """
        decoded = from_json_object(self.get(COLUMN_METAS), COLUMN_METAS)
        if decoded is None:
            return {}
        for name, value in decoded.items():
            if not isinstance(value, str):
                raise DecodeError(
                    COLUMN_METAS,
                    f"Meta '{name}' must be a string, got {type(value).__name__}.",
                )
        return decoded

    def meta(self, name: str) -> str:
        return self.metas().get(name, "")

    def set_metas(self, metas: Mapping[str, str]) -> None:
        """Replaces all metas."""
        for name, value in metas.items():
            if not isinstance(name, str) or not isinstance(value, str):
                raise EncodeError(
                    COLUMN_METAS,
                    f"Metas must map strings to strings, got {name!r}: {value!r}.",
                )
        self.set(COLUMN_METAS, to_json(dict(metas), COLUMN_METAS))

    def set_meta(self, name: str, value: str) -> None:
        self.upsert_metas({name: value})

    def upsert_metas(self, metas: Mapping[str, str]) -> None:
        """Adds or overwrites the given metas, keeping the others."""
        current = self.metas()
        current.update(metas)
        self.set_metas(current)

    # --- Payload ---

    def payload_map(self) -> Dict[str, Any]:
        """
        Decodes the payload column. An empty payload decodes to an empty dict.

        Raises:
            DecodeError: If the stored payload is not a JSON object.
        """
        decoded = from_json_object(self.payload, COLUMN_PAYLOAD)
        return {} if decoded is None else decoded

    def set_payload_map(self, payload: Mapping[str, Any]) -> None:
        self.payload = to_json(dict(payload), COLUMN_PAYLOAD)

    def get_payload_key(self, key: str) -> Any:
        """Returns the payload value under `key`, or None when absent."""
        return self.payload_map().get(key)

    def set_payload_key(self, key: str, value: Any) -> None:
        """
        Sets one payload key, keeping the others.

        The current payload is decoded first; if that fails the DecodeError
        propagates and the payload is left untouched.
        """
        payload = self.payload_map()
        payload[key] = value
        self.set_payload_map(payload)

    def __repr__(self) -> str:
        return f"Record(id={self.id!r}, type={self.type!r}, dirty={self.is_dirty()})"
