import logging
from typing import Any, Dict, Iterable, List, Optional

from requests.exceptions import HTTPError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def as_key(value: Any) -> str:
    """Normalize a cell value to the string used for identifier comparisons.

    Airtable hands numeric ids back as floats when the field is a number
    field, so 9677986496805.0 and "9677986496805" must compare equal.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict):
        return as_key(value.get("name", value.get("id")))
    if isinstance(value, (list, tuple)):
        return ",".join(as_key(v) for v in value)
    return str(value)


def normalize_email(value: Any) -> str:
    return as_key(value).strip().lower()


def is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == 0


def link(record_id: str) -> List[str]:
    return [record_id]


def linked_ids(value: Any) -> List[str]:
    """Record ids from a linked-record cell (REST ids or {"id": ...} dicts)."""
    if not isinstance(value, list):
        return []
    ids = []
    for v in value:
        if isinstance(v, dict):
            if v.get("id"):
                ids.append(v["id"])
        elif isinstance(v, str) and v:
            ids.append(v)
    return ids


def select_name(value: Any) -> Optional[str]:
    """Option name of a single select cell."""
    if isinstance(value, dict):
        return value.get("name")
    return value


def get_record(table, record_id: str) -> Optional[Record]:
    """Fetch one record by id, None if Airtable answers 404."""
    try:
        return table.get(record_id)
    except HTTPError as e:
        if e.response is not None and e.response.status_code == 404:
            return None
        raise


def cell(record: Record, field: str, default=None):
    return record.get("fields", {}).get(field, default)


def filter_by_field(table, field: str, value: Any, extra_fields: Iterable[str] = ()) -> List[Record]:
    """Scan the whole table and keep every record whose field matches value."""
    wanted = as_key(value)
    records = table.all(fields=[field, *extra_fields])
    return [
        rec for rec in records
        if not is_empty(cell(rec, field)) and as_key(cell(rec, field)) == wanted
    ]


def find_by_field(table, field: str, value: Any, extra_fields: Iterable[str] = ()) -> Optional[Record]:
    """First record whose field matches value, None when nothing matches."""
    if is_empty(value):
        return None
    matches = filter_by_field(table, field, value, extra_fields)
    return matches[0] if matches else None


def count_linked(table, link_field: str, record_id: str, key_field: str, key_value: Any) -> int:
    """Rows linked to record_id whose key_field equals key_value.

    An empty key_value counts the linked rows whose key_field is empty too.
    """
    wanted = "" if is_empty(key_value) else as_key(key_value)
    records = table.all(fields=[link_field, key_field])
    count = 0
    for rec in records:
        if record_id not in linked_ids(cell(rec, link_field)):
            continue
        item_key = cell(rec, key_field)
        if ("" if is_empty(item_key) else as_key(item_key)) == wanted:
            count += 1
    return count
