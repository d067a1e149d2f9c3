"""
The records as exchanged with the synchronization service.

A record is a JSON-decoded mapping of field names to values, e.g.::

    {
        "key": "ABCD2345",
        "version": 17,
        "itemType": "book",
        "title": "Lorem ipsum",
        "creators": [{"creatorType": "author", "lastName": "Doe"}],
        "collections": ["BCDE3456"],
        "tags": [{"tag": "latin"}],
        "relations": {"dc:relation": ["http://example.com/items/CDEF4567"]},
    }

The records are owned by the callers. The framework only reads them,
except when explicitly applying the changesets (see `recordsync.engines.applying`).

The values originate from JSON, so the notion of "having a value" follows
the JSON/JavaScript truthiness, not Python's: empty lists & dicts are values,
while empty strings, nulls, falses and NaNs are not. Zeroes are values too.
"""
import math
import numbers
from typing import Any, MutableMapping, Optional, Union

from typing_extensions import TypedDict

Record = MutableMapping[str, Any]

# The fields which identify the record and its version. They are never compared.
IDENTITY_FIELDS = frozenset({'key', 'version'})


class RecordRef(TypedDict, total=True):
    key: Optional[str]
    version: Optional[Union[int, str]]


def build_record_ref(record: Optional[Record]) -> RecordRef:
    """ Extract the identifying fields only, e.g. for logging. """
    record = record if record is not None else {}
    return RecordRef(key=record.get('key'), version=record.get('version'))


def _is_truthy(value: Any) -> bool:
    if value is None or value is False:
        return False
    elif isinstance(value, str):
        return value != ''
    elif isinstance(value, numbers.Real):
        return value != 0 and not math.isnan(value)
    else:
        return True  # containers, even empty ones, and all other objects.


def _is_zero(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and value == 0


def has_value(value: Any) -> bool:
    """
    Check if the value is present for the records' equality checks.

    Truthy values and exact zeroes are present. Nulls, falses, empty strings,
    and NaNs are absent.
    """
    return _is_truthy(value) or _is_zero(value)


def has_diffable_value(value: Any) -> bool:
    """
    Check if the value is present for the changesets' calculation.

    The same as `has_value`, but empty strings are explicitly absent
    regardless of how the truthiness of strings is defined.
    """
    return (_is_truthy(value) and value != '') or _is_zero(value)


def strictly_equal(a: Any, b: Any) -> bool:
    """
    Compare two values without any type coercion.

    Unlike Python's ``==``, a boolean never equals a number (``True != 1``),
    and a number never equals its string representation (``1 != "1"``).
    Integers and floats are the same JSON numbers, so ``1 == 1.0``.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b
    elif isinstance(a, numbers.Real) != isinstance(b, numbers.Real):
        return False
    else:
        return bool(a == b)
