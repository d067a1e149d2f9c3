"""
The structural entities inside the records, and their default comparators.

The comparators are the external capabilities of the engines: they can be
replaced via `recordsync.structs.configuration.ComparisonSettings`
when the entities have different equality rules in the surrounding system.
The defaults here are enough for the records of the usual API JSON shape.
"""
from typing import Any, Callable, List, Mapping, Sequence

from typing_extensions import TypedDict

from recordsync.structs import records


class Creator(TypedDict, total=False):
    creatorType: str
    firstName: str
    lastName: str
    name: str


class Tag(TypedDict, total=False):
    tag: str
    type: int


EntityEquals = Callable[[Any, Any], bool]
SequenceEquals = Callable[[Sequence[Any], Sequence[Any]], bool]
SetDifference = Callable[[Sequence[Any], Sequence[Any]], List[Any]]

CREATOR_FIELDS = ('creatorType', 'firstName', 'lastName', 'name')


def _normalized(entity: Mapping[str, Any], field: str) -> Any:
    value = entity.get(field)
    return value if records.has_value(value) else None


def creator_equals(a: Creator, b: Creator) -> bool:
    """
    Compare two creators by their meaningful fields only.

    Absent, null, and empty fields are all the same: e.g. a single-field
    creator with ``"firstName": ""`` equals one without ``firstName`` at all.
    """
    return all(
        records.strictly_equal(_normalized(a, field), _normalized(b, field))
        for field in CREATOR_FIELDS
    )


def tag_equals(a: Tag, b: Tag) -> bool:
    """
    Compare two tags by their name and type; the type ``0`` is the default.
    """
    return (
        records.strictly_equal(a.get('tag'), b.get('tag')) and
        records.strictly_equal(a.get('type') or 0, b.get('type') or 0)
    )


def sequence_equals(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """ Compare two sequences element-wise with no type coercion. """
    return len(a) == len(b) and all(records.strictly_equal(x, y) for x, y in zip(a, b))


def set_difference(a: Sequence[Any], b: Sequence[Any]) -> List[Any]:
    """ Get the elements of ``a`` absent in ``b``, in the order of ``a``. """
    return [x for x in a if not any(records.strictly_equal(x, y) for y in b)]
