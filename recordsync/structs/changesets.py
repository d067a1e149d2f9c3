"""
The changesets: ordered field-level operations from one record to another.

The changesets are produced by `recordsync.engines.diffing`
and consumed by `recordsync.engines.applying`, possibly after being
transported or stored in between. For this, every changeset has a stable
serialized form -- a list of dicts, which is also what goes into JSON::

    [
        {"field": "title", "op": "modify", "value": "New title"},
        {"field": "collections", "op": "member-remove", "value": "BCDE3456"},
        {"field": "tags", "op": "member-add", "value": {"tag": "new"}},
        {"field": "abstractNote", "op": "delete"},
    ]

This form is a storage & wire contract. It must not change.
"""
import collections.abc
import enum
import json
from typing import Any, Iterable, Iterator, List, Mapping, NamedTuple, Sequence, Union, overload

from typing_extensions import TypedDict

from recordsync import errors


class ChangeOperation(str, enum.Enum):
    ADD = 'add'
    DELETE = 'delete'
    MODIFY = 'modify'
    MEMBER_ADD = 'member-add'
    MEMBER_REMOVE = 'member-remove'

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return repr(self.value)

    @property
    def is_member_level(self) -> bool:
        return self in (ChangeOperation.MEMBER_ADD, ChangeOperation.MEMBER_REMOVE)


class RawChange(TypedDict, total=False):
    field: str
    op: str
    value: Any


class Change(NamedTuple):
    field: str
    op: ChangeOperation
    value: Any = None

    def __repr__(self) -> str:
        return repr(tuple(self))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, collections.abc.Sequence):
            return tuple(self) == tuple(other)
        else:
            return NotImplemented

    def __ne__(self, other: object) -> bool:
        if isinstance(other, collections.abc.Sequence):
            return tuple(self) != tuple(other)
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash((self.field, str(self.op)))

    def as_raw(self) -> RawChange:
        """ Convert to the serializable form; deletions carry no value. """
        raw = RawChange(field=self.field, op=str(self.op))
        if self.op != ChangeOperation.DELETE:
            raw['value'] = self.value
        return raw

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Change":
        """
        Parse the serialized form of a change, as produced by `as_raw`.

        Everything not parseable is a `MalformedChangeError`: a missing
        or non-string field, an unknown operation, or a missing value
        for those operations that need it.
        """
        if not isinstance(raw, collections.abc.Mapping):
            raise errors.MalformedChangeError(f"A change must be a mapping. Got {raw!r}")
        field = raw.get('field')
        if not isinstance(field, str) or not field:
            raise errors.MalformedChangeError(f"A change has no field: {raw!r}")
        try:
            op = ChangeOperation(raw.get('op'))
        except ValueError:
            raise errors.MalformedChangeError(f"A change has an unknown op: {raw!r}") from None
        if op != ChangeOperation.DELETE and 'value' not in raw:
            raise errors.MalformedChangeError(f"A change has no value: {raw!r}")
        return cls(field, op, raw.get('value'))


class Changeset(Sequence[Change]):

    def __init__(self, __items: Iterable[Any] = ()):
        super().__init__()
        self._items = tuple(_coerce(item) for item in __items)

    def __repr__(self) -> str:
        return repr(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Change]:
        return iter(self._items)

    @overload
    def __getitem__(self, i: int) -> Change: ...

    @overload
    def __getitem__(self, s: slice) -> Sequence[Change]: ...

    def __getitem__(self, item: Union[int, slice]) -> Union[Change, Sequence[Change]]:
        return self._items[item]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, collections.abc.Sequence):
            return tuple(self) == tuple(other)
        else:
            return NotImplemented

    def __ne__(self, other: object) -> bool:
        if isinstance(other, collections.abc.Sequence):
            return tuple(self) != tuple(other)
        else:
            return NotImplemented

    def __add__(self, other: Iterable[Any]) -> "Changeset":
        return Changeset(list(self) + list(other))

    @property
    def fields(self) -> List[str]:
        """ The affected fields, each once, in the order of their first change. """
        return list(dict.fromkeys(change.field for change in self._items))

    def as_raw(self) -> List[RawChange]:
        return [change.as_raw() for change in self._items]

    @classmethod
    def from_raw(cls, raw: Iterable[Mapping[str, Any]]) -> "Changeset":
        if isinstance(raw, (str, bytes, collections.abc.Mapping)):
            raise errors.MalformedChangeError(f"A changeset must be a list. Got {raw!r}")
        return cls(Change.from_raw(item) for item in raw)

    def to_json(self) -> str:
        return json.dumps(self.as_raw(), separators=(',', ':'))  # NB: no spaces

    @classmethod
    def from_json(cls, encoded: Union[str, bytes]) -> "Changeset":
        try:
            decoded = json.loads(encoded)
        except json.JSONDecodeError as e:
            raise errors.MalformedChangeError(f"A changeset is not a valid JSON: {e}") from e
        return cls.from_raw(decoded)


def _coerce(item: Any) -> Change:
    if isinstance(item, collections.abc.Mapping):
        return Change.from_raw(item)
    field, op, value = Change(*item)
    try:
        return Change(field, ChangeOperation(op), value)
    except ValueError:
        raise errors.MalformedChangeError(f"A change has an unknown op: {item!r}") from None


EMPTY = Changeset()
