"""
The classification of the records' fields by their value kinds.

Every field is of exactly one kind, and every kind has exactly one strategy
of comparing, diffing, and applying (see `recordsync.engines.strategies`).
The fields not known to the registry are scalars.
"""
import enum
from typing import Iterator, Mapping, MutableMapping, Optional


class FieldKind(enum.Enum):
    SCALAR = 'scalar'                   # strings, numbers, booleans
    ORDERED_LIST = 'ordered-list'       # e.g. creators: the order matters
    UNORDERED_SET = 'unordered-set'     # e.g. collections: plain membership ids
    STRUCTURAL_SET = 'structural-set'   # e.g. tags: compared by the entities' content
    MULTIMAP = 'multimap'               # e.g. relations: predicate -> values

    @property
    def is_collection(self) -> bool:
        return self in COLLECTION_KINDS

    def __str__(self) -> str:
        return str(self.value)


COLLECTION_KINDS = frozenset({FieldKind.UNORDERED_SET, FieldKind.STRUCTURAL_SET})

DEFAULT_KINDS: Mapping[str, FieldKind] = {
    'creators': FieldKind.ORDERED_LIST,
    'collections': FieldKind.UNORDERED_SET,
    'tags': FieldKind.STRUCTURAL_SET,
    'relations': FieldKind.MULTIMAP,
}


class FieldRegistry(Mapping[str, FieldKind]):
    """
    A static table of the multi-valued fields and their kinds.

    The registry is populated once per schema, and then only read. Lookups
    of the unregistered fields resolve to scalars, but the fields are not
    added to the registry (i.e. ``"title" not in registry``)::

        registry = FieldRegistry()
        registry.kind_of('tags')    # FieldKind.STRUCTURAL_SET
        registry.kind_of('title')   # FieldKind.SCALAR

        registry.register('seeAlso', FieldKind.UNORDERED_SET)
    """

    def __init__(self, __kinds: Optional[Mapping[str, FieldKind]] = None) -> None:
        super().__init__()
        self._kinds: MutableMapping[str, FieldKind] = dict(
            DEFAULT_KINDS if __kinds is None else __kinds
        )

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self._kinds!r})'

    def __len__(self) -> int:
        return len(self._kinds)

    def __iter__(self) -> Iterator[str]:
        return iter(self._kinds)

    def __getitem__(self, field: str) -> FieldKind:
        return self._kinds[field]

    def register(self, field: str, kind: FieldKind) -> None:
        if not isinstance(kind, FieldKind):
            raise TypeError(f"Field kind must be a FieldKind. Got {kind!r}")
        self._kinds[field] = kind

    def kind_of(self, field: str) -> FieldKind:
        return self._kinds.get(field, FieldKind.SCALAR)

    def is_collection(self, field: str) -> bool:
        return self.kind_of(field).is_collection
