"""
The per-kind logic of comparing, diffing, and applying the fields' values.

There is one strategy per field kind (see `recordsync.structs.fields`),
and one instance per strategy: they are stateless. The engines resolve
the strategy by the field's kind, never by the field's name::

    strategy = strategies.resolve(settings.comparison.registry.kind_of(field))
    strategy.differs(old, new, comparison=settings.comparison)

The values passed here are already known to be meaningful on at least
one side; the absence of a value on the other side is handled by each
strategy on its own: usually, as an empty container for multi-valued fields.
"""
import numbers
from typing import TYPE_CHECKING, Any, Iterator, List, Mapping, Sequence, Tuple

from recordsync import errors
from recordsync.structs import changesets, fields, records

if TYPE_CHECKING:
    from recordsync.structs import configuration

Change = changesets.Change
ChangeOperation = changesets.ChangeOperation


class FieldStrategy:
    """
    The base strategy: no membership semantics at all.

    The comparison and the diffing must be implemented by the descendants.
    The member-level operations fail as unexpected for this field,
    unless overridden.
    """
    kind: fields.FieldKind

    def differs(
            self,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        raise NotImplementedError

    def diff_iter(
            self,
            field: str,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> Iterator[Change]:
        raise NotImplementedError

    def add_member(
            self,
            record: records.Record,
            field: str,
            value: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> None:
        raise errors.UnexpectedFieldError(
            f"Unexpected field {field!r} for {ChangeOperation.MEMBER_ADD}.",
            field=field, op=ChangeOperation.MEMBER_ADD)

    def remove_member(
            self,
            record: records.Record,
            field: str,
            value: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> None:
        raise errors.UnexpectedFieldError(
            f"Unexpected field {field!r} for {ChangeOperation.MEMBER_REMOVE}.",
            field=field, op=ChangeOperation.MEMBER_REMOVE)


class ScalarStrategy(FieldStrategy):
    kind = fields.FieldKind.SCALAR

    def differs(
            self,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        return not records.strictly_equal(old, new)

    def diff_iter(
            self,
            field: str,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> Iterator[Change]:
        if records.strictly_equal(old, new):
            pass
        elif not records.has_diffable_value(new):
            yield Change(field, ChangeOperation.DELETE)
        elif not records.has_diffable_value(old):
            yield Change(field, ChangeOperation.ADD, new)
        else:
            yield Change(field, ChangeOperation.MODIFY, new)


class OrderedListStrategy(FieldStrategy):
    """
    Ordered lists of entities (creators): only changed or not as a whole.

    The positional diffs of the ordered lists are too complicated (reordering,
    insertion in the middle, etc), so the whole list is replaced if changed.
    """
    kind = fields.FieldKind.ORDERED_LIST

    def differs(
            self,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        old = _as_list(old)
        new = _as_list(new)
        if len(old) != len(new):
            return True
        return any(not comparison.creator_equals(a, b) for a, b in zip(old, new))

    def diff_iter(
            self,
            field: str,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> Iterator[Change]:
        old = _as_list(old)
        new = _as_list(new)
        if not new:
            if old:
                yield Change(field, ChangeOperation.DELETE)
        elif self.differs(old, new, comparison=comparison):
            yield Change(field, ChangeOperation.MODIFY, new)

    def add_member(
            self,
            record: records.Record,
            field: str,
            value: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> None:
        raise errors.UnsupportedOperationError(
            f"Member-level changes of the ordered field {field!r} are not supported.",
            field=field, op=ChangeOperation.MEMBER_ADD)

    def remove_member(
            self,
            record: records.Record,
            field: str,
            value: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> None:
        raise errors.UnsupportedOperationError(
            f"Member-level changes of the ordered field {field!r} are not supported.",
            field=field, op=ChangeOperation.MEMBER_REMOVE)


class SetStrategy(FieldStrategy):
    """
    A common logic of the sets: the members are removed first, then added.

    The descendants only define how the members are compared.
    """

    def _equals(
            self,
            a: Any,
            b: Any,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        raise NotImplementedError

    def _index(
            self,
            members: Sequence[Any],
            value: Any,
            comparison: "configuration.ComparisonSettings",
    ) -> int:
        for i, member in enumerate(members):
            if self._equals(member, value, comparison):
                return i
        return -1

    def _difference(
            self,
            a: Sequence[Any],
            b: Sequence[Any],
            comparison: "configuration.ComparisonSettings",
    ) -> List[Any]:
        return [x for x in a if self._index(b, x, comparison) < 0]

    def diff_iter(
            self,
            field: str,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> Iterator[Change]:
        old = _as_list(old)
        new = _as_list(new)
        for value in self._difference(old, new, comparison):
            yield Change(field, ChangeOperation.MEMBER_REMOVE, value)
        for value in self._difference(new, old, comparison):
            yield Change(field, ChangeOperation.MEMBER_ADD, value)

    def add_member(
            self,
            record: records.Record,
            field: str,
            value: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> None:
        members = _ensure_list(record, field)
        if self._index(members, value, comparison) < 0:
            members.append(value)

    def remove_member(
            self,
            record: records.Record,
            field: str,
            value: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> None:
        if not records.has_value(record.get(field)):
            return  # nothing to remove from is the same as no such member.
        members = _ensure_list(record, field)
        index = self._index(members, value, comparison)
        if index >= 0:
            del members[index]


class UnorderedSetStrategy(SetStrategy):
    """
    Sets of plain scalar identifiers (collections), compared as raw values.
    """
    kind = fields.FieldKind.UNORDERED_SET

    def _equals(
            self,
            a: Any,
            b: Any,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        return records.strictly_equal(a, b)

    def _difference(
            self,
            a: Sequence[Any],
            b: Sequence[Any],
            comparison: "configuration.ComparisonSettings",
    ) -> List[Any]:
        return comparison.set_difference(a, b)

    def differs(
            self,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        old = _as_list(old)
        new = _as_list(new)
        if len(old) != len(new):
            return True
        return not comparison.sequence_equals(_sorted(old), _sorted(new))


class StructuralSetStrategy(SetStrategy):
    """
    Sets of entities (tags), compared by the entities' content.

    Note: the whole-field equality is positional (the n-th tag is compared
    to the n-th tag), while the diffs are true set differences. So, the same
    tags in a different order are "different" but produce no changes.
    """
    kind = fields.FieldKind.STRUCTURAL_SET

    def _equals(
            self,
            a: Any,
            b: Any,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        return comparison.tag_equals(a, b)

    def differs(
            self,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        old = _as_list(old)
        new = _as_list(new)
        if len(old) != len(new):
            return True
        return any(not comparison.tag_equals(a, b) for a, b in zip(old, new))


class MultimapStrategy(FieldStrategy):
    """
    Multimaps of predicates to values (relations).

    Only the empty multimaps can be diffed. The members cannot be added,
    and the removals are unexpected, same as for the scalars.
    """
    kind = fields.FieldKind.MULTIMAP

    def differs(
            self,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> bool:
        old_predicates = sorted(_as_dict(old))
        new_predicates = sorted(_as_dict(new))
        if not comparison.sequence_equals(old_predicates, new_predicates):
            return True

        # FIXME: compares the predicates themselves, not their values: the changed values
        #        of the same predicates go unnoticed. Not fixed until confirmed by the owners.
        for old_predicate, new_predicate in zip(old_predicates, new_predicates):
            if not comparison.sequence_equals(list(old_predicate), list(new_predicate)):
                return True
        return False

    def diff_iter(
            self,
            field: str,
            old: Any,
            new: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> Iterator[Change]:
        if _as_dict(old) or _as_dict(new):
            raise errors.UnsupportedOperationError(
                f"Diffs of the non-empty multimap field {field!r} are not supported.",
                field=field)
        yield from ()

    def add_member(
            self,
            record: records.Record,
            field: str,
            value: Any,
            *,
            comparison: "configuration.ComparisonSettings",
    ) -> None:
        raise errors.UnsupportedOperationError(
            f"Member-level changes of the multimap field {field!r} are not supported.",
            field=field, op=ChangeOperation.MEMBER_ADD)


STRATEGIES: Mapping[fields.FieldKind, FieldStrategy] = {
    fields.FieldKind.SCALAR: ScalarStrategy(),
    fields.FieldKind.ORDERED_LIST: OrderedListStrategy(),
    fields.FieldKind.UNORDERED_SET: UnorderedSetStrategy(),
    fields.FieldKind.STRUCTURAL_SET: StructuralSetStrategy(),
    fields.FieldKind.MULTIMAP: MultimapStrategy(),
}


def resolve(kind: fields.FieldKind) -> FieldStrategy:
    return STRATEGIES[kind]


def _as_list(value: Any) -> List[Any]:
    return list(value) if records.has_value(value) else []


def _as_dict(value: Any) -> Mapping[Any, Any]:
    return value if records.has_value(value) else {}


def _ensure_list(record: records.Record, field: str) -> List[Any]:
    members = record.get(field)
    if not isinstance(members, list):
        members = _as_list(members)
        record[field] = members
    return members


def _sorted(values: Sequence[Any]) -> List[Any]:
    return sorted(values, key=_sorting_key)


def _sorting_key(value: Any) -> Tuple[str, Any]:
    # Mixed types (e.g. ints & strs) are not orderable, so they are grouped by type first.
    # Ints & floats are the same JSON numbers, so they share a group.
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return ('number', value)
    return (type(value).__name__, value)
