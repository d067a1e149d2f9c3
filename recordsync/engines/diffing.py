"""
The changesets between two records.

The changeset is calculated field by field, in the order of the fields
in the source record, and then of the target-only fields in the target record.
Within a field, the removals of members go before the additions of members.

The changesets are deterministic for the same order of fields in the records,
but not canonical: the same records with the fields in a different order
produce the same operations in a different order.
"""
from typing import Collection, Iterator, Optional, Set

from recordsync.engines import loggers, strategies
from recordsync.structs import changesets, configuration, records


def diff_iter(
        source: records.Record,
        target: records.Record,
        ignore_fields: Optional[Collection[str]] = None,
        *,
        settings: Optional[configuration.SyncSettings] = None,
) -> Iterator[changesets.Change]:
    """
    Calculate the changes from the source record to the target record.

    Yields the `Change` tuples of form ``(field, op, value)``,
    where ``op`` is one of `ChangeOperation` values, and ``value``
    is the new value of a field or of a member (`None` for deletions).

    The multi-valued fields are diffed by their own rules
    (see `recordsync.engines.strategies`), and can fail for the operations
    not supported for them (`UnsupportedOperationError`): in that case,
    the already yielded changes are incomplete and must not be used.
    """
    settings = configuration.ensure_settings(settings)
    comparison = settings.comparison
    logger = loggers.RecordLogger(record=source)

    diffed: Set[str] = set(comparison.skipped_fields) | set(ignore_fields or ())
    for field, old in source.items():
        if field in diffed:
            continue
        diffed.add(field)

        new = target.get(field)
        if not records.has_diffable_value(old) and not records.has_diffable_value(new):
            continue

        strategy = strategies.resolve(comparison.registry.kind_of(field))
        for change in strategy.diff_iter(field, old, new, comparison=comparison):
            logger.log(settings.logging.level, f"Diffed: {change!r}")
            yield change

    # All remaining fields do not exist in the source record.
    for field, new in target.items():
        if field in diffed:
            continue
        if new is False or (isinstance(new, str) and new == ''):
            continue
        change = changesets.Change(field, changesets.ChangeOperation.ADD, new)
        logger.log(settings.logging.level, f"Diffed: {change!r}")
        yield change


def diff(
        source: records.Record,
        target: records.Record,
        ignore_fields: Optional[Collection[str]] = None,
        *,
        settings: Optional[configuration.SyncSettings] = None,
) -> changesets.Changeset:
    """
    Same as `diff_iter`, but returns the whole changeset instead of iterator.
    """
    return changesets.Changeset(diff_iter(source, target, ignore_fields, settings=settings))
