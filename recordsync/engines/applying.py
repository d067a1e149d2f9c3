"""
The application of the changesets to the records.

The changesets are applied in place, to the record owned by the caller,
strictly in the order of the changes. Applying to the same record from
several threads at once is not safe: the callers must serialize that.

If a change fails, the following changes are not applied, and the error
is raised. What happens to the already applied changes depends on
the atomicity setting (see `ApplyingSettings.atomic`): by default,
they remain applied; in the atomic mode, the record remains untouched.
"""
import collections.abc
import copy
from typing import Any, Iterable, List, Optional, Sequence

from recordsync import errors
from recordsync.engines import loggers, strategies
from recordsync.storage import changelogs
from recordsync.structs import changesets, configuration, records

ChangeOperation = changesets.ChangeOperation


def apply(
        record: records.Record,
        changeset: Iterable[Any],
        *,
        settings: Optional[configuration.SyncSettings] = None,
        atomic: Optional[bool] = None,
        persist: bool = False,
) -> None:
    """
    Apply the changes, as generated by `diff`, to the record.

    The changes can be either the `Change` tuples, or their serialized form:
    the dicts with the ``field``, ``op``, and optionally ``value`` keys.

    The record's identity is preserved: it is the same object after
    the application, even in the atomic mode.

    If ``persist`` is true, the changeset is also appended to the settings'
    changelog storage, but only if it was applied fully.
    """
    settings = configuration.ensure_settings(settings)
    atomic = settings.applying.atomic if atomic is None else atomic
    items = list(changeset)

    if atomic:
        draft = copy.deepcopy(record)
        changes = _apply_all(draft, items, settings=settings)
        record.clear()
        record.update(draft)
    else:
        changes = _apply_all(record, items, settings=settings)

    if persist:
        settings.persistence.changelog_storage.append(
            key=record.get('key'),
            version=record.get('version'),
            changeset=changes,
        )


def apply_change(
        record: records.Record,
        change: changesets.Change,
        *,
        settings: Optional[configuration.SyncSettings] = None,
) -> None:
    """
    Apply a single change to the record.

    Full-value operations (``add``, ``modify``, ``delete``) work for all fields.
    Member-level operations depend on the field's kind. A removal of an absent
    member is not an error.
    """
    settings = configuration.ensure_settings(settings)
    comparison = settings.comparison
    field, op, value = change

    if op == ChangeOperation.DELETE:
        record.pop(field, None)
    elif op == ChangeOperation.ADD or op == ChangeOperation.MODIFY:
        record[field] = copy.deepcopy(value)
    elif op == ChangeOperation.MEMBER_ADD:
        strategy = strategies.resolve(comparison.registry.kind_of(field))
        strategy.add_member(record, field, copy.deepcopy(value), comparison=comparison)
    elif op == ChangeOperation.MEMBER_REMOVE:
        strategy = strategies.resolve(comparison.registry.kind_of(field))
        strategy.remove_member(record, field, value, comparison=comparison)
    else:
        raise errors.UnsupportedOperationError(
            f"Unsupported operation {op!r} for field {field!r}.",
            field=field, op=op)


def replay(
        record: records.Record,
        *,
        key: Optional[str] = None,
        storage: Optional[changelogs.ChangelogStorage] = None,
        settings: Optional[configuration.SyncSettings] = None,
) -> int:
    """
    Apply all the logged changesets of the record, in the order of logging.

    The record's key is used to find the changesets unless a key is provided.
    The record's version follows the versions of the entries, if they have it.
    Returns the number of the replayed changesets.
    """
    settings = configuration.ensure_settings(settings)
    storage = storage if storage is not None else settings.persistence.changelog_storage
    key = key if key is not None else record.get('key')
    entries = storage.fetch(key=key)
    for entry in entries:
        apply(record, entry.changeset, settings=settings)
        if entry.version is not None:
            record['version'] = entry.version
    return len(entries)


def _apply_all(
        record: records.Record,
        items: Sequence[Any],
        *,
        settings: configuration.SyncSettings,
) -> changesets.Changeset:
    logger = loggers.RecordLogger(record=record)
    applied: List[changesets.Change] = []
    for index, item in enumerate(items):
        try:
            change = _parse(item)
            apply_change(record, change, settings=settings)
        except errors.ChangesetError:
            logger.log(settings.logging.level,
                       f"Failed to apply {item!r}; {index} of {len(items)} change(s) "
                       f"were applied before it.")
            raise
        else:
            logger.log(settings.logging.level, f"Applied: {change!r}")
            applied.append(change)
    return changesets.Changeset(applied)


def _parse(item: Any) -> changesets.Change:
    """
    Accept the serialized changes, but fail on the unknown ops as unsupported.

    For the serialized changes in general, an unknown op is a malformed change.
    For the applier, it is a well-formed change with no application semantics.
    """
    if isinstance(item, collections.abc.Mapping):
        field, op = item.get('field'), item.get('op')
    else:
        field, op, _ = changesets.Change(*item)

    try:
        ChangeOperation(op)
    except ValueError:
        raise errors.UnsupportedOperationError(
            f"Unsupported operation {op!r} for field {field!r}.",
            field=field, op=op) from None

    if isinstance(item, collections.abc.Mapping):
        return changesets.Change.from_raw(item)
    else:
        field, op, value = changesets.Change(*item)
        return changesets.Change(field, ChangeOperation(op), value)
