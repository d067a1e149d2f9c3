"""
All configuration flags, options, settings to fine-tune the comparison,
diffing, and applying of the records.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Every operation accepts the settings optionally. If not passed,
the defaults are used, as in ``SyncSettings()``::

    settings = recordsync.SyncSettings()
    settings.comparison.tag_equals = my_tag_equals
    settings.comparison.registry.register('seeAlso', recordsync.FieldKind.UNORDERED_SET)
    settings.applying.atomic = True

    changeset = recordsync.diff(local, remote, settings=settings)
    recordsync.apply(local, changeset, settings=settings)

The settings are not shared between calls in any hidden way: whatever
is passed is used as is; whatever is not passed is created anew.
"""
import dataclasses
import logging
from typing import FrozenSet, Optional

from recordsync.storage import changelogs
from recordsync.structs import entities, fields, records


@dataclasses.dataclass
class ComparisonSettings:

    skipped_fields: FrozenSet[str] = records.IDENTITY_FIELDS
    """
    The fields which are never compared or diffed, in addition to the fields
    ignored in a specific call. By default, the identity & version metadata.
    """

    registry: fields.FieldRegistry = dataclasses.field(default_factory=fields.FieldRegistry)
    """
    The kinds of the multi-valued fields. All unlisted fields are scalars.
    """

    creator_equals: entities.EntityEquals = entities.creator_equals
    """
    How to compare two creators (the entities of the ordered lists).
    """

    tag_equals: entities.EntityEquals = entities.tag_equals
    """
    How to compare two tags (the entities of the structural sets).
    """

    sequence_equals: entities.SequenceEquals = entities.sequence_equals
    """
    How to compare two sorted sequences of scalars element-wise.
    """

    set_difference: entities.SetDifference = entities.set_difference
    """
    How to get the elements of one sequence which are absent in another one.
    """


@dataclasses.dataclass
class ApplyingSettings:

    atomic: bool = False
    """
    Should a failed changeset leave the record untouched?

    By default (``False``), the operations are applied one by one directly
    to the record, and those applied before the failed one remain applied.

    If ``True``, the changeset is applied to a copy of the record, and the
    record is updated from the copy only when all the operations succeed.
    """


@dataclasses.dataclass
class LoggingSettings:

    level: int = logging.DEBUG
    """
    The level of the per-operation messages: i.e. every emitted or applied
    change. Raise it to see the changes in the regular (non-debug) logs.
    """


@dataclasses.dataclass
class PersistenceSettings:

    changelog_storage: changelogs.ChangelogStorage = dataclasses.field(
        default_factory=changelogs.MemoryChangelogStorage)
    """
    Where to log the applied changesets of the records.
    """


@dataclasses.dataclass
class SyncSettings:
    comparison: ComparisonSettings = dataclasses.field(default_factory=ComparisonSettings)
    applying: ApplyingSettings = dataclasses.field(default_factory=ApplyingSettings)
    logging: LoggingSettings = dataclasses.field(default_factory=LoggingSettings)
    persistence: PersistenceSettings = dataclasses.field(default_factory=PersistenceSettings)


def ensure_settings(settings: Optional[SyncSettings]) -> SyncSettings:
    return settings if settings is not None else SyncSettings()
