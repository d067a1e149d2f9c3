"""
The equivalence of two records, field by field.

The check answers the question "do these records differ?" -- not "are they
equal?" -- so that the true result is the interesting one: e.g. the one
that requires a changeset to be calculated and sent::

    if recordsync.differs(local, remote, ['dateModified']):
        changeset = recordsync.diff(local, remote, ['dateModified'])

Only the meaningful values are compared: two absent values are the same,
regardless of how they are absent (missing, null, false, or empty string).
The field-specific rules are in `recordsync.engines.strategies`.
"""
from typing import Collection, Optional, Set

from recordsync.engines import loggers, strategies
from recordsync.structs import configuration, records


def differs(
        source: records.Record,
        target: records.Record,
        ignore_fields: Optional[Collection[str]] = None,
        *,
        settings: Optional[configuration.SyncSettings] = None,
) -> bool:
    """
    Check if two records are NOT equivalent.

    The identity fields (``key`` & ``version``) and the explicitly ignored
    fields are not compared. The first differing field stops the check.

    The fields of the target record absent in the source record make
    the records different, unless their value is exactly ``False``.

    An empty multi-valued field and an absent one are the same: e.g.
    ``differs({'creators': []}, {})`` is false. Zotero's own ``equals()`` treats
    such a pair as changed.
    """
    settings = configuration.ensure_settings(settings)
    comparison = settings.comparison
    logger = loggers.RecordLogger(record=source)

    compared: Set[str] = set(comparison.skipped_fields) | set(ignore_fields or ())
    for field, old in source.items():
        if field in compared:
            continue
        compared.add(field)

        new = target.get(field)
        if not records.has_value(old) and not records.has_value(new):
            continue

        kind = comparison.registry.kind_of(field)
        if strategies.resolve(kind).differs(old, new, comparison=comparison):
            logger.log(settings.logging.level, f"Field {field!r} ({kind}) differs.")
            return True

    # All remaining fields do not exist in the source record.
    for field, new in target.items():
        if field in compared:
            continue
        if new is False:
            continue
        logger.log(settings.logging.level, f"Field {field!r} exists only in the target record.")
        return True

    return False
