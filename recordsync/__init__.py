"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from recordsync.engines.applying import (
    apply,
    apply_change,
    replay,
)
from recordsync.engines.diffing import (
    diff,
    diff_iter,
)
from recordsync.engines.equality import (
    differs,
)
from recordsync.engines.loggers import (
    LogFormat,
    RecordLogger,
    configure as configure_logging,
)
from recordsync.errors import (
    ChangesetError,
    UnsupportedOperationError,
    UnexpectedFieldError,
    MalformedChangeError,
)
from recordsync.storage.changelogs import (
    ChangelogEntry,
    ChangelogRecord,
    ChangelogStorage,
    MemoryChangelogStorage,
    FileChangelogStorage,
)
from recordsync.structs.changesets import (
    Change,
    Changeset,
    ChangeOperation,
    RawChange,
)
from recordsync.structs.configuration import (
    SyncSettings,
    ComparisonSettings,
    ApplyingSettings,
    LoggingSettings,
    PersistenceSettings,
)
from recordsync.structs.entities import (
    Creator,
    Tag,
    creator_equals,
    tag_equals,
    sequence_equals,
    set_difference,
)
from recordsync.structs.fields import (
    FieldKind,
    FieldRegistry,
)
from recordsync.structs.records import (
    Record,
    RecordRef,
)
from recordsync.utilities.versions import (
    version as __version__,
)

__all__ = [
    'apply', 'apply_change', 'replay',
    'diff', 'diff_iter',
    'differs',
    'LogFormat', 'RecordLogger', 'configure_logging',
    'ChangesetError',
    'UnsupportedOperationError',
    'UnexpectedFieldError',
    'MalformedChangeError',
    'ChangelogEntry',
    'ChangelogRecord',
    'ChangelogStorage',
    'MemoryChangelogStorage',
    'FileChangelogStorage',
    'Change',
    'Changeset',
    'ChangeOperation',
    'RawChange',
    'SyncSettings',
    'ComparisonSettings',
    'ApplyingSettings',
    'LoggingSettings',
    'PersistenceSettings',
    'Creator', 'Tag',
    'creator_equals', 'tag_equals', 'sequence_equals', 'set_difference',
    'FieldKind',
    'FieldRegistry',
    'Record',
    'RecordRef',
]
