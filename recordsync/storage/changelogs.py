"""
Store the changesets applied to the records, i.e. the sync log.

The changelog is append-only: every entry is one changeset of one record
at the moment it was applied (or sent, or received -- it is up to the caller
what the log means). The entries can be fetched back per record key, in the
order of appending, and replayed (see `recordsync.engines.applying.replay`).

The changesets are stored in their serialized form only (see
`recordsync.structs.changesets`), so that the log is readable by any other
implementation of the same wire contract.
"""
import abc
import datetime
import json
import os
from typing import List, NamedTuple, Optional, Union

import iso8601
from typing_extensions import TypedDict

from recordsync.structs import changesets


class ChangelogEntry(TypedDict, total=True):
    key: Optional[str]
    version: Optional[Union[int, str]]
    timestamp: str
    changes: List[changesets.RawChange]


class ChangelogRecord(NamedTuple):
    version: Optional[Union[int, str]]
    timestamp: datetime.datetime
    changeset: changesets.Changeset


class ChangelogStorage(metaclass=abc.ABCMeta):

    def build(
            self,
            *,
            key: Optional[str],
            version: Optional[Union[int, str]],
            changeset: changesets.Changeset,
    ) -> ChangelogEntry:
        """
        Make a serializable entry of the changeset at the current time.

        It is generally not a good idea to override this method in custom
        stores, unless a different structure of the entries is needed.
        """
        now = datetime.datetime.now(datetime.timezone.utc)
        return ChangelogEntry(
            key=key,
            version=version,
            timestamp=now.isoformat(),
            changes=changeset.as_raw(),
        )

    def parse(self, entry: ChangelogEntry) -> ChangelogRecord:
        return ChangelogRecord(
            version=entry.get('version'),
            timestamp=iso8601.parse_date(entry['timestamp']),
            changeset=changesets.Changeset.from_raw(entry['changes']),
        )

    def append(
            self,
            *,
            key: Optional[str],
            version: Optional[Union[int, str]] = None,
            changeset: changesets.Changeset,
    ) -> ChangelogEntry:
        entry = self.build(key=key, version=version, changeset=changeset)
        self.store(entry=entry)
        return entry

    def fetch(
            self,
            *,
            key: Optional[str],
    ) -> List[ChangelogRecord]:
        return [self.parse(entry) for entry in self.load() if entry.get('key') == key]

    @abc.abstractmethod
    def load(self) -> List[ChangelogEntry]:
        raise NotImplementedError

    @abc.abstractmethod
    def store(
            self,
            *,
            entry: ChangelogEntry,
    ) -> None:
        raise NotImplementedError


class MemoryChangelogStorage(ChangelogStorage):

    def __init__(self) -> None:
        super().__init__()
        self._entries: List[ChangelogEntry] = []

    def load(self) -> List[ChangelogEntry]:
        return list(self._entries)

    def store(
            self,
            *,
            entry: ChangelogEntry,
    ) -> None:
        # Keep the serialized form, so that later changes of the values do not leak in.
        self._entries.append(json.loads(json.dumps(entry)))


class FileChangelogStorage(ChangelogStorage):
    """
    A changelog in a local file: one JSON-encoded entry per line.

    The file is created on the first append. A missing file is an empty log.
    """

    def __init__(
            self,
            path: Union[str, "os.PathLike[str]"],
            *,
            encoding: str = 'utf-8',
    ) -> None:
        super().__init__()
        self.path = path
        self.encoding = encoding

    def load(self) -> List[ChangelogEntry]:
        entries: List[ChangelogEntry] = []
        try:
            with open(self.path, 'rt', encoding=self.encoding) as f:
                for line in f:
                    if line.strip():
                        entries.append(json.loads(line))
        except FileNotFoundError:
            pass
        return entries

    def store(
            self,
            *,
            entry: ChangelogEntry,
    ) -> None:
        encoded: str = json.dumps(entry, separators=(',', ':'))  # NB: no spaces
        with open(self.path, 'at', encoding=self.encoding) as f:
            f.write(encoded + '\n')
