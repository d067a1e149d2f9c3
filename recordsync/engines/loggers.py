"""
Logging of the records' processing, with the records' identities attached.

Everything logged via `RecordLogger` carries a reference to the record
(its key & version) as the ``record_ref`` attribute of the log records.
The formatters render it either as a message prefix (``[ABCD2345@17] Applied...``),
or as a separate field of the JSON logs, for the log parsers to filter by.
"""
import copy
import enum
import logging
from typing import Any, MutableMapping, Optional, Tuple, Union

import pythonjsonlogger.jsonlogger

from recordsync.structs import records

DEFAULT_JSON_REFKEY = 'record'
""" A key for record references in JSON logs, as seen by the log parsers. """

SEVERITIES = [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
]


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = enum.auto()


def render_ref(ref: records.RecordRef) -> str:
    """ Render the record reference as ``[key@version]``, or ``[key]`` if unversioned. """
    key = ref.get('key') or ''
    version = ref.get('version')
    return f"[{key}]" if version is None else f"[{key}@{version}]"


def get_ref(record: logging.LogRecord) -> Optional[records.RecordRef]:
    ref: Optional[records.RecordRef] = getattr(record, 'record_ref', None)
    return ref


def get_severity(levelno: int) -> str:
    for threshold, severity in SEVERITIES:
        if levelno <= threshold:
            return severity
    return 'fatal'


class RecordTextFormatter(logging.Formatter):
    """ A text formatter, optionally prefixing the messages with the record reference. """

    def __init__(self, fmt: Optional[str] = None, *args: Any, prefix: bool = True, **kwargs: Any):
        super().__init__(fmt, *args, **kwargs)
        self.prefix = prefix

    def formatMessage(self, record: logging.LogRecord) -> str:
        ref = get_ref(record)
        if self.prefix and ref is not None:
            record = copy.copy(record)  # other handlers must see the original message
            record.message = f"{render_ref(ref)} {record.message}"
        return super().formatMessage(record)


class RecordJsonFormatter(pythonjsonlogger.jsonlogger.JsonFormatter):  # type: ignore
    """
    A JSON formatter, with the record reference as a separate field.

    The reference goes to the ``refkey`` field (``"record"`` by default)
    as a dict ``{"key": ..., "version": ...}``, not as a raw extra attribute.
    """

    def __init__(
            self,
            *args: Any,
            refkey: Optional[str] = None,
            prefix: bool = False,
            **kwargs: Any,
    ) -> None:
        reserved = kwargs.pop('reserved_attrs', pythonjsonlogger.jsonlogger.RESERVED_ATTRS)
        kwargs['reserved_attrs'] = tuple(reserved) + ('record_ref',)
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self.refkey = refkey or DEFAULT_JSON_REFKEY
        self.prefix = prefix

    def add_fields(
            self,
            log_record: MutableMapping[str, object],
            record: logging.LogRecord,
            message_dict: MutableMapping[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault('severity', get_severity(record.levelno))

        ref = get_ref(record)
        if ref is not None:
            log_record[self.refkey] = dict(ref)
            if self.prefix and 'message' in log_record:
                log_record['message'] = f"{render_ref(ref)} {log_record['message']}"


class RecordLogger(logging.LoggerAdapter):  # type: ignore
    """
    A logger/adapter to carry the record identifiers for formatting.

    Constructed for every processed record (or a pair of them, where the
    first one is the record of interest: e.g. the local one when diffing).

    Only the identity is carried, not the record itself: the record can be
    modified while the messages are still in the buffers or queues.
    """

    def __init__(self, *, record: Optional[records.Record]) -> None:
        super().__init__(logger, {'record_ref': records.build_record_ref(record)})

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # The message's own extras are kept; the adapter only adds the reference.
        extra = dict(kwargs.get('extra') or {})
        extra.setdefault('record_ref', self.extra['record_ref'])
        kwargs['extra'] = extra
        return msg, kwargs


logger = logging.getLogger('recordsync.records')


def make_formatter(
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> logging.Formatter:
    """
    Make a formatter for the log format. The prefixes are on by default for text only.
    """
    prefix = log_format is not LogFormat.JSON if log_prefix is None else log_prefix
    if log_format is LogFormat.JSON:
        return RecordJsonFormatter(refkey=log_refkey, prefix=prefix)
    fmt = log_format.value if isinstance(log_format, LogFormat) else log_format
    if not isinstance(fmt, str):
        raise ValueError(f"Unsupported log format: {log_format!r}")
    return RecordTextFormatter(fmt, prefix=prefix)


def configure(
        debug: bool = False,
        verbose: bool = False,
        quiet: bool = False,
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> logging.Handler:
    """ Log to stderr at the level & in the format as requested on CLI. """
    handler = logging.StreamHandler()
    handler.setFormatter(make_formatter(log_format, log_prefix=log_prefix, log_refkey=log_refkey))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug or verbose else logging.WARNING if quiet else logging.INFO)
    return handler
