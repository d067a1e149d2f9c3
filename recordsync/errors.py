"""
All the errors raised when comparing, diffing, or applying the changesets.

None of them is retryable: the same inputs always fail the same way.
"""
from typing import Any, Optional


class ChangesetError(Exception):
    """ A base class for all errors of the records' comparison and changesets. """


class _FieldOperationError(ChangesetError):

    def __init__(self, message: str, *, field: str, op: Optional[Any] = None) -> None:
        super().__init__(message)
        self.field = field
        self.op = op


class UnsupportedOperationError(_FieldOperationError):
    """
    The operation has no defined semantics for this field.

    For example, member-level operations on the ordered lists (creators),
    or diffs of the non-empty multimaps (relations).
    """


class UnexpectedFieldError(_FieldOperationError):
    """
    A member-level operation arrived for a field with no membership semantics.
    """


class MalformedChangeError(ChangesetError, ValueError):
    """
    The serialized change cannot be parsed: e.g. no field, or an unknown op.
    """
