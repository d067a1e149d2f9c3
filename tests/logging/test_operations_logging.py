import logging

import pytest

from recordsync.engines.applying import apply
from recordsync.engines.diffing import diff
from recordsync.engines.equality import differs
from recordsync.errors import UnexpectedFieldError


def test_differs_logs_the_first_differing_field(settings, caplog):
    differs({'title': 'a', 'url': 'b'}, {'title': 'x', 'url': 'y'}, settings=settings)
    assert caplog.messages == ["Field 'title' (scalar) differs."]


def test_differs_logs_the_target_only_field(settings, caplog):
    differs({}, {'url': 'y'}, settings=settings)
    assert caplog.messages == ["Field 'url' exists only in the target record."]


def test_equivalent_records_log_nothing(settings, caplog):
    differs({'title': 'a'}, {'title': 'a'}, settings=settings)
    assert caplog.messages == []


def test_diff_logs_every_change(settings, caplog):
    diff({'title': 'a'}, {'title': 'x', 'url': 'y'}, settings=settings)
    assert len(caplog.messages) == 2
    assert caplog.messages[0].startswith("Diffed: ")
    assert caplog.messages[1].startswith("Diffed: ")


def test_apply_logs_the_failure_and_the_progress(settings, caplog):
    with pytest.raises(UnexpectedFieldError):
        apply({'title': 'a'}, [('title', 'modify', 'x'), ('title', 'member-add', 'y')],
              settings=settings)
    assert len(caplog.messages) == 2
    assert caplog.messages[0].startswith("Applied: ")
    assert caplog.messages[1].startswith("Failed to apply ")
    assert "1 of 2 change(s) were applied before it" in caplog.messages[1]


def test_messages_are_logged_at_the_configured_level(settings, caplog):
    settings.logging.level = logging.INFO
    differs({'title': 'a'}, {'title': 'x'}, settings=settings)
    assert caplog.records[0].levelno == logging.INFO


def test_messages_carry_the_source_record_reference(settings, caplog):
    differs({'key': 'ABCD2345', 'version': 3, 'title': 'a'}, {'title': 'x'}, settings=settings)
    assert caplog.records[0].record_ref == {'key': 'ABCD2345', 'version': 3}
