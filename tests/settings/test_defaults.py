import logging

import recordsync
from recordsync.structs.fields import FieldKind


def test_declared_public_interface_and_promised_defaults():
    settings = recordsync.SyncSettings()
    assert settings.comparison.skipped_fields == {'key', 'version'}
    assert settings.comparison.registry.kind_of('creators') == FieldKind.ORDERED_LIST
    assert settings.comparison.registry.kind_of('collections') == FieldKind.UNORDERED_SET
    assert settings.comparison.registry.kind_of('tags') == FieldKind.STRUCTURAL_SET
    assert settings.comparison.registry.kind_of('relations') == FieldKind.MULTIMAP
    assert settings.comparison.registry.kind_of('title') == FieldKind.SCALAR
    assert settings.comparison.creator_equals is recordsync.creator_equals
    assert settings.comparison.tag_equals is recordsync.tag_equals
    assert settings.comparison.sequence_equals is recordsync.sequence_equals
    assert settings.comparison.set_difference is recordsync.set_difference
    assert settings.applying.atomic == False
    assert settings.logging.level == logging.DEBUG
    assert isinstance(settings.persistence.changelog_storage, recordsync.MemoryChangelogStorage)


def test_settings_are_not_shared():
    settings1 = recordsync.SyncSettings()
    settings2 = recordsync.SyncSettings()
    settings1.comparison.registry.register('seeAlso', FieldKind.UNORDERED_SET)
    assert settings2.comparison.registry.kind_of('seeAlso') == FieldKind.SCALAR
    assert settings1.persistence.changelog_storage is not settings2.persistence.changelog_storage


def test_custom_registry_changes_the_comparison():
    settings = recordsync.SyncSettings()
    settings.comparison.registry.register('seeAlso', FieldKind.UNORDERED_SET)
    source = {'seeAlso': ['A', 'B']}
    target = {'seeAlso': ['B', 'A']}
    assert not recordsync.differs(source, target, settings=settings)
    assert recordsync.differs(source, target)


def test_custom_tag_equality_changes_the_comparison():
    settings = recordsync.SyncSettings()
    settings.comparison.tag_equals = lambda a, b: a['tag'].lower() == b['tag'].lower()
    source = {'tags': [{'tag': 'Latin'}]}
    target = {'tags': [{'tag': 'latin'}]}
    assert not recordsync.differs(source, target, settings=settings)
    assert recordsync.differs(source, target)


def test_custom_skipped_fields():
    settings = recordsync.SyncSettings()
    settings.comparison.skipped_fields = frozenset({'version'})
    assert recordsync.differs({'key': 'A'}, {'key': 'B'}, settings=settings)
    assert not recordsync.differs({'key': 'A'}, {'key': 'B'})


def test_custom_creator_equality_is_called_per_pair(mocker):
    creator_equals = mocker.Mock(return_value=True)
    settings = recordsync.SyncSettings()
    settings.comparison.creator_equals = creator_equals
    source = {'creators': [{'name': 'A'}, {'name': 'B'}]}
    target = {'creators': [{'name': 'X'}, {'name': 'Y'}]}
    assert not recordsync.differs(source, target, settings=settings)
    assert creator_equals.call_count == 2
    assert creator_equals.call_args_list[0] == mocker.call({'name': 'A'}, {'name': 'X'})


def test_custom_set_difference_is_used_for_diffs(mocker):
    set_difference = mocker.Mock(return_value=[])
    settings = recordsync.SyncSettings()
    settings.comparison.set_difference = set_difference
    changeset = recordsync.diff({'collections': ['A']}, {'collections': ['B']}, settings=settings)
    assert changeset == []
    assert set_difference.call_count == 2
