import copy

import pytest

from recordsync.structs.configuration import SyncSettings


@pytest.fixture()
def settings():
    return SyncSettings()


@pytest.fixture()
def atomic_settings():
    settings = SyncSettings()
    settings.applying.atomic = True
    return settings


@pytest.fixture()
def record1():
    return {
        'key': 'ABCD2345',
        'version': 10,
        'itemType': 'book',
        'title': 'Lorem ipsum',
        'numPages': 0,
        'creators': [
            {'creatorType': 'author', 'firstName': 'John', 'lastName': 'Doe'},
            {'creatorType': 'editor', 'name': 'ACME Corp.'},
        ],
        'collections': ['BCDE3456', 'CDEF4567'],
        'tags': [{'tag': 'latin'}, {'tag': 'automatic', 'type': 1}],
        'relations': {},
    }


@pytest.fixture()
def record2(record1):
    record2 = copy.deepcopy(record1)
    record2['version'] = 11
    record2['title'] = 'Dolor sit amet'
    record2['collections'] = ['CDEF4567', 'DEFG5678']
    record2['tags'] = [{'tag': 'latin'}, {'tag': 'greek'}]
    record2['url'] = 'http://example.com/'
    return record2


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)
