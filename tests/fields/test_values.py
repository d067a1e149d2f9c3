import pytest

from recordsync.structs.records import build_record_ref, has_diffable_value, has_value, \
                                       strictly_equal


@pytest.mark.parametrize('value', [
    'text', ' ', 0, 0.0, 1, -1, 1.5, True, [], {}, ['a'], {'a': 'b'},
])
def test_present_values(value):
    assert has_value(value)
    assert has_diffable_value(value)


@pytest.mark.parametrize('value', [
    None, False, '', float('nan'),
])
def test_absent_values(value):
    assert not has_value(value)
    assert not has_diffable_value(value)


@pytest.mark.parametrize('a, b', [
    (1, 1),
    (1, 1.0),
    ('1', '1'),
    (True, True),
    (False, False),
    (None, None),
    (['a'], ['a']),
    ({'a': 1}, {'a': 1}),
])
def test_strictly_equal(a, b):
    assert strictly_equal(a, b)
    assert strictly_equal(b, a)


@pytest.mark.parametrize('a, b', [
    (1, '1'),
    (1, True),
    (0, False),
    (0, ''),
    (0, None),
    ('', None),
    ('', False),
    (float('nan'), float('nan')),
    ('a', 'b'),
])
def test_strictly_unequal(a, b):
    assert not strictly_equal(a, b)
    assert not strictly_equal(b, a)


def test_record_ref_of_a_record():
    ref = build_record_ref({'key': 'ABCD2345', 'version': 10, 'title': 'x'})
    assert ref == {'key': 'ABCD2345', 'version': 10}


def test_record_ref_of_no_record():
    ref = build_record_ref(None)
    assert ref == {'key': None, 'version': None}
