import json

import pytest


@pytest.fixture()
def source(write_json):
    return write_json('source.json', {'key': 'ABCD2345', 'version': 3, 'title': 'a'})


@pytest.fixture()
def target(write_json):
    return write_json('target.json', {'key': 'ABCD2345', 'version': 4, 'title': 'x', 'url': 'y'})


def test_help(invoke):
    result = invoke('--help')
    assert result.exit_code == 0
    assert 'differs' in result.output
    assert 'diff' in result.output
    assert 'apply' in result.output
    assert 'replay' in result.output


def test_differs_when_equivalent(invoke, source):
    result = invoke('differs', source, source)
    assert result.exit_code == 0
    assert result.output == 'false\n'


def test_differs_when_different(invoke, source, target):
    result = invoke('differs', source, target)
    assert result.exit_code == 1
    assert result.output == 'true\n'


def test_differs_with_ignored_fields(invoke, source, target):
    result = invoke('differs', '-i', 'title', '--ignore', 'url', source, target)
    assert result.exit_code == 0
    assert result.output == 'false\n'


def test_diff_prints_the_changeset(invoke, source, target):
    result = invoke('diff', source, target)
    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {'field': 'title', 'op': 'modify', 'value': 'x'},
        {'field': 'url', 'op': 'add', 'value': 'y'},
    ]


def test_diff_reads_yaml_and_stdin(invoke, tmp_path):
    path = tmp_path / 'target.yaml'
    path.write_text("title: x\ncollections: [A, B]\n", encoding='utf-8')
    result = invoke('diff', '-', str(path), input="title: x\ncollections: [B]\n")
    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {'field': 'collections', 'op': 'member-add', 'value': 'A'},
    ]


def test_diff_of_unsupported_fields_fails(invoke, write_json):
    source = write_json('source.json', {'relations': {'dc:replaces': ['A']}})
    target = write_json('target.json', {'relations': {}})
    result = invoke('diff', source, target)
    assert result.exit_code == 1
    assert 'UnsupportedOperationError' in result.output


def test_invalid_yaml_is_a_usage_error(invoke, source, tmp_path):
    path = tmp_path / 'broken.yaml'
    path.write_text("title: [x\n", encoding='utf-8')
    result = invoke('diff', source, str(path))
    assert result.exit_code == 2


def test_apply_prints_the_record(invoke, source, write_json):
    changeset = write_json('changeset.json', [
        {'field': 'title', 'op': 'modify', 'value': 'x'},
        {'field': 'collections', 'op': 'member-add', 'value': 'A'},
    ])
    result = invoke('apply', source, changeset)
    assert result.exit_code == 0
    assert json.loads(result.output) == {
        'key': 'ABCD2345', 'version': 3, 'title': 'x', 'collections': ['A'],
    }


def test_apply_of_an_empty_document(invoke, source, tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text("", encoding='utf-8')
    result = invoke('apply', source, str(path))
    assert result.exit_code == 0
    assert json.loads(result.output)['title'] == 'a'


def test_apply_fails_on_an_unexpected_field(invoke, source, write_json):
    changeset = write_json('changeset.json', [
        {'field': 'title', 'op': 'member-add', 'value': 'x'},
    ])
    result = invoke('apply', '--atomic', source, changeset)
    assert result.exit_code == 1
    assert "UnexpectedFieldError: Unexpected field 'title' for member-add." in result.output


def test_apply_fails_on_a_malformed_changeset(invoke, source, write_json):
    changeset = write_json('changeset.json', [{'field': 'title', 'op': 'rename'}])
    result = invoke('apply', source, changeset)
    assert result.exit_code == 1
    assert 'MalformedChangeError' in result.output


def test_apply_with_changelog_then_replay(invoke, write_json, tmp_path):
    changelog = str(tmp_path / 'changelog.jsonl')
    record = write_json('record.json', {'key': 'ABCD2345', 'version': 3, 'title': 'a'})
    changeset = write_json('changeset.json', [{'field': 'title', 'op': 'modify', 'value': 'x'}])

    result = invoke('apply', '-L', changelog, record, changeset)
    assert result.exit_code == 0
    assert len((tmp_path / 'changelog.jsonl').read_text(encoding='utf-8').splitlines()) == 1

    result = invoke('replay', '--changelog', changelog, record)
    assert result.exit_code == 0
    assert json.loads(result.output) == {'key': 'ABCD2345', 'version': 3, 'title': 'x'}


def test_replay_by_another_key(invoke, write_json, tmp_path):
    changelog = str(tmp_path / 'changelog.jsonl')
    record = write_json('record.json', {'key': 'ABCD2345', 'title': 'a'})
    changeset = write_json('changeset.json', [{'field': 'title', 'op': 'modify', 'value': 'x'}])
    invoke('apply', '-L', changelog, record, changeset)

    other = write_json('other.json', {'key': 'BCDE3456', 'title': 'b'})
    result = invoke('replay', '-L', changelog, '-k', 'ABCD2345', other)
    assert result.exit_code == 0
    assert json.loads(result.output) == {'key': 'BCDE3456', 'title': 'x'}


def test_replay_requires_an_existing_changelog(invoke, source, tmp_path):
    result = invoke('replay', '-L', str(tmp_path / 'missing.jsonl'), source)
    assert result.exit_code == 2
