import json
import logging

import click.testing
import pytest

from recordsync.cli import main


@pytest.fixture(autouse=True)
def _restore_root_logger():
    # The commands configure the root logger; the handlers outlive the runner's streams.
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        yield
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    def _invoke(*args, **kwargs):
        return runner.invoke(main, list(args), **kwargs)
    return _invoke


@pytest.fixture()
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding='utf-8')
        return str(path)
    return _write
