import functools
import json
import sys
from typing import Any, Callable, List, Optional

import click
import yaml

from recordsync import errors
from recordsync.engines import applying, diffing, equality, loggers
from recordsync.storage import changelogs
from recordsync.structs import changesets, configuration


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def engine_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to present the engine's errors as CLI errors, not tracebacks. """
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except errors.ChangesetError as e:
            raise click.ClickException(f"{e.__class__.__name__}: {e}") from e
    return wrapper


def load_document(path: str) -> Any:
    """ Load a record or a changeset from a JSON or YAML file (or stdin as ``-``). """
    with click.open_file(path, 'rt', encoding='utf-8') as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise click.BadParameter(f"{path}: {e}") from e


def dump_document(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def make_settings(
        *,
        atomic: Optional[bool] = None,
        changelog: Optional[str] = None,
) -> configuration.SyncSettings:
    settings = configuration.SyncSettings()
    if atomic is not None:
        settings.applying.atomic = atomic
    if changelog is not None:
        settings.persistence.changelog_storage = changelogs.FileChangelogStorage(changelog)
    return settings


@click.version_option(prog_name='recordsync')
@click.group(name='recordsync', context_settings=dict(
    auto_envvar_prefix='RECORDSYNC',
))
def main() -> None:
    pass


@main.command()
@logging_options
@click.option('-i', '--ignore', 'ignore_fields', multiple=True)
@click.argument('source', type=click.Path(allow_dash=True))
@click.argument('target', type=click.Path(allow_dash=True))
@engine_errors
def differs(
        source: str,
        target: str,
        ignore_fields: List[str],
) -> None:
    """ Check if two records differ (exit code 1) or are equivalent (exit code 0). """
    result = equality.differs(load_document(source), load_document(target), ignore_fields)
    click.echo('true' if result else 'false')
    sys.exit(1 if result else 0)


@main.command()
@logging_options
@click.option('-i', '--ignore', 'ignore_fields', multiple=True)
@click.argument('source', type=click.Path(allow_dash=True))
@click.argument('target', type=click.Path(allow_dash=True))
@engine_errors
def diff(
        source: str,
        target: str,
        ignore_fields: List[str],
) -> None:
    """ Print the changeset from the source record to the target record. """
    changeset = diffing.diff(load_document(source), load_document(target), ignore_fields)
    dump_document(changeset.as_raw())


@main.command()
@logging_options
@click.option('--atomic/--no-atomic', default=None)
@click.option('-L', '--changelog', type=click.Path(dir_okay=False))
@click.argument('record', type=click.Path(allow_dash=True))
@click.argument('changeset', type=click.Path(allow_dash=True))
@engine_errors
def apply(
        record: str,
        changeset: str,
        atomic: Optional[bool],
        changelog: Optional[str],
) -> None:
    """ Apply the changeset to the record and print the resulting record. """
    settings = make_settings(atomic=atomic, changelog=changelog)
    data = load_document(record)
    changes = changesets.Changeset.from_raw(load_document(changeset) or [])
    applying.apply(data, changes, settings=settings, persist=changelog is not None)
    dump_document(data)


@main.command()
@logging_options
@click.option('-k', '--key', type=str, default=None)
@click.option('-L', '--changelog', type=click.Path(dir_okay=False, exists=True), required=True)
@click.argument('record', type=click.Path(allow_dash=True))
@engine_errors
def replay(
        record: str,
        key: Optional[str],
        changelog: str,
) -> None:
    """ Apply all the logged changesets of the record and print the resulting record. """
    settings = make_settings(changelog=changelog)
    data = load_document(record)
    applying.replay(data, key=key, settings=settings)
    dump_document(data)
