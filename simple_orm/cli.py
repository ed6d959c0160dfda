import asyncio
import contextlib
import datetime
import importlib
import logging
import os
import runpy
import urllib.parse

import click

from .database import Database
from .errors import ORMError
from .model import all_models
from .postgres import PostgresExecutor
from .statements import build_create_table

# Used for anything missing from the user's config file.
_DEFAULT_CONFIG = {
    'psql_user': '',
    'psql_pass': '',
    'psql_host': 'localhost',
    'psql_db': '',
    'command_timeout': 60,
    'models': [],
    'create_exist_ok': True,
}


@contextlib.contextmanager
def log(stream=False):
    os.makedirs('logs', exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    handler = logging.FileHandler(
        filename=f'logs/simple-orm-{datetime.datetime.now():%Y%m%d-%H%M%S}.log',
        encoding='utf-8',
        mode='w'
    )
    fmt = logging.Formatter('[{asctime}] ({levelname:<7}) {name}: {message}', '%Y-%m-%d %H:%M:%S', style='{')
    handler.setFormatter(fmt)
    handlers = [handler]

    if stream:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(fmt)
        handlers.append(stream_handler)

    for hdlr in handlers:
        root.addHandler(hdlr)

    try:
        yield
    finally:
        for hdlr in handlers:
            hdlr.close()
            root.removeHandler(hdlr)


def load_config(path):
    config = dict(_DEFAULT_CONFIG)
    if os.path.exists(path):
        namespace = runpy.run_path(path)
        config.update((k, v) for k, v in namespace.items() if k in _DEFAULT_CONFIG)
    return config


def _dsn(config):
    # Credentials may contain @, : or /, which would break the URL.
    user = urllib.parse.quote(config["psql_user"], safe='')
    password = urllib.parse.quote(config["psql_pass"], safe='')
    return (
        f'postgresql://{user}:{password}'
        f'@{config["psql_host"]}/{config["psql_db"]}'
    )


@click.group()
@click.option('--config', 'config_path', default='config.py', metavar='[path]',
              help='Config file to use, defaults to config.py')
@click.option('--log-stream', is_flag=True, help='Adds a stderr stream-handler for logging')
@click.pass_context
def main(ctx, config_path, log_stream):
    ctx.obj = config = load_config(config_path)
    ctx.with_resource(log(log_stream))

    for module in config['models']:
        try:
            importlib.import_module(module)
        except ImportError as e:
            raise click.ClickException(f'Could not load {module}: {e}') from e


@main.command()
@click.option('--exist-ok/--no-exist-ok', default=None,
              help='Emit CREATE TABLE IF NOT EXISTS, defaults to the config')
@click.pass_obj
def show(config, exist_ok):
    """Print the CREATE TABLE statement of every model"""
    if exist_ok is None:
        exist_ok = config['create_exist_ok']

    for model in all_models():
        click.echo(build_create_table(model.__schema__, exist_ok=exist_ok))


async def _create(config, exist_ok):
    executor = await PostgresExecutor.connect(_dsn(config), command_timeout=config['command_timeout'])
    try:
        db = Database(executor)
        for model in all_models():
            await db.initialize(model, exist_ok=exist_ok)
            click.echo(f'created {model.__schema__.table_name}')
    finally:
        await executor.close()


@main.command()
@click.option('--exist-ok/--no-exist-ok', default=None,
              help='Use CREATE TABLE IF NOT EXISTS, defaults to the config')
@click.pass_obj
def create(config, exist_ok):
    """Create the tables of every model"""
    if exist_ok is None:
        exist_ok = config['create_exist_ok']

    try:
        asyncio.run(_create(config, exist_ok))
    except ORMError as e:
        raise click.ClickException(str(e)) from e
    click.echo('All tables created! <3')


if __name__ == '__main__':
    main()
