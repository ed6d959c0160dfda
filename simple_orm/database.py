import logging

from .errors import ExecutionError
from .mapper import materialize_many
from .model import schema_of
from .statements import (
    QMARK, build_create_table, build_delete, build_insert, build_select, build_update,
)

__all__ = ['Executor', 'Database']

log = logging.getLogger(__name__)


class Executor:
    """The thing that actually talks to a database.

    Subclasses must implement execute, which takes the SQL text and a
    sequence of parameters and returns the resulting rows as mappings of
    column name to value (an empty list for statements that return no
    rows). Failures should be raised as ExecutionError.
    """
    dialect = QMARK

    async def execute(self, query, params=()):
        raise NotImplementedError

    async def initialize(self, schema, *, exist_ok=True):
        await self.execute(build_create_table(schema, exist_ok=exist_ok), ())


class Database:
    """High-level CRUD operations on top of an Executor.

    Models can be passed as a Model subclass or a ModelSchema. For
    insert and update, instances that aren't Model instances (e.g. plain
    dicts) need the schema passed explicitly.
    """

    def __init__(self, executor):
        self.executor = executor

    @property
    def dialect(self):
        return self.executor.dialect

    async def _run(self, statement):
        log.debug('executing %r with %r', statement.sql, statement.params)
        try:
            return await self.executor.execute(statement.sql, statement.params)
        except ExecutionError:
            log.error('failed to execute %r', statement.sql)
            raise

    async def initialize(self, model, *, exist_ok=True):
        schema = schema_of(model)
        log.info('initializing table %s', schema.table_name)
        await self.executor.initialize(schema, exist_ok=exist_ok)

    async def get(self, model, conditions=()):
        schema = schema_of(model)
        rows = await self._run(build_select(schema, conditions, dialect=self.dialect))
        return materialize_many(schema, rows)

    async def first(self, model, conditions=()):
        results = await self.get(model, conditions)
        return results[0] if results else None

    async def insert(self, instance, *, schema=None):
        schema = schema_of(schema or instance)
        await self._run(build_insert(schema, instance, dialect=self.dialect))

    async def update(self, instance, conditions=(), *, schema=None):
        schema = schema_of(schema or instance)
        await self._run(build_update(schema, instance, conditions, dialect=self.dialect))

    async def delete(self, model, conditions=()):
        schema = schema_of(model)
        await self._run(build_delete(schema, conditions, dialect=self.dialect))
