import json
import logging

import asyncpg

from .database import Executor
from .errors import ExecutionError
from .statements import POSTGRES, build_create_table

__all__ = ['create_pool', 'PostgresExecutor']

log = logging.getLogger(__name__)

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

_FAILED_OPERATIONS = {
    'INSERT': 'CannotInsertInTable',
    'UPDATE': 'CannotUpdateInTable',
    'DELETE': 'CannotDeleteFromTable',
}

def _failed_operation(query):
    keyword, _, _ = query.lstrip().partition(' ')
    return _FAILED_OPERATIONS.get(keyword.upper(), 'InvalidQuery')


async def _set_codec(conn):
    await conn.set_type_codec(
        'jsonb',
        schema='pg_catalog',
        encoder=json.dumps,
        decoder=json.loads,
        format='text'
    )


async def create_pool(dsn, *, init=None, **kwargs):
    if init is None:
        async def new_init(conn):
            await _set_codec(conn)
    else:
        async def new_init(conn):
            await _set_codec(conn)
            await init(conn)

    return await asyncpg.create_pool(dsn, init=new_init, **kwargs)


class PostgresExecutor(Executor):
    dialect = POSTGRES

    def __init__(self, pool):
        self.pool = pool

    @classmethod
    async def connect(cls, dsn, **kwargs):
        try:
            pool = await create_pool(dsn, **kwargs)
        except _DRIVER_ERRORS as e:
            raise ExecutionError('CannotConnectToDatabase', str(e)) from e
        return cls(pool)

    async def close(self):
        await self.pool.close()

    async def execute(self, query, params=()):
        try:
            async with self.pool.acquire() as conn:
                records = await conn.fetch(query, *params)
        except _DRIVER_ERRORS as e:
            raise ExecutionError(_failed_operation(query), str(e), query=query) from e
        return [dict(r) for r in records]

    async def initialize(self, schema, *, exist_ok=True):
        query = build_create_table(schema, exist_ok=exist_ok)
        try:
            async with self.pool.acquire() as conn:
                await conn.execute(query)
        except _DRIVER_ERRORS as e:
            raise ExecutionError('CannotCreateTable', str(e), query=query) from e
        log.info('created table %s', schema.table_name)
