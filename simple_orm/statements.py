"""Turns a ModelSchema into SQL.

Everything here is pure. Literal values never end up in the SQL text,
they're always returned separately as bind parameters, in the order of
the placeholders that reference them.
"""

import collections
import itertools

from .condition import Operator
from .errors import ConfigurationError, TypeMismatch
from .column import String, quote_identifier
from .mapper import extract_values

__all__ = [
    'Statement', 'Dialect', 'QMARK', 'POSTGRES',
    'build_create_table', 'build_select', 'build_insert', 'build_update', 'build_delete',
]


class Statement(collections.namedtuple('Statement', 'sql params')):
    __slots__ = ()

    def __str__(self):
        return self.sql


class Dialect:
    """Placeholder style of a backend."""

    def __init__(self, name, placeholder):
        self.name = name
        self._placeholder = placeholder

    def __repr__(self):
        return f'<Dialect {self.name}>'

    def placeholder(self, index):
        """Return the placeholder for the index-th parameter (1-based)."""
        return self._placeholder.format(index=index)

QMARK = Dialect('qmark', '?')
POSTGRES = Dialect('postgres', '${index}')


def _where(schema, conditions, dialect, counter):
    # Returns (clause, params). Raises before anything is returned, so a
    # bad condition never leaves half a statement behind.
    clauses = []
    params = []
    for condition in conditions:
        column, operator, value = condition
        field = schema.get_field(column)
        operator = Operator.from_symbol(operator)
        name = quote_identifier(field.name)

        if value is None:
            if operator is Operator.eq:
                clauses.append(f'{name} IS NULL')
                continue
            if operator is Operator.ne:
                clauses.append(f'{name} IS NOT NULL')
                continue
            raise TypeMismatch(field.name, value, f'cannot compare NULL with {operator.sql}')

        if operator is Operator.like:
            # A pattern isn't a column value, so the length limit of
            # VARCHAR(n) doesn't apply to it.
            if not isinstance(field.type, String):
                raise TypeMismatch(field.name, value, 'LIKE only works on string columns')
            if not isinstance(value, str):
                raise TypeMismatch(field.name, value, 'LIKE needs a str pattern')
            params.append(value)
        else:
            params.append(field.coerce(value))
        clauses.append(f'{name} {operator.sql} {dialect.placeholder(next(counter))}')

    if not clauses:
        return '', params
    return ' WHERE ' + ' AND '.join(clauses), params


def _column_list(schema):
    return ','.join(quote_identifier(name) for name in schema.column_names)


def build_create_table(schema, *, exist_ok=True):
    """Return the CREATE TABLE statement for a schema"""
    builder = ['CREATE TABLE']
    build = builder.append

    if exist_ok:
        build('IF NOT EXISTS')
    build(quote_identifier(schema.table_name))

    column_statements = ',\n'.join(c.create_sql() for c in schema.fields)
    build(f'(\n{column_statements}\n);')

    return ' '.join(builder)


def build_select(schema, conditions=(), *, dialect=QMARK):
    """SELECT every column of the table.

    With no conditions there's no WHERE clause at all, which means every
    row in the table is returned.
    """
    counter = itertools.count(1)
    where, params = _where(schema, conditions, dialect, counter)
    columns = _column_list(schema)
    table = quote_identifier(schema.table_name)
    return Statement(f'SELECT {columns} FROM {table}{where}', tuple(params))


def build_insert(schema, instance, *, dialect=QMARK):
    values = extract_values(instance, schema)
    table = quote_identifier(schema.table_name)
    columns = _column_list(schema)
    placeholders = ','.join(dialect.placeholder(i) for i in range(1, len(values) + 1))
    sql = f'INSERT INTO {table} ({columns}) VALUES ({placeholders})'
    return Statement(sql, tuple(values))


def build_update(schema, instance, conditions=(), *, dialect=QMARK):
    """UPDATE every column except the primary key.

    The primary key is the row's identity so it's never part of the SET
    list. Use the conditions to pick the row(s) instead. Like
    build_delete, no conditions means every row is updated.
    """
    values = extract_values(instance, schema)
    pairs = [(f, v) for f, v in zip(schema.fields, values) if not f.primary_key]
    if not pairs:
        raise ConfigurationError(f'table {schema.table_name!r} has no columns to update')

    counter = itertools.count(1)
    assignments = ','.join(f'{quote_identifier(f.name)} = {dialect.placeholder(next(counter))}' for f, _ in pairs)
    where, params = _where(schema, conditions, dialect, counter)
    table = quote_identifier(schema.table_name)
    sql = f'UPDATE {table} SET {assignments}{where}'
    return Statement(sql, tuple(v for _, v in pairs) + tuple(params))


def build_delete(schema, conditions=(), *, dialect=QMARK):
    """DELETE the rows matching all the conditions.

    An empty list of conditions is allowed and deletes everything in the
    table. Callers wanting to guard against that have to check for
    themselves.
    """
    counter = itertools.count(1)
    where, params = _where(schema, conditions, dialect, counter)
    table = quote_identifier(schema.table_name)
    return Statement(f'DELETE FROM {table}{where}', tuple(params))
