import collections.abc

from .errors import MissingColumn, SchemaMismatch

__all__ = ['extract_values', 'materialize', 'materialize_many']

_missing = object()


def _get_value(instance, name):
    if isinstance(instance, collections.abc.Mapping):
        return instance.get(name, _missing)
    return getattr(instance, name, _missing)


def extract_values(instance, schema):
    """Return the values of instance in the order of the schema's fields.

    instance can be any object with an attribute per field, or a mapping
    with a key per field. Every value is checked against its column type.
    """
    values = []
    for field in schema.fields:
        value = _get_value(instance, field.name)
        if value is _missing:
            raise SchemaMismatch(
                field.name, schema.table_name,
                f'{type(instance).__name__} has no value for column {field.name!r}',
            )
        values.append(field.coerce(value))
    return values


def materialize(schema, row):
    """Build a new instance from a row mapping column names to raw values.

    Either every field is converted and a fully populated instance is
    returned, or an error is raised and nothing is built.
    """
    values = {}
    for field in schema.fields:
        try:
            raw = row[field.name]
        except KeyError:
            raise MissingColumn(field.name, schema.table_name) from None
        values[field.name] = field.coerce(raw)

    return schema.factory(**values)


def materialize_many(schema, rows):
    return [materialize(schema, row) for row in rows]
