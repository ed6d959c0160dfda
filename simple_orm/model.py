import collections

from more_itertools import duplicates_everseen, one

from .column import Column, quote_identifier
from .errors import ConfigurationError, SchemaMismatch

__all__ = ['ModelSchema', 'Model', 'make_schema', 'schema_of', 'all_models']


def _check_identifier(name, what):
    if not isinstance(name, str):
        raise ConfigurationError(f'{what} {name!r} is not a string')
    try:
        quote_identifier(name)
    except ValueError as e:
        raise ConfigurationError(f'{what} {name!r} {e}') from None


class ModelSchema(collections.namedtuple('ModelSchema', 'table_name fields factory')):
    """The structural description of a model.

    Use make_schema to create one; it checks the invariants that
    everything else relies on.
    """
    __slots__ = ()

    @property
    def primary_key(self):
        return next(f for f in self.fields if f.primary_key)

    @property
    def column_names(self):
        return [f.name for f in self.fields]

    def get_field(self, name):
        name = getattr(name, 'name', name)
        for field in self.fields:
            if field.name == name:
                return field
        raise SchemaMismatch(name, self.table_name)

    def __repr__(self):
        return f'<ModelSchema table_name={self.table_name!r} columns={self.column_names}>'


def make_schema(table_name, fields, *, factory=dict):
    """Create a ModelSchema from a table name and a list of Columns.

    This is the explicit way of registering a model. Subclassing Model
    does the same thing at class creation.
    """
    fields = tuple(fields)
    if not fields:
        raise ConfigurationError(f'table {table_name!r} has no columns')

    _check_identifier(table_name, 'table name')

    for field in fields:
        if not isinstance(field, Column):
            raise ConfigurationError(f'expected a Column, got {field!r}')
        _check_identifier(field.name, 'column name')

    duplicates = list(duplicates_everseen(f.name for f in fields))
    if duplicates:
        raise ConfigurationError(f'duplicate columns in {table_name!r}: {", ".join(duplicates)}')

    one(
        (f for f in fields if f.primary_key),
        too_short=ConfigurationError(f'table {table_name!r} has no primary key'),
        too_long=ConfigurationError(f'table {table_name!r} has more than one primary key'),
    )

    return ModelSchema(table_name, fields, factory)


_models = []

class Model:
    """Declarative base for models.

    class User(Model, table_name='users'):
        id = Column(Text, primary_key=True)
        name = Column(Text)

    Subclasses of a model inherit its columns and get their own table.
    Values are checked against the column types on construction, so a
    bad value raises TypeMismatch here rather than at insert time.
    """

    def __init_subclass__(cls, *, table_name='', **kwargs):
        super().__init_subclass__(**kwargs)
        # Base classes first, so inherited columns keep their position and
        # a subclass can redefine one by reusing its attribute name.
        columns = {}
        for base in reversed(cls.__mro__):
            for attr, value in vars(base).items():
                if isinstance(value, Column):
                    columns[attr] = value
        cls.__schema__ = make_schema(table_name or cls.__name__.lower(), columns.values(), factory=cls)
        _models.append(cls)

    def __init__(self, **values):
        schema = self.__schema__
        for column in schema.fields:
            name = column.name
            if name in values:
                value = values.pop(name)
            elif column.default is not None:
                value = column.get_default()
            elif column.nullable:
                value = None
            else:
                raise TypeError(f'{type(self).__name__}() missing value for {name!r}')
            # Stored in the column's own representation (e.g. arrays as
            # lists) so instances compare equal to materialized rows.
            self.__dict__[name] = column.coerce(value)

        if values:
            unknown = ', '.join(map(repr, values))
            raise TypeError(f'{type(self).__name__}() got unexpected fields {unknown}')

    def _values(self):
        return tuple(getattr(self, name) for name in self.__schema__.column_names)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._values() == other._values()

    def __repr__(self):
        fields = ', '.join(
            f'{name}={value!r}' for name, value in zip(self.__schema__.column_names, self._values())
        )
        return f'{type(self).__name__}({fields})'


def schema_of(obj):
    """Return the ModelSchema for a schema, a Model subclass or a Model instance."""
    if isinstance(obj, ModelSchema):
        return obj

    schema = getattr(obj, '__schema__', None)
    if isinstance(schema, ModelSchema):
        return schema

    raise TypeError(f'{obj!r} is not a model or a schema')


def all_models():
    return list(_models)
