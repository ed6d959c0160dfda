__all__ = [
    'ORMError', 'ConfigurationError', 'SchemaMismatch', 'TypeMismatch',
    'MaterializationError', 'MissingColumn', 'ExecutionError',
]


class ORMError(Exception):
    """Base exception for everything raised by simple_orm."""


class ConfigurationError(ORMError):
    """A model, column or schema was declared incorrectly."""


class SchemaMismatch(ORMError):
    """A condition or field reference names a column the schema doesn't have."""

    def __init__(self, column, table=None, message=None):
        self.column = column
        self.table = table
        if message is None:
            where = f' in table {table!r}' if table else ''
            message = f'no column named {column!r}{where}'
        super().__init__(message)


class TypeMismatch(ORMError):
    """A value couldn't be coerced to the type of the column it is used with."""

    def __init__(self, column, value, reason=''):
        self.column = column
        self.value = value
        message = f'bad value {value!r} for column {column!r}'
        if reason:
            message = f'{message}: {reason}'
        super().__init__(message)


class MaterializationError(ORMError):
    pass


class MissingColumn(MaterializationError):
    def __init__(self, column, table=None):
        self.column = column
        self.table = table
        where = f' for table {table!r}' if table else ''
        super().__init__(f'row is missing column {column!r}{where}')


class ExecutionError(ORMError):
    """The executor failed to run a statement.

    ``operation`` is a short name for what was being attempted
    (e.g. ``'CannotCreateTable'``) and ``details`` is the driver's message.
    The driver exception, if any, is chained as ``__cause__``.
    """

    def __init__(self, operation, details='', *, query=None):
        self.operation = operation
        self.details = details
        self.query = query
        super().__init__(f'{operation}: {details}' if details else operation)
