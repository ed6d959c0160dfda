import datetime
import decimal
import inspect as _inspect
import re

from .condition import Condition, Operator
from .errors import ConfigurationError, TypeMismatch

__all__ = [
    'Type', 'Binary', 'Boolean', 'Date', 'Real', 'Double', 'Integer',
    'BigInteger', 'BigInt', 'SmallInteger', 'SmallInt', 'Numeric', 'String',
    'Text', 'Timestamp', 'Interval', 'JSONB', 'Array', 'Column',
    'quote_identifier',
]


_PLAIN_IDENTIFIER = re.compile(r'[a-z_][a-z0-9_]*')

# Emitted quoted. Anything else that's a plain lowercase identifier is
# emitted as is, because that's what an unquoted name folds to anyway.
RESERVED_WORDS = frozenset('''
    ALL ALTER AND ANY ARRAY AS ASC AUTHORIZATION BETWEEN BOTH CASE CAST CHECK
    COLLATE COLUMN CONSTRAINT CREATE CROSS CURRENT_DATE CURRENT_TIME
    CURRENT_TIMESTAMP CURRENT_USER DEFAULT DEFERRABLE DELETE DESC DISTINCT DO
    DROP ELSE END EXCEPT EXISTS FALSE FETCH FOR FOREIGN FROM FULL GRANT GROUP
    HAVING IN INITIALLY INNER INSERT INTERSECT INTO IS JOIN LEADING LEFT LIKE
    LIMIT LOCALTIME LOCALTIMESTAMP NATURAL NOT NULL OFFSET ON ONLY OR ORDER
    OUTER PRIMARY REFERENCES RETURNING RIGHT SELECT SESSION_USER SET SOME
    SYMMETRIC TABLE THEN TO TRAILING TRUE UNION UNIQUE UPDATE USER USING VALUES
    WHEN WHERE WINDOW WITH
'''.split())


def quote_identifier(name):
    """Return name as it should appear in SQL.

    Lowercase names that aren't reserved words are left alone. Everything
    else is double-quoted so the backend keeps its exact spelling.
    Raises ValueError for names that can't be quoted at all.
    """
    if not name:
        raise ValueError('is empty')
    if '\x00' in name:
        raise ValueError('contains a NUL character')
    if _PLAIN_IDENTIFIER.fullmatch(name) and name.upper() not in RESERVED_WORDS:
        return name
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def _type_name(value):
    return type(value).__name__


class Type:
    python_type = object

    def __init_subclass__(cls, *, sql=None, python_type=None, **kwargs):
        super().__init_subclass__(**kwargs)
        if sql is not None:
            cls.sql = sql
        if python_type is not None:
            cls.python_type = python_type

    def __repr__(self):
        return f'<{self.__class__.__name__} sql={self.sql!r}>'

    def accepts(self, value):
        return isinstance(value, self.python_type)

    def convert(self, value):
        return value

    def coerce(self, value):
        """Return the Python representation of value for this type.

        Raises TypeError if value is of the wrong kind entirely, or
        ValueError if it's the right kind but out of range.
        """
        if not self.accepts(value):
            expected = getattr(self.python_type, '__name__', None) or ' or '.join(
                t.__name__ for t in self.python_type
            )
            raise TypeError(f'expected {expected}, got {_type_name(value)}')
        return self.convert(value)


class Boolean(Type, sql='BOOLEAN', python_type=bool): pass

class Binary(Type, sql='BYTEA', python_type=(bytes, bytearray, memoryview)):
    def convert(self, value):
        return bytes(value)

class Date(Type, sql='DATE', python_type=datetime.date):
    def accepts(self, value):
        # datetime is a subclass of date, but it's not a date as far as
        # the database is concerned.
        return super().accepts(value) and not isinstance(value, datetime.datetime)


class _Number(Type, python_type=(int, float)):
    def accepts(self, value):
        return super().accepts(value) and not isinstance(value, bool)

class Real(_Number, sql='REAL'):
    def convert(self, value):
        return float(value)

class Double(Real, sql='DOUBLE PRECISION'): pass


class _IntegerBase(_Number, python_type=int):
    bits = 32

    def convert(self, value):
        limit = 2 ** (self.bits - 1)
        if not -limit <= value < limit:
            raise ValueError(f'{value} does not fit in {self.sql}')
        return value

class Integer(_IntegerBase, sql='INTEGER'): pass
class BigInteger(_IntegerBase, sql='BIGINT'): bits = 64
BigInt = BigInteger
class SmallInteger(_IntegerBase, sql='SMALLINT'): bits = 16
SmallInt = SmallInteger


class Numeric(_Number, python_type=(decimal.Decimal, int)):
    def __init__(self, *, precision=None, scale=0):
        if precision is not None:
            if not 0 <= precision <= 1000:
                raise ConfigurationError('precision must be 0 <= precision <= 1000')

        self.precision = precision
        self.scale = scale

    @property
    def sql(self):
        if self.precision is None:
            return 'NUMERIC'
        return f'NUMERIC({self.precision}, {self.scale})'

    def convert(self, value):
        return decimal.Decimal(value)


class Timestamp(Type, python_type=datetime.datetime):
    def __init__(self, *, timezone=False):
        self.timezone = timezone

    @property
    def sql(self):
        if self.timezone:
            return 'TIMESTAMP WITH TIME ZONE'
        return 'TIMESTAMP'

class Interval(Type, python_type=datetime.timedelta):
    def __init__(self, *, field=None):
        self.field = field

    @property
    def sql(self):
        if self.field:
            return 'INTERVAL ' + self.field
        return 'INTERVAL'


class String(Type, python_type=str):
    def __init__(self, *, length=None, fixed=False):
        self.length = length
        self.fixed = fixed

        if fixed and length is None:
            raise ConfigurationError('Cannot have fixed string with no length')

    @property
    def sql(self):
        if self.length is None:
            return 'TEXT'
        if self.fixed:
            return f'CHAR({self.length})'
        return f'VARCHAR({self.length})'

    def convert(self, value):
        if self.length is not None and len(value) > self.length:
            raise ValueError(f'longer than {self.length} characters')
        return value

class Text(String, sql='TEXT'):
    def __init__(self):
        super().__init__()

class JSONB(Type, sql='JSONB', python_type=(dict, list)): pass


def _check_type(type):
    if _inspect.isclass(type):
        type = type()

    if not isinstance(type, Type):
        raise ConfigurationError('type should be derived from Type')

    return type

class Array(Type, python_type=(list, tuple)):
    def __init__(self, type):
        self.item_type = _check_type(type)

    @property
    def sql(self):
        return f'{self.item_type.sql}[]'

    def convert(self, value):
        return [self.item_type.coerce(v) for v in value]


class Column:
    __slots__ = ('type', 'primary_key', 'nullable', 'default', 'unique', 'name', 'model')

    def __init__(self, type, *, primary_key=False, nullable=False, unique=False,
                 default=None, name=None):
        if primary_key and nullable:
            raise ConfigurationError('a primary key cannot be nullable')
        if primary_key and unique:
            raise ConfigurationError('a primary key is already unique')

        self.type = _check_type(type)
        self.nullable = nullable
        self.unique = unique
        self.primary_key = primary_key
        self.default = default
        self.name = name
        self.model = None   # Set via descriptor protocol.

    def __set_name__(self, owner, name):
        if self.name is None:
            self.name = name
        self.model = owner

    def __get__(self, instance, owner):
        if instance is None:
            return self
        # Values live in the instance __dict__, so we only get here when the
        # value was never set.
        raise AttributeError(f'{owner.__name__!r} object has no value for {self.name!r}')

    def __repr__(self):
        return f'<Column name={self.name!r} type={self.type!r} primary_key={self.primary_key}>'

    # Comparisons build conditions, e.g. User.age >= 18

    __hash__ = object.__hash__

    def __eq__(self, value):
        return Condition(self, Operator.eq, value)

    def __ne__(self, value):
        return Condition(self, Operator.ne, value)

    def __lt__(self, value):
        return Condition(self, Operator.lt, value)

    def __le__(self, value):
        return Condition(self, Operator.le, value)

    def __gt__(self, value):
        return Condition(self, Operator.gt, value)

    def __ge__(self, value):
        return Condition(self, Operator.ge, value)

    def like(self, pattern):
        return Condition(self, Operator.like, pattern)

    def get_default(self):
        default = self.default
        if callable(default):
            return default()
        return default

    def coerce(self, value):
        """Convert value to this column's type, raising TypeMismatch if it can't."""
        if value is None:
            if self.nullable:
                return None
            raise TypeMismatch(self.name, value, 'column is not nullable')

        try:
            return self.type.coerce(value)
        except (TypeError, ValueError) as e:
            raise TypeMismatch(self.name, value, str(e)) from e

    def create_sql(self):
        if self.name is None:
            raise ConfigurationError('Column has no name')

        builder = [quote_identifier(self.name), self.type.sql]
        build = builder.append

        if self.unique:
            build('UNIQUE')
        elif self.primary_key:
            build('PRIMARY KEY')

        nullable_string = 'NULL'
        if not self.nullable:
            nullable_string = 'NOT NULL'
        build(nullable_string)

        return ' '.join(builder)
