import collections
import enum

__all__ = ['Operator', 'Condition']


class Operator(enum.Enum):
    eq = '='
    ne = '<>'
    lt = '<'
    le = '<='
    gt = '>'
    ge = '>='
    like = 'LIKE'

    @property
    def sql(self):
        return self.value

    @classmethod
    def from_symbol(cls, symbol):
        if isinstance(symbol, cls):
            return symbol

        try:
            return _SYMBOLS[str(symbol).strip().upper()]
        except KeyError:
            raise ValueError(f'unknown condition operator: {symbol!r}') from None

_SYMBOLS = {op.value: op for op in Operator}
_SYMBOLS.update({'==': Operator.eq, '!=': Operator.ne})
_SYMBOLS.update((op.name.upper(), op) for op in Operator)


class Condition(collections.namedtuple('Condition', 'column operator value')):
    """A single ``column <operator> value`` filter.

    Nothing is checked here. The column may be a name or a Column, and is
    looked up against the schema only when a statement is built, so
    conditions can be made before any model exists.
    """
    __slots__ = ()

    @property
    def column_name(self):
        return getattr(self.column, 'name', self.column)

    def __repr__(self):
        op = getattr(self.operator, 'name', self.operator)
        return f'Condition({self.column_name!r}, {op}, {self.value!r})'
