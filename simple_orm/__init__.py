"""A small ORM for simple models

Describe a model once, with its columns and its primary key, and get the
CREATE TABLE, SELECT, INSERT, UPDATE and DELETE statements for it without
writing the SQL by hand. It is deliberately not a fully fledged ORM: there
are no joins, no relationships and no migrations. All values are passed as
bind parameters.
"""

from .errors import *
from .condition import *
from .column import *
from .model import *
from .mapper import *
from .statements import *
from .database import *
from .postgres import *

__version__ = '0.1.0'
__license__ = 'MIT'
