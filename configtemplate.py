# Copy this file to config.py and fill it in. The simple-orm command reads
# it with --config, which defaults to the file config.py in the current
# directory. The file is run as a script, so plain Python works here. If it
# doesn't exist the defaults below are used.

# ----------------------- DATABASE ---------------------

# The credentials to log into your PostgreSQL database.
# Please keep this private.
psql_user = ''
psql_pass = ''
psql_host = 'localhost'
psql_db = ''

# How long, in seconds, a single statement may run before asyncpg gives up
# on it. None means no timeout.
command_timeout = 60

# ----------------------- MODELS ---------------------

# The modules defining your models. They're imported before any command
# runs so that every Model subclass in them gets registered.
# (e.g. ['myapp.models', 'myapp.accounts.models'])
models = []

# Whether "simple-orm create" should use CREATE TABLE IF NOT EXISTS.
# If False, creating a table that already exists is an error.
create_exist_ok = True
