import pytest

from simple_orm import (
    Column, Condition, Database, ExecutionError, Executor, Integer, MissingColumn,
    Model, Operator, SchemaMismatch, Text,
)


async def test_initialize(executor, user_model):
    await Database(executor).initialize(user_model, exist_ok=False)
    assert executor.initialized == [('users', False)]
    query, params = executor.calls[0]
    assert query.startswith('CREATE TABLE users (')
    assert params == ()


async def test_get(make_executor, user_model, bob):
    executor = make_executor(rows=[
        {'id': 'X1', 'name': 'Bob', 'age': 30, 'activated': True},
    ])
    users = await Database(executor).get(user_model, [Condition('id', Operator.eq, 'X1')])
    assert users == [bob]
    assert executor.calls == [('SELECT id,name,age,activated FROM users WHERE id = ?', ('X1',))]


async def test_get_bad_rows(make_executor, user_model):
    executor = make_executor(rows=[{'id': 'X1', 'name': 'Bob'}])
    with pytest.raises(MissingColumn):
        await Database(executor).get(user_model)


async def test_get_mixed_case_columns(make_executor):
    class Person(Model, table_name='people'):
        id = Column(Integer, primary_key=True)
        firstName = Column(Text)

    # PostgreSQL keys rows by the quoted, case-preserved name.
    executor = make_executor(rows=[{'id': 1, 'firstName': 'Ada'}])
    people = await Database(executor).get(Person, [Person.firstName == 'Ada'])
    assert people == [Person(id=1, firstName='Ada')]
    assert executor.calls == [('SELECT id,"firstName" FROM people WHERE "firstName" = ?', ('Ada',))]


async def test_first(make_executor, user_model):
    assert await Database(make_executor()).first(user_model) is None


async def test_insert(executor, bob):
    await Database(executor).insert(bob)
    assert executor.calls == [
        ('INSERT INTO users (id,name,age,activated) VALUES (?,?,?,?)', ('X1', 'Bob', 30, True)),
    ]


async def test_insert_mapping_needs_schema(executor, user_schema):
    row = {'id': 'X9', 'name': 'Di', 'age': 41, 'activated': False}
    with pytest.raises(TypeError):
        await Database(executor).insert(row)

    await Database(executor).insert(row, schema=user_schema)
    assert executor.calls[0][1] == ('X9', 'Di', 41, False)


async def test_update(executor, user_model, bob):
    await Database(executor).update(bob, [user_model.id == 'X1'])
    assert executor.calls == [
        ('UPDATE users SET name = ?,age = ?,activated = ? WHERE id = ?', ('Bob', 30, True, 'X1')),
    ]


async def test_delete(executor, user_model):
    await Database(executor).delete(user_model, [Condition('age', Operator.lt, 18)])
    assert executor.calls == [('DELETE FROM users WHERE age < ?', (18,))]


async def test_nothing_executed_on_bad_condition(executor, user_model):
    with pytest.raises(SchemaMismatch):
        await Database(executor).delete(user_model, [Condition('email', Operator.eq, 'x')])
    assert executor.calls == []


async def test_execution_errors_propagate(user_model):
    class FailingExecutor(Executor):
        async def execute(self, query, params=()):
            raise ExecutionError('InvalidQuery', 'relation "users" does not exist', query=query)

    with pytest.raises(ExecutionError) as info:
        await Database(FailingExecutor()).get(user_model)
    assert info.value.operation == 'InvalidQuery'
    assert info.value.query.startswith('SELECT')


async def test_base_executor_is_abstract():
    with pytest.raises(NotImplementedError):
        await Executor().execute('SELECT 1')
