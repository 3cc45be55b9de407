import asyncio

import pytest

from punchclock.data.database import TABLE_NAME
from punchclock.utils.errors import StorageError


def test_get_missing_key_returns_none(mapping):
    assert asyncio.run(mapping.get('nothing')) is None


def test_set_get_overwrite(mapping):
    async def scenario():
        await mapping.set('employees', '[]')
        await mapping.set('employees', '[{"id": "1"}]')
        return await mapping.get('employees')

    assert asyncio.run(scenario()) == '[{"id": "1"}]'


def test_remove_is_idempotent(mapping):
    async def scenario():
        await mapping.set('authToken', 'abc')
        await mapping.remove('authToken')
        await mapping.remove('authToken')
        return await mapping.get('authToken')

    assert asyncio.run(scenario()) is None


def test_clear_drops_every_key(mapping):
    async def scenario():
        await mapping.set('a', '1')
        await mapping.set('b', '2')
        await mapping.clear()
        return await mapping.get('a'), await mapping.get('b')

    assert asyncio.run(scenario()) == (None, None)


def test_database_failure_surfaces_as_storage_error(mapping):
    mapping.db.execute_sql(f'DROP TABLE {TABLE_NAME}')

    with pytest.raises(StorageError):
        asyncio.run(mapping.get('employees'))
    with pytest.raises(StorageError):
        asyncio.run(mapping.set('employees', '[]'))
