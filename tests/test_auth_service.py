import asyncio

import pytest

from punchclock.services.auth_service import AuthService, generate_token
from punchclock.utils.errors import EmployeeNotFoundError, InvalidCredentialError


@pytest.fixture
def auth(store):
    return AuthService(store)


def test_login_success_saves_session(auth, store, employee):
    session = asyncio.run(auth.login('9876543210', '1234'))

    assert session.employee_id == 'emp-1'
    assert session.token.startswith('emp-1-')
    assert asyncio.run(store.read_session()) == session


def test_login_wrong_pin(auth, store, employee):
    with pytest.raises(InvalidCredentialError):
        asyncio.run(auth.login('9876543210', '0000'))
    assert asyncio.run(store.read_session()) is None


def test_login_unknown_phone(auth, store, employee):
    with pytest.raises(EmployeeNotFoundError):
        asyncio.run(auth.login('0000000000', '1234'))
    assert asyncio.run(store.read_session()) is None


def test_login_compares_exactly(auth, employee):
    with pytest.raises(EmployeeNotFoundError):
        asyncio.run(auth.login(' 9876543210', '1234'))
    with pytest.raises(InvalidCredentialError):
        asyncio.run(auth.login('9876543210', '1234 '))


def test_logout_clears_session(auth, store, employee):
    asyncio.run(auth.login('9876543210', '1234'))
    asyncio.run(auth.logout())
    assert asyncio.run(store.read_session()) is None


def test_logout_without_session(auth, store):
    asyncio.run(auth.logout())
    assert asyncio.run(store.read_session()) is None


def test_restore_session(auth, employee):
    session = asyncio.run(auth.login('9876543210', '1234'))

    restored_session, restored_employee = asyncio.run(auth.restore_session())
    assert restored_session == session
    assert restored_employee == employee
    assert asyncio.run(auth.current_employee()) == employee


def test_restore_session_discards_missing_employee(auth, store):
    asyncio.run(store.save_session('ghost-1-123', 'ghost'))

    assert asyncio.run(auth.restore_session()) is None
    assert asyncio.run(store.read_session()) is None


def test_restore_without_session(auth):
    assert asyncio.run(auth.restore_session()) is None
    assert asyncio.run(auth.current_employee()) is None


def test_tokens_are_unique():
    assert generate_token('emp-1') != generate_token('emp-1')
