"""
Authentication service: phone + PIN login and the persisted session.
"""
import logging
import secrets
import time
from typing import Optional, Tuple

from ..data.models import Employee, Session
from ..data.record_store import RecordStore
from ..utils.errors import EmployeeNotFoundError, InvalidCredentialError

logger = logging.getLogger(__name__)


def generate_token(employee_id: str) -> str:
    """Employee id, issuance time in epoch ms and a random suffix"""
    return f"{employee_id}-{int(time.time() * 1000)}-{secrets.token_hex(8)}"


class AuthService:
    """Validates credentials against stored employees"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def login(self, phone_number: str, pin: str) -> Session:
        """
        Log an employee in and persist the session.

        Raises:
            EmployeeNotFoundError: No employee with this phone number
            InvalidCredentialError: PIN does not match
        """
        employee = await self.store.find_employee_by_phone(phone_number)
        if employee is None:
            logger.info(f"Login failed: unknown phone {phone_number}")
            raise EmployeeNotFoundError(f"No employee registered for {phone_number}")
        if employee.pin != pin:
            logger.info(f"Login failed: wrong PIN for {employee.name}")
            raise InvalidCredentialError("Incorrect PIN")

        session = Session(token=generate_token(employee.id), employee_id=employee.id)
        await self.store.save_session(session.token, session.employee_id)
        logger.info(f"Logged in: {employee.name}")
        return session

    async def logout(self) -> None:
        await self.store.clear_session()
        logger.info("Logged out")

    async def restore_session(self) -> Optional[Tuple[Session, Employee]]:
        """
        Resume the persisted session on startup.

        A session pointing at an employee that no longer exists is discarded
        without raising.
        """
        session = await self.store.read_session()
        if session is None:
            return None
        employee = await self.store.get_employee(session.employee_id)
        if employee is None:
            logger.info(f"Discarding session for missing employee {session.employee_id}")
            await self.store.clear_session()
            return None
        logger.info(f"Session restored for {employee.name}")
        return session, employee

    async def current_employee(self) -> Optional[Employee]:
        restored = await self.restore_session()
        return restored[1] if restored else None
