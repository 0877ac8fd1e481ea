"""
Employee record store.

Keyed access to the ``employees`` table. Each call commits on its own;
failures propagate as asyncpg exceptions.
"""

import logging
from decimal import Decimal
from typing import Optional

from employee_service.database import Database
from employee_service.models import Employee, EmployeeFields

logger = logging.getLogger(__name__)


EMPLOYEE_COLUMNS = "id, name, address, extension, professional_email, department, salary"


def _salary_param(salary: Optional[float]) -> Optional[Decimal]:
    return Decimal(str(salary)) if salary is not None else None


class EmployeeRepository:
    """Find/add/update/remove-by-id operations over the employees table."""

    def __init__(self, db: Database):
        self.db = db

    async def find_by_id(self, employee_id: int) -> Optional[Employee]:
        """
        Look up an employee by primary key.

        Returns:
            The employee, or None if no row has this id
        """
        row = await self.db.fetchrow(
            f"SELECT {EMPLOYEE_COLUMNS} FROM employees WHERE id = $1",
            employee_id
        )

        if not row:
            return None

        return Employee(**dict(row))

    async def add(self, employee: EmployeeFields) -> Employee:
        """
        Insert a new employee row.

        Any id carried by ``employee`` is ignored; the store assigns it.

        Returns:
            The persisted employee including its id
        """
        row = await self.db.fetchrow(
            f"""
            INSERT INTO employees (
                name, address, extension, professional_email, department, salary
            ) VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {EMPLOYEE_COLUMNS}
            """,
            employee.name,
            employee.address,
            employee.extension,
            employee.professional_email,
            employee.department,
            _salary_param(employee.salary)
        )

        created = Employee(**dict(row))
        logger.info(f"Employee inserted: id={created.id}")
        return created

    async def update(self, employee: Employee) -> Optional[Employee]:
        """
        Persist every mutable field of an already loaded employee.

        Returns:
            The row as stored (salary rounded to the column scale), or None
            if it was deleted in the meantime
        """
        row = await self.db.fetchrow(
            f"""
            UPDATE employees
            SET name = $2,
                address = $3,
                extension = $4,
                professional_email = $5,
                department = $6,
                salary = $7
            WHERE id = $1
            RETURNING {EMPLOYEE_COLUMNS}
            """,
            employee.id,
            employee.name,
            employee.address,
            employee.extension,
            employee.professional_email,
            employee.department,
            _salary_param(employee.salary)
        )

        if not row:
            return None

        updated = Employee(**dict(row))
        logger.info(f"Employee updated: id={updated.id}")
        return updated

    async def remove(self, employee: Employee) -> None:
        """Delete the row matching the employee's id."""
        await self.db.execute(
            "DELETE FROM employees WHERE id = $1",
            employee.id
        )

        logger.info(f"Employee removed: id={employee.id}")
