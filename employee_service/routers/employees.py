"""
Employee CRUD endpoints - /employee
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from employee_service.database import Database, get_db
from employee_service.models import Employee, EmployeeCreate, EmployeeUpdate
from employee_service.services.audit_store import AuditLogStore, get_audit_store
from employee_service.services.employee_manager import EmployeeManager
from employee_service.services.employee_repository import EmployeeRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employee", tags=["employees"])


async def get_employee_manager(
    db: Database = Depends(get_db),
    audit_store: AuditLogStore = Depends(get_audit_store)
) -> EmployeeManager:
    """Build a fresh manager for the current request."""
    return EmployeeManager(EmployeeRepository(db), audit_store)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")


@router.get("/{employee_id}", response_model=Employee, name="get_employee")
async def get_employee(
    employee_id: int,
    manager: EmployeeManager = Depends(get_employee_manager)
):
    """
    Retrieve a single employee by ID.

    **Returns:**
    - `200` with the employee
    - `404` if no employee has this ID
    """
    employee = await manager.get(employee_id)

    if employee is None:
        raise _not_found()

    return employee


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    request: Request,
    response: Response,
    manager: EmployeeManager = Depends(get_employee_manager)
):
    """
    Create an employee.

    The ID is assigned by the record store; any ID in the body is ignored.
    An `Insertion` entry is written to the audit log.

    **Returns:**
    - `201` with the created employee and a `Location` header
    """
    employee = await manager.create(payload)

    response.headers["Location"] = str(
        request.url_for("get_employee", employee_id=employee.id)
    )
    return employee


@router.put("/{employee_id}")
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    manager: EmployeeManager = Depends(get_employee_manager)
):
    """
    Replace every field of an existing employee.

    Fields omitted from the body are cleared. An `Update` entry carrying the
    post-update values is written to the audit log.

    **Returns:**
    - `200` with an empty body
    - `404` if no employee has this ID
    """
    employee = await manager.update(employee_id, payload)

    if employee is None:
        raise _not_found()

    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: int,
    manager: EmployeeManager = Depends(get_employee_manager)
):
    """
    Delete an employee.

    A `Removal` entry is written to the audit log.

    **Returns:**
    - `204` on success
    - `404` if no employee has this ID
    """
    employee = await manager.delete(employee_id)

    if employee is None:
        raise _not_found()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
