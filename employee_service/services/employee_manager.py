"""
Employee mutation service.

Applies each create/update/delete to the record store first and then mirrors
it into the audit log store. The two writes are not transactional: when the
audit write fails the record store change stays committed, and the failure is
raised as AuditLogWriteError so callers can report the inconsistency.
"""

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from prometheus_client import Counter, Histogram

from employee_service.models import (
    AuditAction,
    AuditLogEntry,
    Employee,
    EmployeeCreate,
    EmployeeUpdate,
)
from employee_service.services.audit_store import AuditEntryEncodingError, AuditLogStore
from employee_service.services.employee_repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Prometheus metrics
employee_mutations = Counter(
    'employee_mutations_total',
    'Employee mutations committed to the record store',
    ['action']
)
audit_writes = Counter(
    'audit_log_writes_total',
    'Audit log entries written',
    ['action']
)
audit_write_failures = Counter(
    'audit_log_write_failures_total',
    'Audit log writes that failed after the record store committed',
    ['action']
)
audit_write_duration = Histogram(
    'audit_log_write_seconds',
    'Audit log write duration'
)


class AuditLogWriteError(Exception):
    """A record store mutation committed but its audit entry was not written."""

    def __init__(self, entry: AuditLogEntry, cause: Exception):
        self.entry = entry
        self.cause = cause
        super().__init__(
            f"Audit log write failed for {entry.action.value} of employee "
            f"{entry.employee_id} (correlation_id={entry.correlation_id}): {cause}"
        )

    @property
    def action(self) -> AuditAction:
        return self.entry.action

    @property
    def employee_id(self) -> int:
        return self.entry.employee_id

    @property
    def correlation_id(self) -> str:
        return self.entry.correlation_id


class EmployeeManager:
    """
    Per-request coordinator for employee reads and mutations.

    Holds no state of its own beyond its two store collaborators.
    """

    def __init__(self, repository: EmployeeRepository, audit_store: AuditLogStore):
        self.repository = repository
        self.audit_store = audit_store

    async def get(self, employee_id: int) -> Optional[Employee]:
        """Return the employee, or None if it does not exist."""
        return await self.repository.find_by_id(employee_id)

    async def create(self, payload: EmployeeCreate) -> Employee:
        """Insert a new employee and log an Insertion entry."""
        employee = await self.repository.add(payload)
        employee_mutations.labels(action=AuditAction.INSERTION.value).inc()

        await self._record(employee, AuditAction.INSERTION)
        return employee

    async def update(self, employee_id: int, payload: EmployeeUpdate) -> Optional[Employee]:
        """
        Overwrite all mutable fields of an existing employee.

        Returns:
            The updated employee, or None if it does not exist
        """
        employee = await self.repository.find_by_id(employee_id)
        if employee is None:
            return None

        employee.apply(payload)
        saved = await self.repository.update(employee)
        if saved is None:
            return None
        employee_mutations.labels(action=AuditAction.UPDATE.value).inc()

        await self._record(saved, AuditAction.UPDATE)
        return saved

    async def delete(self, employee_id: int) -> Optional[Employee]:
        """
        Remove an existing employee.

        Returns:
            The removed employee, or None if it does not exist
        """
        employee = await self.repository.find_by_id(employee_id)
        if employee is None:
            return None

        await self.repository.remove(employee)
        employee_mutations.labels(action=AuditAction.REMOVAL.value).inc()

        await self._record(employee, AuditAction.REMOVAL)
        return employee

    async def _record(self, employee: Employee, action: AuditAction) -> AuditLogEntry:
        entry = AuditLogEntry.from_employee(employee, action)

        try:
            with audit_write_duration.time():
                await self.audit_store.upsert(entry)
        except (AuditEntryEncodingError, BotoCoreError, ClientError) as e:
            audit_write_failures.labels(action=action.value).inc()
            logger.error(
                f"Record store and audit log are inconsistent: {action.value} of "
                f"employee {employee.id} committed but audit entry "
                f"{entry.correlation_id} was not written: {e}"
            )
            raise AuditLogWriteError(entry, e) from e

        audit_writes.labels(action=action.value).inc()
        logger.info(
            f"Audit entry recorded: employee={employee.id}, action={action.value}, "
            f"correlation_id={entry.correlation_id}"
        )
        return entry
