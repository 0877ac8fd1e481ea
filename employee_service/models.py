"""
Pydantic models for request/response validation and audit log entries.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# Partition used when an employee has no department; DynamoDB rejects empty key attributes.
UNASSIGNED_PARTITION = "_unassigned"

MAX_SALARY = 9999999999.99


# ============================================================================
# Employee Models
# ============================================================================

class EmployeeFields(BaseModel):
    """The mutable attributes of an employee record."""

    name: Optional[str] = Field(default=None, max_length=200, examples=["Ana Souza"])
    address: Optional[str] = Field(default=None, max_length=500)
    extension: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Internal phone extension",
        examples=["4021"]
    )
    professional_email: Optional[str] = Field(
        default=None,
        max_length=320,
        examples=["ana.souza@example.com"]
    )
    department: Optional[str] = Field(default=None, max_length=100, examples=["HR"])
    # Bounds of the NUMERIC(12, 2) column
    salary: Optional[float] = Field(
        default=None,
        ge=0,
        le=MAX_SALARY,
        allow_inf_nan=False,
        examples=[5000]
    )


class EmployeeCreate(EmployeeFields):
    """Request model for creating an employee. The store assigns the id."""


class EmployeeUpdate(EmployeeFields):
    """
    Request model for updating an employee.

    Every mutable field is overwritten; omitted fields become null.
    """


class Employee(EmployeeFields):
    """Employee as persisted in the record store."""

    id: int

    def apply(self, changes: EmployeeFields) -> None:
        """Overwrite every mutable field from ``changes``. The id is kept."""
        for field_name in EmployeeFields.model_fields:
            setattr(self, field_name, getattr(changes, field_name))


# ============================================================================
# Audit Log Models
# ============================================================================

class AuditAction(str, Enum):
    """Kind of mutation recorded by an audit log entry."""

    INSERTION = "Insertion"
    UPDATE = "Update"
    REMOVAL = "Removal"


class AuditLogEntry(BaseModel):
    """
    Snapshot of an employee at the moment of a mutation.

    ``partition_key`` groups entries by department and ``row_key`` is a
    freshly generated correlation id, so each write lands on a new item.
    """

    model_config = ConfigDict(frozen=True)

    partition_key: str
    row_key: str
    action: AuditAction
    employee_id: int
    name: Optional[str] = None
    address: Optional[str] = None
    extension: Optional[str] = None
    professional_email: Optional[str] = None
    department: Optional[str] = None
    salary: Optional[float] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_employee(cls, employee: Employee, action: AuditAction) -> "AuditLogEntry":
        """Build an entry for ``employee`` with a new correlation id."""
        return cls(
            partition_key=employee.department or UNASSIGNED_PARTITION,
            row_key=str(uuid.uuid4()),
            action=action,
            employee_id=employee.id,
            **employee.model_dump(include=set(EmployeeFields.model_fields)),
        )

    @property
    def correlation_id(self) -> str:
        return self.row_key

    def snapshot(self) -> Employee:
        """The employee record as it was when the entry was written."""
        return Employee(
            id=self.employee_id,
            **self.model_dump(include=set(EmployeeFields.model_fields)),
        )

    def to_item(self) -> Dict[str, Any]:
        """Plain attribute map for the key-value store (before type serialization)."""
        return {
            "PartitionKey": self.partition_key,
            "RowKey": self.row_key,
            "Action": self.action.value,
            "EmployeeId": self.employee_id,
            "Name": self.name,
            "Address": self.address,
            "Extension": self.extension,
            "ProfessionalEmail": self.professional_email,
            "Department": self.department,
            # TypeSerializer rejects floats
            "Salary": Decimal(str(self.salary)) if self.salary is not None else None,
            "Payload": self.snapshot().model_dump_json(),
            "Timestamp": self.timestamp.isoformat(),
        }


# ============================================================================
# Error Models
# ============================================================================

class AuditFailureDetail(BaseModel):
    """Body returned when a mutation committed but its audit entry was not written."""

    detail: str = "Audit log write failed"
    action: AuditAction
    employee_id: int
    correlation_id: str


# ============================================================================
# Health Check Models
# ============================================================================

class HealthStatus(BaseModel):
    """Health check response."""

    status: str = Field(..., examples=["healthy", "unhealthy"])
    version: str
    database: str = Field(..., examples=["connected", "disconnected"])
    audit_store: str = Field(..., examples=["connected", "disconnected"])
    uptime_seconds: float
    timestamp: datetime
