"""
Tests for employee and audit log models.
"""

import pytest
from pydantic import ValidationError

from employee_service.models import (
    UNASSIGNED_PARTITION,
    AuditAction,
    AuditLogEntry,
    Employee,
    EmployeeUpdate,
)


@pytest.fixture
def employee() -> Employee:
    return Employee(
        id=1,
        name="Ana",
        address="Rua A, 100",
        extension="4021",
        professional_email="ana@example.com",
        department="HR",
        salary=5000,
    )


class TestEmployeeApply:
    """Tests for wholesale field replacement."""

    def test_apply_replaces_fields_and_keeps_id(self, employee):
        employee.apply(EmployeeUpdate(name="Bia", salary=100))

        assert employee.id == 1
        assert employee.name == "Bia"
        assert employee.salary == 100
        assert employee.department is None
        assert employee.address is None

    def test_update_payload_has_no_id(self):
        payload = EmployeeUpdate.model_validate({"id": 9, "name": "Bia"})

        assert "id" not in payload.model_dump()


class TestAuditLogEntry:
    """Tests for audit entry construction."""

    def test_from_employee_copies_snapshot(self, employee):
        entry = AuditLogEntry.from_employee(employee, AuditAction.INSERTION)

        assert entry.action == AuditAction.INSERTION
        assert entry.partition_key == "HR"
        assert entry.employee_id == 1
        assert entry.snapshot() == employee

    def test_snapshot_is_detached_from_later_changes(self, employee):
        """Test mutating the employee after logging does not alter the entry."""
        entry = AuditLogEntry.from_employee(employee, AuditAction.UPDATE)

        employee.apply(EmployeeUpdate(name="Changed"))

        assert entry.name == "Ana"

    def test_row_key_is_a_fresh_correlation_id(self, employee):
        keys = {
            AuditLogEntry.from_employee(employee, AuditAction.UPDATE).row_key
            for _ in range(100)
        }

        assert len(keys) == 100

    def test_missing_department_uses_unassigned_partition(self):
        entry = AuditLogEntry.from_employee(Employee(id=2, department=""), AuditAction.REMOVAL)

        assert entry.partition_key == UNASSIGNED_PARTITION

    def test_entries_are_immutable(self, employee):
        entry = AuditLogEntry.from_employee(employee, AuditAction.INSERTION)

        with pytest.raises(ValidationError):
            entry.row_key = "other"

    def test_to_item_uses_entity_attribute_names(self, employee):
        item = AuditLogEntry.from_employee(employee, AuditAction.REMOVAL).to_item()

        assert set(item) == {
            "PartitionKey", "RowKey", "Action", "EmployeeId", "Name", "Address",
            "Extension", "ProfessionalEmail", "Department", "Salary", "Payload",
            "Timestamp",
        }
        assert item["Action"] == "Removal"
