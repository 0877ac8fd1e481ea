"""
Script to provision the Employee Service backing stores.
Creates the employees table in PostgreSQL and the audit table in DynamoDB
if they do not exist yet. Safe to run repeatedly.
"""

import asyncio
import logging

from employee_service.config import get_settings
from employee_service.database import Database
from employee_service.services.audit_store import AuditLogStore

logger = logging.getLogger(__name__)


async def provision():
    """Make sure both stores are ready for the service."""
    settings = get_settings()

    print(f"\n{'='*60}")
    print(f"Provisioning stores for {settings.app_name}")
    print(f"{'='*60}\n")

    print("1. Record store (PostgreSQL)...")
    database = Database(settings)
    await database.connect()
    try:
        await database.ensure_schema()
    finally:
        await database.disconnect()
    print("   ✓ employees table ready")

    print(f"\n2. Audit log store (DynamoDB table '{settings.audit_table_name}')...")
    audit_store = AuditLogStore.from_settings(settings)
    await audit_store.ensure_table_ready()
    print("   ✓ audit table ready")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(provision())
