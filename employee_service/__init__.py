"""
Employee Service
================

A CRUD service for employee records with an audit trail:
- PostgreSQL as the record store
- DynamoDB as the audit log store (one entry per mutation)
- FastAPI for the HTTP API
"""

__version__ = "1.0.0"
__author__ = "Employee Service Team"
