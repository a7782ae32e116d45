"""Tenancy bounded context.

Owns the tenant registry, the tenant directory used to validate tenant
signals, tenant resolution for inbound requests, and the FastAPI wiring that
orders resolution before any tenant-owned data access.
"""
