"""Catalog bounded context.

Products are tenant-owned: every read is filtered by the request's tenant
and every write is stamped with it by the data access session.
"""
