"""Shared Kernel module.

Components every bounded context agrees to depend on: the tenant context
value object, the per-request tenant scope, the tenant isolation error
taxonomy, and the observation context carried by domain probes. Changes
here affect both the tenancy and catalog contexts.
"""
