"""Tenant administration routes."""
