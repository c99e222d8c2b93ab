"""Tenancy bounded context.

Resolves which tenant owns an inbound operation, validates the tenant's
lifecycle state, exposes it as ambient context and enforces per-operation
tenant requirements.
"""
