"""Isolation bounded context.

Keeps each tenant's rows, schema or database apart: classifies mapped
classes, filters reads, guards writes, routes sessions and migrates tenant
storage.
"""
