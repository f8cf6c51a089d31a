"""Domain layer — stages, board materialization, drop reconciliation.

This layer depends only on stdlib and pydantic.
It must never import from view, services, infrastructure, commands, or config.
"""
