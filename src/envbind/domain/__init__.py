"""Domain layer — field kinds, lookup keys, coercion rules.

This layer depends only on stdlib, pydantic, and :mod:`envbind.errors`.
It must never import from services, infrastructure, commands, or config.
"""
