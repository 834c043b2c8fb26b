"""Infrastructure layer — the shared default value store.

This layer depends only on stdlib.
It must never import from domain, services, commands, or output.
"""
