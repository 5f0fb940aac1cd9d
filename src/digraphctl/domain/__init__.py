"""Domain layer — graph types, construction, cycle detection, filtering.

This layer depends only on stdlib, pydantic and structlog.
It must never import from services, infrastructure, commands, or config.
"""
