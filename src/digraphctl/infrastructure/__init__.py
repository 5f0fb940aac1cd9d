"""Infrastructure layer — document loading and output files.

This layer depends on stdlib and the domain types it decodes into.
It must never import from services, commands, or output.
"""
