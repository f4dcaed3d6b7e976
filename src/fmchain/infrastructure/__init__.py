"""Infrastructure layer — vault filesystem access and template loading.

The service layer bridges between domain rules and infrastructure.
It must never import from services, commands, or output.
"""
