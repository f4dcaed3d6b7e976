"""Domain layer — frontmatter values, codec, merge and chain rules.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""
