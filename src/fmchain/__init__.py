"""fmchain — inherited frontmatter templates for Markdown vaults."""

__version__ = "0.1.0"
