"""
jumpmcp - context-aware "jump to document" switcher for markdown vaults.

Ranks the notes of a personal knowledge base so the most relevant files come
first: recently opened notes, outgoing links, backlinks and two-hop relations,
narrowed by frontmatter property filters and matched fuzzily by name.

Stack:
- Python + FastMCP (SDK oficial)
- PyYAML (frontmatter and rules)
- SSE (transporte HTTP remoto)
- Markdown (source of truth)
"""

__version__ = "0.1.0"
__author__ = "macward"
