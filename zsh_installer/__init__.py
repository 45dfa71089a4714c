"""Zsh environment installer for Fedora.

Core design goals:
- Every step is idempotent; re-running converges on the same result
- Strictly sequential, fail-fast
- External tools behind a collaborator interface
- Centralized logging
"""

__all__ = []
