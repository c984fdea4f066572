"""
Gym management application code.

This package contains the gym-specific implementations:
- models: Database document schemas (Client with embedded Membership)
- services: Email delivery and the membership renewal sweep
- scheduler: Daily trigger for the renewal sweep
- config: Application settings

Uses generic infrastructure from the common/ package.
"""

from app.config import settings

__all__ = ["settings"]
