"""Backend access.

Provides:
- The shared Supabase client and query error translation (backend)
- One repository module per table
"""

from growthpath.db.backend import BackendError, execute, get_backend

__all__ = ["BackendError", "execute", "get_backend"]
