"""Core business logic.

Modules:
- stats: derived dashboard statistics (pure reductions)
- roster: instructor roster building and filters
- export: roster CSV export
- insights: AI insight generation
- learning: learning-update submission
- accounts: sign-up, sign-in and the signed-in Session
- dashboard: student dashboard loading
- sample_data: bundled demo roster
"""

__all__ = [
    "stats",
    "roster",
    "export",
    "insights",
    "learning",
    "accounts",
    "dashboard",
    "sample_data",
]
