"""
API Routers
Separate router modules for each domain.
"""

from app.routers import ranker

__all__ = ["ranker"]
