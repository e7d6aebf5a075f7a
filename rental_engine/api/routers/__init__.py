"""API routers"""

from . import pricing, search

__all__ = ['pricing', 'search']
