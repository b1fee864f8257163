"""Service layer for game logic."""

from .catalogs import CatalogService
from .matches import MatchService

__all__ = [
    "CatalogService",
    "MatchService",
]
