"""
Places domain package.

Public API:
- Domain model: Place, seed_places
- Persistence: PlaceStore (save / load_all)
"""
from .models import Place, seed_places, RESTAURANT_NAMES
from .store import PlaceStore

__all__ = ["Place",
           "seed_places",
           "RESTAURANT_NAMES",
           "PlaceStore",
           ]
