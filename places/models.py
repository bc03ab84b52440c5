"""
Purpose: Core data model for the places domain.
What it does:
Defines a Place (name, free-text address, category, thumbnail) without relying
on any storage engine, plus the fixed list of restaurants the app ships with.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

# Restaurants the app seeds on first launch.
RESTAURANT_NAMES = [
    "Burger Heroes", "Kitchen", "Bonsai", "Дастархан",
    "Индокитай", "X.O", "Балкан Гриль", "Sherlock Holmes",
    "Speak Easy", "Morris Pub", "Вкусные истории",
    "Классик", "Love&Life", "Шок", "Бочка",
]


@dataclass(frozen=True)
class Place:
    """
    A saved place. Read-only for the tracking flow; only the store writes places.
    """
    name: str
    address: Optional[str] = None
    category: Optional[str] = None
    thumbnail: Optional[bytes] = None

    @classmethod
    def new(
        cls,
        name: str,
        address: Optional[str] = None,
        category: Optional[str] = None,
        thumbnail: Optional[bytes] = None,
    ) -> Place:
        name = name.strip()
        if not name:
            raise ValueError("Place name must not be empty")

        return cls(
            name=name,
            address=address.strip() if address and address.strip() else None,
            category=category.strip() if category and category.strip() else None,
            thumbnail=thumbnail or None,
        )


def seed_places(address: str = "Moscow", category: str = "Restaurant") -> List[Place]:
    """
    The default restaurant list. Thumbnails are not bundled, so they stay empty.
    """
    return [Place.new(name, address=address, category=category) for name in RESTAURANT_NAMES]
