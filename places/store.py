"""
Purpose: Persistence for places (the only code that writes them).
What it does:
- Keeps every Place in a single CSV file on disk (one row per place, keyed by name)
- save(place) inserts or replaces by name
- load_all() returns the places in insertion order
- seed() writes the default restaurant list into an empty store

Thumbnails are stored base64-encoded so the file stays plain text.

Rule: No geocoding, no routing. The tracker never touches this module.
"""

from __future__ import annotations

import base64
import os
from typing import List, Optional

import pandas as pd
from dotenv import load_dotenv

from .models import Place, seed_places

load_dotenv()
PLACES_STORE_PATH = os.getenv("PLACES_STORE_PATH", "places.csv")

COLUMNS = ["name", "address", "category", "thumbnail"]


def _encode_thumbnail(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return base64.b64encode(data).decode("ascii")


def _decode_thumbnail(value: str) -> Optional[bytes]:
    if not value:
        return None
    return base64.b64decode(value)


class PlaceStore:
    def __init__(self, path: Optional[str] = None):
        self.path = path or PLACES_STORE_PATH

    def _read(self) -> pd.DataFrame:
        if not os.path.exists(self.path):
            return pd.DataFrame(columns=COLUMNS)
        # keep_default_na=False: empty cells come back as "" rather than NaN
        return pd.read_csv(self.path, dtype=str, keep_default_na=False)

    def _write(self, df: pd.DataFrame) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        df.to_csv(self.path, index=False, columns=COLUMNS)

    def save(self, place: Place) -> None:
        """
        Insert a place, replacing any stored place with the same name.
        """
        df = self._read()
        df = df[df["name"] != place.name]

        row = pd.DataFrame([{
            "name": place.name,
            "address": place.address or "",
            "category": place.category or "",
            "thumbnail": _encode_thumbnail(place.thumbnail),
        }], columns=COLUMNS)
        df = row if df.empty else pd.concat([df, row], ignore_index=True)
        self._write(df)

    def load_all(self) -> List[Place]:
        df = self._read()
        places = []
        for _, row in df.iterrows():
            places.append(
                Place(
                    name=row["name"],
                    address=row["address"] or None,
                    category=row["category"] or None,
                    thumbnail=_decode_thumbnail(row["thumbnail"]),
                )
            )
        return places

    def seed(self) -> int:
        """
        Save the default restaurants if the store is empty.
        Returns how many places were written.
        """
        if self.load_all():
            return 0

        places = seed_places()
        for place in places:
            self.save(place)
        return len(places)
