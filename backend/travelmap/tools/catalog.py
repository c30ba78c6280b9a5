from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from travelmap.models.domain import Destination, DestinationId

logger = logging.getLogger(__name__)


SAMPLE_DESTINATIONS = (
    Destination(
        id=1,
        name="Paris, France",
        coordinates=(48.8566, 2.3522),
        summary="Romantic city, rich museums, Eiffel Tower.",
    ),
    Destination(
        id=2,
        name="Tokyo, Japan",
        coordinates=(35.6895, 139.6917),
        summary="Ultra-modern city with unique culture and food.",
    ),
    Destination(
        id=3,
        name="New York, USA",
        coordinates=(40.7128, -74.006),
        summary="City that never sleeps: culture, finance, and food.",
    ),
    Destination(
        id=4,
        name="Goa, India",
        coordinates=(15.2993, 73.7898),
        summary="Beaches, nightlife, and relaxed vibe.",
    ),
)


class Catalog:
    """
    Curated destinations, read-only for the lifetime of the process.
    Order is significant: an empty search returns entries as given here.
    """

    def __init__(self, destinations: Iterable[Destination] = SAMPLE_DESTINATIONS) -> None:
        self._destinations = tuple(destinations)

    @classmethod
    def from_file(cls, path: str | Path) -> "Catalog":
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        destinations = [
            Destination(
                id=item["id"],
                name=item["name"],
                coordinates=(float(item["coords"][0]), float(item["coords"][1])),
                summary=item.get("summary", ""),
            )
            for item in raw
        ]
        logger.info("Loaded %d catalog destinations from %s", len(destinations), path)
        return cls(destinations)

    def all(self) -> List[Destination]:
        return list(self._destinations)

    def search(self, query: str) -> List[Destination]:
        needle = query.strip().lower()
        if not needle:
            return self.all()
        return [d for d in self._destinations if needle in d.name.lower()]

    def get(self, destination_id: DestinationId) -> Optional[Destination]:
        for destination in self._destinations:
            if destination.id == destination_id:
                return destination
        return None

    def __len__(self) -> int:
        return len(self._destinations)
