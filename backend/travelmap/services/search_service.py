import logging
from typing import List

from travelmap.core.errors import ResolutionError
from travelmap.models.domain import Destination
from travelmap.tools.catalog import Catalog
from travelmap.tools.geocoder import Geocoder

logger = logging.getLogger(__name__)


class SearchResolver:
    """
    Turns a free-text query into destinations. The local catalog always wins;
    the geocoder is only asked when no catalog name contains the query.
    """

    def __init__(self, catalog: Catalog, geocoder: Geocoder, limit: int = 5):
        self.catalog = catalog
        self.geocoder = geocoder
        self.limit = limit

    def resolve(self, query: str) -> List[Destination]:
        q = query.strip()
        if not q:
            return self.catalog.all()

        local = self.catalog.search(q)
        if local:
            logger.debug("Query %r matched %d catalog entries", q, len(local))
            return local

        records = self.geocoder.search(q, limit=self.limit)
        places = [self._to_destination(i, record) for i, record in enumerate(records)]
        logger.info("Query %r resolved remotely to %d places", q, len(places))
        return places

    @staticmethod
    def _to_destination(index: int, record: dict) -> Destination:
        try:
            display_name = record["display_name"]
            latitude = float(record["lat"])
            longitude = float(record["lon"])
            if not isinstance(display_name, str) or not display_name:
                raise ValueError("empty display_name")
            return Destination(
                id=f"osm-{index}",
                name=display_name,
                coordinates=(latitude, longitude),
                summary=display_name,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ResolutionError(f"Unusable geocoding record at index {index}: {exc}") from exc
