import logging

from travelmap.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
    # per-request noise from the HTTP client used by the geocoder
    logging.getLogger("urllib3").setLevel(logging.WARNING)
