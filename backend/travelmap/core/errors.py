class TravelMapError(Exception):
    """Base class for failures that are reported to the user, never fatal."""


class ResolutionError(TravelMapError):
    """Remote geocoding failed or returned unusable data."""


class ValidationError(TravelMapError):
    """Booking submitted without the required contact fields."""


class PersistenceError(TravelMapError):
    """Storage could not be read or written."""


class NotFoundError(TravelMapError):
    pass


class ConfirmationRequired(TravelMapError):
    pass
