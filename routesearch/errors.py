"""
ERRORS:

Exceptions raised by the route search engine and its collaborators.
"""


class RouteSearchError(Exception):
    """Base class for all routesearch errors."""


class EmptyInstanceError(RouteSearchError, ValueError):
    """Raised when a search is initialized without any cities."""


class DuplicateCityError(RouteSearchError, ValueError):
    """Raised when two cities of an instance share the same id."""

    def __init__(self, duplicates):
        self.duplicates = tuple(duplicates)
        super().__init__(f"Duplicate city ids: {list(self.duplicates)}")


class MissingCityError(RouteSearchError, KeyError):
    """Raised by strict tour evaluation when a tour references an unknown city id."""

    def __init__(self, missing):
        self.missing = tuple(missing)
        super().__init__(f"Tour references unknown city ids: {list(self.missing)}")

    def __str__(self):
        return self.args[0]


class NotInitializedError(RouteSearchError, RuntimeError):
    """Raised when the engine is stepped or read before initialize()."""


class InvalidCityError(RouteSearchError, ValueError):
    """Raised when a city has a NaN or infinite coordinate."""

    def __init__(self, invalid):
        self.invalid = tuple(invalid)
        super().__init__(f"Cities with non-finite coordinates: {list(self.invalid)}")
