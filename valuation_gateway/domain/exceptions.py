"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAssetError(DomainException):
    """Asset facts cannot produce a depreciation schedule"""

    pass


class InvalidParameterError(DomainException):
    """Caller supplied an out-of-range or malformed parameter"""

    pass


class InvalidDateRangeError(DomainException):
    """Date range is missing an endpoint or is inverted"""

    pass


class AssetNotFoundError(DomainException):
    """Asset does not exist for the business"""

    pass


class DataSourceError(DomainException):
    """External value source returned an error or is unavailable"""

    pass


class ComponentFetchError(DomainException):
    """A single valuation component could not be fetched.

    Raised and absorbed inside the valuation aggregator only.
    """

    def __init__(self, component: str, reason: str):
        super().__init__(f"{component}: {reason}")
        self.component = component
        self.reason = reason
