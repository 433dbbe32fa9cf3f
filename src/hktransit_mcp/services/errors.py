"""Exceptions raised by the journey planning services."""


class InvalidCoordinateError(ValueError):
    """Non-finite or out-of-range coordinates were supplied."""


class DataUnavailableError(RuntimeError):
    """Rail or surface stop data could not be loaded."""


class TransitDataNotLoadedError(RuntimeError):
    """Stop data was queried before a successful load."""
