# domain/errors.py


class TrackerError(Exception):
    """Base for everything the engine raises on purpose."""


# ---------------- construction (abort the refresh) ----------------


class ConstructionError(TrackerError):
    pass


class InvalidPathError(ConstructionError, ValueError):
    pass


class SegmentNotFoundError(ConstructionError, KeyError):
    def __init__(self, code: str):
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"no segment registered for pair code {self.code!r}"


class UnknownLocationError(ConstructionError, KeyError):
    def __init__(self, code: str):
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"unknown location {self.code!r}"


class NoDigitsInPlatformLabelError(ConstructionError, ValueError):
    def __init__(self, label: str):
        super().__init__(f"platform label {label!r} contains no digit")
        self.label = label


class InvalidRideError(ConstructionError, ValueError):
    pass


class RefreshTimeoutError(ConstructionError, TimeoutError):
    pass


# ---------------- queries (per call) ----------------


class QueryError(TrackerError):
    pass


class TimeOutOfRangeError(QueryError, ValueError):
    pass


class OffsetOutOfRangeError(QueryError, ValueError):
    pass


class FractionOutOfRangeError(QueryError, ValueError):
    pass


class SegmentNotFoundForDistanceError(QueryError, LookupError):
    pass
