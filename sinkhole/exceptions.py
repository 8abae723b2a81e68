"""Error types raised by the sinkhole."""


class SinkholeError(Exception):
    """Base class for sinkhole errors."""


class ConfigMissingError(SinkholeError):
    """The list of blacklist sources cannot be read. Fatal at startup."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Blacklist sources file {path} cannot be read"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SourceFetchError(SinkholeError):
    """A single blacklist source could not be fetched."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Blacklist {location} failed to load: {reason}")


class UpstreamFailure(SinkholeError):
    """The upstream resolver produced no answer for a query."""
