class PokedexError(Exception):
    """Base class for errors raised by the aggregation services."""


class UpstreamUnavailable(PokedexError):
    """Transport failure or non-2xx response from PokeAPI."""

    def __init__(self, url: str, reason: str = '', status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        msg = f"Upstream unavailable: {url}"
        if status_code is not None:
            msg += f" (HTTP {status_code})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class NotFound(PokedexError):
    """Requested id is absent from the local or upstream dataset."""


class MalformedUpstreamPayload(PokedexError):
    """Upstream answered 2xx but the JSON does not have the expected shape."""
