"""Failure taxonomy for trip searches.

Transport and document-shape failures abort a whole search. A malformed
itinerary only drops that one record; the parser reports it as an anomaly
next to the trips that did parse. Running out of earlier/later results is
not an error and is never raised.
"""


class FlixbusError(Exception):
    """Base class for all trip search failures."""


class TransportError(FlixbusError):
    """The HTTP request failed (network, timeout, auth or non-2xx status)."""


class MalformedResponse(FlixbusError):
    """The response body is not the expected JSON document."""


class MalformedItinerary(FlixbusError):
    """A single itinerary record cannot be turned into a trip."""

    def __init__(self, reason: str, itinerary_id: str | None = None):
        super().__init__(reason)
        self.reason = reason
        self.itinerary_id = itinerary_id
