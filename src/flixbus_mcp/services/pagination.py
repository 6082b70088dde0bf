"""Anchor derivation and page filtering for follow-up trip searches.

Later pages start one second after the latest departure seen so far, so the
anchor filter alone keeps already returned trips out. The upstream search
is date-granular, so earlier pages re-query the anchor day from operator
midnight and keep only trips that depart before the previous anchor and
arrive before the earliest arrival seen so far.
"""

from datetime import datetime

from flixbus_mcp.models.pagination import PaginationContext
from flixbus_mcp.models.trips import Trip
from flixbus_mcp.services.time_codec import one_second_after, start_of_civil_day


def later_anchor(context: PaginationContext) -> datetime | None:
    """Anchor for the next later page, or None when no later page can exist."""
    if not context.can_query_later or context.last_departure is None:
        return None
    return one_second_after(context.last_departure)


def earlier_anchor(context: PaginationContext, operator_timezone: str) -> datetime:
    """Anchor for the next earlier page: midnight of the anchor's civil day.

    Used whether or not ``can_query_earlier`` is set; when it is not, the
    re-query at midnight is the single retry that picks up same-day trips the
    anchor filter dropped.
    """
    return start_of_civil_day(context.anchor, operator_timezone)


def select_earlier(trips: list[Trip], context: PaginationContext) -> list[Trip]:
    """Keep trips that come strictly before everything the session has returned."""
    return [
        trip
        for trip in trips
        if trip.departure_time < context.anchor
        and (context.first_arrival is None or trip.arrival_time < context.first_arrival)
    ]


def next_context(
    previous: PaginationContext,
    anchor: datetime,
    trips: list[Trip],
    can_query_earlier: bool,
    can_query_later: bool,
) -> PaginationContext:
    """Build the context for the page after ``previous``.

    The new context is seeded with the previous session window so bounds only
    ever widen.
    """
    context = PaginationContext(
        origin=previous.origin,
        destination=previous.destination,
        anchor=anchor,
        last_departure=previous.last_departure,
        first_arrival=previous.first_arrival,
    ).fold_trips(trips)
    return context.model_copy(
        update={
            "can_query_earlier": can_query_earlier,
            "can_query_later": can_query_later and context.last_departure is not None,
        }
    )
