"""In-memory station index built from network.json."""

from dataclasses import dataclass, field

from flixbus_mcp.matching.normalizers import normalize_text, split_aliases
from flixbus_mcp.models.flixbus import NetworkResponse, StationRecord
from flixbus_mcp.models.trips import Location


@dataclass(frozen=True)
class IndexedStation:
    """Station with pre-computed normalized names."""

    location: Location
    normalized_name: str
    normalized_aliases: tuple[str, ...] = ()


@dataclass
class StationIndex:
    """Stations keyed by id plus a flat list for fuzzy matching."""

    by_id: dict[str, Location] = field(default_factory=dict)
    stations: list[IndexedStation] = field(default_factory=list)

    @classmethod
    def from_network(cls, network: NetworkResponse) -> "StationIndex":
        index = cls()
        for record in network.stations:
            location = station_to_location(record)
            index.by_id[location.id] = location
            index.stations.append(
                IndexedStation(
                    location=location,
                    normalized_name=normalize_text(record.name),
                    normalized_aliases=split_aliases(record.aliases),
                )
            )
        return index

    def __len__(self) -> int:
        return len(self.stations)


def station_to_location(record: StationRecord) -> Location:
    """Convert a network.json station into a Location."""
    coords = record.coordinates
    return Location(
        id=str(record.id),
        name=record.name,
        place=record.full_address,
        lat=coords.latitude if coords else None,
        lon=coords.longitude if coords else None,
    )
