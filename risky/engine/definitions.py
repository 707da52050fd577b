"""
Static geography definitions: territories, adjacency, and regions.
The engine only reads these; a Geography is immutable for the lifetime of a game.
geography_from_snapshot builds one from plain data (e.g. produced by a map editor).
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from risky.engine.errors import GeographyError, TerritoryNotFoundError


@dataclass(frozen=True)
class TerritoryDefinition:
    """Defines immutable properties of a territory."""
    index: int  # Handle used by the engine (position in Geography.territories)
    name: str
    neighbors: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class RegionDefinition:
    """A set of territories granting a draft bonus to whoever owns all of them."""
    name: str
    bonus: int
    territories: tuple[int, ...]


@dataclass(frozen=True)
class Geography:
    """Ordered territories plus regions. Adjacency is symmetric."""
    territories: tuple[TerritoryDefinition, ...]
    regions: tuple[RegionDefinition, ...] = ()
    _by_name: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_by_name", {t.name: t.index for t in self.territories})

    def __len__(self) -> int:
        return len(self.territories)

    def index_of(self, name: str) -> int:
        """Resolve a territory name to its handle."""
        try:
            return self._by_name[name]
        except KeyError:
            raise TerritoryNotFoundError(f"Unknown territory: {name}") from None

    def name_of(self, handle: int) -> str:
        return self.territories[handle].name

    def neighbors(self, handle: int) -> frozenset[int]:
        return self.territories[handle].neighbors

    def are_adjacent(self, a: int, b: int) -> bool:
        return b in self.territories[a].neighbors


# ===== Snapshot validation =====

class RegionSnapshot(BaseModel):
    name: str
    bonus: int = Field(ge=0)
    territories: list[str] = Field(min_length=1)


class GeographySnapshot(BaseModel):
    """
    Plain-data form of a geography:
    {"regions": [{"name": str, "bonus": int, "territories": [str, ...]}, ...],
     "links": [[territory_a, territory_b], ...]}
    """
    regions: list[RegionSnapshot] = Field(min_length=1)
    links: list[tuple[str, str]] = Field(default_factory=list)

    @field_validator("regions")
    @classmethod
    def _unique_territory_names(cls, regions: list[RegionSnapshot]) -> list[RegionSnapshot]:
        seen: set[str] = set()
        for region in regions:
            for name in region.territories:
                if name in seen:
                    raise ValueError(f'The territory name "{name}" is not unique')
                seen.add(name)
        return regions


def geography_from_snapshot(snapshot: dict[str, Any]) -> Geography:
    """
    Build a Geography from a snapshot dict (see GeographySnapshot).

    Territory order is order of appearance across regions. Links are added in both
    directions; duplicates are ignored. Raises GeographyError if the snapshot is
    malformed, a territory name repeats, or a link names an unknown territory or
    links a territory to itself.
    """
    try:
        parsed = GeographySnapshot.model_validate(snapshot)
    except ValidationError as e:
        raise GeographyError(f"Invalid geography: {e}") from e

    names: list[str] = []
    region_members: list[tuple[RegionSnapshot, tuple[int, ...]]] = []
    for region in parsed.regions:
        start = len(names)
        names.extend(region.territories)
        region_members.append((region, tuple(range(start, len(names)))))

    index = {name: i for i, name in enumerate(names)}
    neighbors: list[set[int]] = [set() for _ in names]
    for a, b in parsed.links:
        if a not in index or b not in index:
            raise GeographyError(f"Link references unknown territory: {a} - {b}")
        if a == b:
            raise GeographyError(f"Territory {a} cannot be linked to itself")
        neighbors[index[a]].add(index[b])
        neighbors[index[b]].add(index[a])

    territories = tuple(
        TerritoryDefinition(index=i, name=name, neighbors=frozenset(neighbors[i]))
        for i, name in enumerate(names)
    )
    regions = tuple(
        RegionDefinition(name=region.name, bonus=region.bonus, territories=members)
        for region, members in region_members
    )
    return Geography(territories=territories, regions=regions)
