# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Roster collaborators consumed by the game manager.

Players are owned by a single ``PlayerRegistry`` and referenced everywhere
else by their stable ``player_id``. Teams hold ordered id lists for the
batting lineup and the starting rotation, so swapping a player out of a
roster never leaves a dangling reference behind.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from errors import InvalidPlayerError, MissingLineupError, MissingPitcherError
from models import BatterRatings, FieldingRatings, PitcherRatings


_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "sample_rosters.json"


def load_rosters(path: Path | str | None = None) -> dict:
    """Load both team rosters from JSON."""
    p = Path(path) if path else _ROSTER_PATH
    with open(p) as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

@dataclass
class Player:
    """A registered player and the rating snapshots the simulator reads."""
    player_id: str
    name: str
    position: str = "DH"
    batting: BatterRatings = field(default_factory=BatterRatings)
    pitching: PitcherRatings | None = None
    fielding: FieldingRatings = field(default_factory=FieldingRatings)

    @property
    def is_pitcher(self) -> bool:
        return self.pitching is not None

    @classmethod
    def from_roster_dict(cls, d: dict) -> Player:
        """Build a Player from a roster JSON entry.

        Ratings are validated against the 1-99 scale here; an out-of-range
        value raises ``pydantic.ValidationError``.
        """
        pitching = d.get("pitching")
        return cls(
            player_id=d["player_id"],
            name=d["name"],
            position=d.get("position", "P" if pitching else "DH"),
            batting=BatterRatings(**d.get("batting", {})),
            pitching=PitcherRatings(**pitching) if pitching else None,
            fielding=FieldingRatings(**d.get("fielding", {})),
        )


class PlayerRegistry:
    """Owns every Player record, keyed by player_id."""

    def __init__(self) -> None:
        self._players: dict[str, Player] = {}

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def register(self, player: Player) -> Player:
        if player is None or not str(player.player_id).strip():
            raise InvalidPlayerError("Cannot register a player without an id")
        self._players[player.player_id] = player
        return player

    def get(self, player_id: str | None) -> Player:
        if player_id is None or player_id not in self._players:
            raise InvalidPlayerError(f"Unregistered player: {player_id!r}", player_id)
        return self._players[player_id]

    def remove(self, player_id: str) -> None:
        self._players.pop(player_id, None)

    def name_of(self, player_id: str) -> str:
        p = self._players.get(player_id)
        return p.name if p else player_id


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------

@dataclass
class TeamRoster:
    """Lineup and rotation for one team, as ids into a registry."""
    name: str
    registry: PlayerRegistry
    lineup: list[str] = field(default_factory=list)
    rotation: list[str] = field(default_factory=list)
    rotation_index: int = 0

    def batter_at(self, index: int) -> Player:
        """Batter in lineup slot ``index`` (wraps at lineup length)."""
        if not self.lineup:
            raise MissingLineupError(f"No lineup set for {self.name}", self.name)
        return self.registry.get(self.lineup[index % len(self.lineup)])

    def current_pitcher(self) -> Player:
        """The scheduled starter; one pitcher works the whole game."""
        if not self.rotation:
            raise MissingPitcherError(f"No pitcher for {self.name}", self.name)
        return self.registry.get(self.rotation[self.rotation_index % len(self.rotation)])

    def advance_rotation(self) -> None:
        """Move to the next starter. Called by the caller between games."""
        if self.rotation:
            self.rotation_index = (self.rotation_index + 1) % len(self.rotation)

    def defense(self) -> FieldingRatings | None:
        """Average fielding ratings of the players in the lineup."""
        players = [self.registry.get(pid) for pid in self.lineup if pid in self.registry]
        if not players:
            return None
        n = len(players)
        return FieldingRatings(
            range=round(sum(p.fielding.range for p in players) / n),
            arm=round(sum(p.fielding.arm for p in players) / n),
            reaction=round(sum(p.fielding.reaction for p in players) / n),
        )


def build_team(registry: PlayerRegistry, team_data: dict) -> TeamRoster:
    """Register a team's players and return its roster."""
    lineup = [registry.register(Player.from_roster_dict(p)).player_id
              for p in team_data.get("lineup", [])]
    rotation = [registry.register(Player.from_roster_dict(p)).player_id
                for p in team_data.get("rotation", [])]
    return TeamRoster(
        name=team_data["team_name"],
        registry=registry,
        lineup=lineup,
        rotation=rotation,
    )


def build_teams(rosters: dict, registry: PlayerRegistry | None = None
                ) -> tuple[TeamRoster, TeamRoster]:
    """Return ``(home, away)`` rosters sharing one registry."""
    if registry is None:
        registry = PlayerRegistry()
    home = build_team(registry, rosters["home"])
    away = build_team(registry, rosters["away"])
    return home, away
