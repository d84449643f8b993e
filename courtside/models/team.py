# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Team domain model."""
from dataclasses import dataclass
from typing import List, Optional

from courtside.models.player import Player

LINEUP_SIZE = 5


@dataclass
class Team:
    """Roster plus the tactical defaults a team plays with.

    Parameters
    ----------
    team_id : str
        Unique identifier for the team.
    name : str
        Display name for the team.
    players : List[Player]
        Ordered roster; the first five players form the on-court lineup.
    set_play : str, default="1-out-4"
        Offensive set the team runs at the start of each possession.
    defensive_scheme : str, default="man"
        Defensive scheme the team plays.
    """

    team_id: str
    name: str
    players: List[Player]
    set_play: str = "1-out-4"
    defensive_scheme: str = "man"

    def __post_init__(self) -> None:
        """Validate that the roster holds a full lineup with unique ids."""
        if len(self.players) < LINEUP_SIZE:
            raise ValueError(f"Team must have at least {LINEUP_SIZE} players")
        ids = [p.player_id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError("Player ids must be unique within a team")

    @property
    def lineup(self) -> List[Player]:
        """Return the five players currently on the court."""
        return self.players[:LINEUP_SIZE]

    def get_player(self, player_id: str) -> Optional[Player]:
        """Look up a rostered player by id.

        Parameters
        ----------
        player_id : str
            Identifier to search for.

        Returns
        -------
        Player | None
            Matching player, or ``None`` when not on the roster.
        """
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def has_player(self, player_id: str) -> bool:
        """Return whether ``player_id`` is on the roster.

        Parameters
        ----------
        player_id : str
            Identifier to search for.

        Returns
        -------
        bool
            ``True`` when the player is rostered.
        """
        return self.get_player(player_id) is not None

    def get_players_by_position(self, position: str) -> List[Player]:
        """Get all players listed at a position.

        Parameters
        ----------
        position : str
            Position code to filter by (for example ``"PG"``).

        Returns
        -------
        List[Player]
            Players whose listed position matches ``position``.
        """
        return [p for p in self.players if p.position == position]
