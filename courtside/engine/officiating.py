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
"""Foul bookkeeping and free-throw awards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Literal, Optional

from .config import ENGINE_CONFIG

if TYPE_CHECKING:  # pragma: no cover
    from courtside.utils.debug import MatchDebugger

FoulType = Literal["shooting", "personal", "flagrant", "technical"]


@dataclass(slots=True)
class FoulRecord:
    """Single foul charged by the officials.

    Parameters
    ----------
    player_id : str
        Player charged with the foul.
    team_id : str
        Team of the fouling player.
    foul_type : FoulType
        Category of foul.
    quarter : int
        Quarter in which the foul occurred.
    game_clock : float
        Game seconds remaining when the foul occurred.
    """

    player_id: str
    team_id: str
    foul_type: FoulType
    quarter: int
    game_clock: float

    @property
    def awards_free_throws(self) -> bool:
        """Return ``True`` when this foul type sends a shooter to the line."""
        return self.foul_type in ("shooting", "flagrant", "technical")


@dataclass
class FoulTracker:
    """Running foul counts for a game.

    The tracker outlives individual possessions and is carried from one
    possession state to the next by the game driver.

    Parameters
    ----------
    player_fouls : Dict[str, int], optional
        Personal fouls per player.
    team_fouls : Dict[str, int], optional
        Game fouls per team.
    quarter_fouls : Dict[str, int], optional
        Fouls per team in the current quarter.
    history : List[FoulRecord], optional
        Every foul in the order it was called.
    debugger : MatchDebugger | None, optional
        Optional logging helper notified of every foul.
    """

    player_fouls: Dict[str, int] = field(default_factory=dict)
    team_fouls: Dict[str, int] = field(default_factory=dict)
    quarter_fouls: Dict[str, int] = field(default_factory=dict)
    history: List[FoulRecord] = field(default_factory=list)
    debugger: Optional["MatchDebugger"] = None

    def record_foul(
        self,
        player_id: str,
        team_id: str,
        foul_type: FoulType,
        quarter: int,
        game_clock: float,
    ) -> FoulRecord:
        """Charge a foul to a player and team.

        Parameters
        ----------
        player_id : str
            Player committing the foul.
        team_id : str
            Team of the fouling player.
        foul_type : FoulType
            Category of foul.
        quarter : int
            Current quarter.
        game_clock : float
            Game seconds remaining.

        Returns
        -------
        FoulRecord
            The recorded foul.
        """
        record = FoulRecord(player_id, team_id, foul_type, quarter, game_clock)
        self.player_fouls[player_id] = self.player_fouls.get(player_id, 0) + 1
        self.team_fouls[team_id] = self.team_fouls.get(team_id, 0) + 1
        self.quarter_fouls[team_id] = self.quarter_fouls.get(team_id, 0) + 1
        self.history.append(record)

        if self.debugger is not None:
            self.debugger.log_game_event(
                game_clock,
                "FOUL",
                f"{foul_type} foul on {player_id} ({team_id}) | "
                f"Personal: {self.player_fouls[player_id]} | Team Q{quarter}: {self.quarter_fouls[team_id]}",
            )
        return record

    def reset_quarter(self) -> None:
        """Clear the per-quarter team foul counts."""
        self.quarter_fouls.clear()

    def has_fouled_out(self, player_id: str) -> bool:
        """Return whether a player has reached the disqualification limit.

        Parameters
        ----------
        player_id : str
            Player to check.

        Returns
        -------
        bool
            ``True`` once the player's personal fouls reach the limit.
        """
        return self.player_fouls.get(player_id, 0) >= ENGINE_CONFIG.officiating.foul_out_limit


def free_throws_awarded(foul_type: str, is_three: bool = False) -> int:
    """Return the free throws a foul is worth.

    Parameters
    ----------
    foul_type : str
        Category of foul.
    is_three : bool, default=False
        Whether a shooting foul came on a three-point attempt.

    Returns
    -------
    int
        Attempts awarded; zero for non-shooting personal fouls.
    """
    table = ENGINE_CONFIG.officiating.free_throws
    if foul_type == "shooting" and is_three:
        return table["shooting_three"]
    return table.get(foul_type, 0)


__all__ = ["FoulRecord", "FoulTracker", "FoulType", "free_throws_awarded"]
