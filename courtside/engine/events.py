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
"""Play-by-play records emitted by the possession engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional

from .outcomes import describe_outcome

if TYPE_CHECKING:  # pragma: no cover
    from .outcomes import ActionOutcome
    from .rebound import ReboundResult
    from .spatial import Position

RecordKind = Literal["action", "rebound"]


@dataclass(frozen=True)
class PlayRecord:
    """Snapshot of a resolved action or rebound.

    Parameters
    ----------
    possession : int
        Possession number within the game.
    player_id : str
        Acting player (the ball-handler, or the rebounder).
    team_id : str
        Team of the acting player.
    action : str
        Action chosen by the policy, or ``"rebound"``.
    resolved_action : str
        Action actually resolved after conversion, or ``"rebound"``.
    side : Literal["home", "away"]
        Whether the acting team is the home side.
    game_clock : float
        Game seconds remaining when the play happened.
    quarter : int
        Quarter in which the play happened.
    position : Position | None, optional
        Court position of the acting player.
    outcome : ActionOutcome | None, optional
        Outcome of an action record.
    rebound : ReboundResult | None, optional
        Result of a rebound record.
    kind : RecordKind, default="action"
        Whether the record describes an action or a rebound.
    """

    possession: int
    player_id: str
    team_id: str
    action: str
    resolved_action: str
    side: Literal["home", "away"]
    game_clock: float
    quarter: int
    position: Optional["Position"] = None
    outcome: Optional["ActionOutcome"] = None
    rebound: Optional["ReboundResult"] = None
    kind: RecordKind = "action"

    @property
    def description(self) -> str:
        """Return a human-readable summary of the play."""
        if self.kind == "rebound" and self.rebound is not None:
            side = "offensive" if self.rebound.offense_won else "defensive"
            extra = " (tipped out)" if self.rebound.tip_out else ""
            return f"{self.player_id} {side} rebound{extra}"
        if self.outcome is None:
            return f"{self.player_id} {self.resolved_action}"
        action = self.resolved_action if self.resolved_action == self.action else f"{self.action}->{self.resolved_action}"
        return f"{self.player_id} {action}: {describe_outcome(self.outcome)}"


__all__ = ["PlayRecord", "RecordKind"]
