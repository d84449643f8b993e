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
"""Action outcome variants produced by possession resolution.

``ActionOutcome`` is a closed union of three frozen dataclasses. Consumers
dispatch with ``isinstance`` chains that end in ``TypeError`` so that a new
variant cannot be silently ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from .probability import EMPTY_EXPLAIN, Explain


@dataclass(frozen=True)
class DriveOutcome:
    """Result of a drive to the basket.

    Parameters
    ----------
    blowby : bool
        Driver beat the defender.
    foul : bool
        Defender committed a shooting foul.
    turnover : bool
        Driver lost the ball while handling.
    explain : Explain
        Blow-by model breakdown.
    foul_explain : Explain
        Foul model breakdown.
    """

    kind: ClassVar[str] = "drive"

    blowby: bool = False
    foul: bool = False
    turnover: bool = False
    explain: Explain = EMPTY_EXPLAIN
    foul_explain: Explain = EMPTY_EXPLAIN


@dataclass(frozen=True)
class ShotOutcome:
    """Result of a field-goal attempt.

    Parameters
    ----------
    make : bool
        Shot went in.
    fouled : bool
        Shooter was fouled.
    three : bool
        Attempt came from beyond the arc.
    zone : str
        Shot zone of the attempt.
    explain : Explain
        Make model breakdown.
    foul_explain : Explain
        Foul model breakdown.
    """

    kind: ClassVar[str] = "shot"

    make: bool = False
    fouled: bool = False
    three: bool = False
    zone: str = "mid"
    explain: Explain = EMPTY_EXPLAIN
    foul_explain: Explain = EMPTY_EXPLAIN

    @property
    def points(self) -> int:
        """Return the field-goal value of a made, unfouled attempt."""
        if not self.make or self.fouled:
            return 0
        return 3 if self.three else 2


@dataclass(frozen=True)
class PassOutcome:
    """Result of a pass or plain ball movement.

    Parameters
    ----------
    complete : bool
        Pass reached a teammate.
    turnover : bool
        Pass was lost to the defence.
    target : str | None
        Receiver id for a completed pick-and-roll pass.
    explain : Explain
        Completion model breakdown; empty for ball movement.
    """

    kind: ClassVar[str] = "pass"

    complete: bool = True
    turnover: bool = False
    target: Optional[str] = None
    explain: Explain = EMPTY_EXPLAIN


ActionOutcome = Union[DriveOutcome, ShotOutcome, PassOutcome]


def describe_outcome(outcome: ActionOutcome) -> str:
    """Return a short human-readable summary of an outcome.

    Parameters
    ----------
    outcome : ActionOutcome
        Outcome to summarise.

    Returns
    -------
    str
        Summary such as ``"three made"`` or ``"drive stopped"``.

    Raises
    ------
    TypeError
        If ``outcome`` is not one of the known variants.
    """
    if isinstance(outcome, ShotOutcome):
        label = "three" if outcome.three else f"{outcome.zone} two"
        if outcome.fouled:
            return f"{label} fouled"
        return f"{label} {'made' if outcome.make else 'missed'}"
    if isinstance(outcome, DriveOutcome):
        if outcome.turnover:
            return "drive turnover"
        if outcome.foul:
            return "drive fouled"
        return "drive blow-by" if outcome.blowby else "drive stopped"
    if isinstance(outcome, PassOutcome):
        if outcome.turnover or not outcome.complete:
            return "pass turnover"
        return f"pass to {outcome.target}" if outcome.target else "ball movement"
    raise TypeError(f"Unknown action outcome: {type(outcome).__name__}")


def is_turnover(outcome: ActionOutcome) -> bool:
    """Return whether an outcome gives the ball away without a shot.

    Parameters
    ----------
    outcome : ActionOutcome
        Outcome to inspect.

    Returns
    -------
    bool
        ``True`` for drive turnovers and failed passes.

    Raises
    ------
    TypeError
        If ``outcome`` is not one of the known variants.
    """
    if isinstance(outcome, ShotOutcome):
        return False
    if isinstance(outcome, DriveOutcome):
        return outcome.turnover
    if isinstance(outcome, PassOutcome):
        return outcome.turnover or not outcome.complete
    raise TypeError(f"Unknown action outcome: {type(outcome).__name__}")


__all__ = ["ActionOutcome", "DriveOutcome", "PassOutcome", "ShotOutcome", "describe_outcome", "is_turnover"]
