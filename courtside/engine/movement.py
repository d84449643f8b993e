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
"""Dribble and drive micro-actions executed by the ball-handler."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Tuple

from .config import ENGINE_CONFIG, EngineConfig
from .probability import clamp

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.player import Player

MovementKind = Literal["dribble", "drive", "crossover", "hesitation", "stepback", "jab", "pivot"]

MOVEMENT_KINDS: Tuple[MovementKind, ...] = ("dribble", "drive", "crossover", "hesitation", "stepback", "jab", "pivot")


@dataclass(frozen=True)
class MovementContext:
    """Situation in which a movement is attempted.

    Parameters
    ----------
    player : Player
        Ball-handler attempting the movement.
    defender_distance : float
        Feet between the handler and the primary defender.
    open_lanes : float
        Open-lane fraction.
    spacing : float
        Offensive spacing score.
    fatigue : float
        Handler fatigue as a fraction.
    """

    player: "Player"
    defender_distance: float
    open_lanes: float
    spacing: float
    fatigue: float


@dataclass(frozen=True)
class MovementOutcome:
    """Result of a movement attempt.

    Parameters
    ----------
    kind : MovementKind
        Movement that was attempted.
    success : bool
        Whether the movement achieved its purpose.
    dribbles : int
        Dribbles used.
    time_elapsed : float
        Seconds consumed.
    position_delta : Tuple[float, float]
        Displacement in the attack-left frame (negative ``x`` is toward the basket).
    separation_gained : float
        Feet of separation created from the defender.
    turnover : bool
        Whether the handler lost the ball.
    """

    kind: MovementKind
    success: bool
    dribbles: int
    time_elapsed: float
    position_delta: Tuple[float, float]
    separation_gained: float
    turnover: bool


@dataclass
class MovementResolver:
    """Resolve ball-handling micro-actions against a possession RNG.

    Parameters
    ----------
    config : EngineConfig, optional
        Configuration override; defaults to ``ENGINE_CONFIG``.
    """

    config: EngineConfig = field(default_factory=lambda: ENGINE_CONFIG)

    def execute_movement(self, kind: MovementKind, context: MovementContext, rng: random.Random) -> MovementOutcome:
        """Attempt a movement and report its outcome.

        Random draws happen in a fixed order: success, an extra dribble on
        failure, the crossover direction on a successful crossover, then the
        turnover check.

        Parameters
        ----------
        kind : MovementKind
            Movement to attempt.
        context : MovementContext
            Situation of the attempt.
        rng : random.Random
            Possession random stream.

        Returns
        -------
        MovementOutcome
            Outcome of the attempt.

        Raises
        ------
        ValueError
            If ``kind`` is not a known movement.
        """
        cfg = self.config.movement
        if kind not in cfg.base_success:
            raise ValueError(f"Unknown movement '{kind}'. Known movements: {', '.join(MOVEMENT_KINDS)}")

        ratings = context.player.ratings
        success = rng.random() < self._success_rate(kind, context)

        dribbles = cfg.dribbles[kind]
        if not success:
            dribbles += math.floor(rng.random() * 2)

        speed_factor = ratings.speed / 100
        time_elapsed = cfg.base_time[kind] * (1.5 - speed_factor * cfg.time_speed_relief)
        delta = self._position_delta(kind, success, speed_factor, rng)
        separation = cfg.separation[kind] if success else 0.0

        pressure = clamp(1 - context.defender_distance / cfg.pressure_distance, 0.0, 1.0)
        turnover = self.check_for_turnover(dribbles, ratings.handle, pressure, context.fatigue, rng)

        return MovementOutcome(kind, success, dribbles, time_elapsed, delta, separation, turnover)

    def check_for_turnover(
        self,
        dribbles: int,
        handle_rating: float,
        pressure: float,
        fatigue: float,
        rng: random.Random,
    ) -> bool:
        """Roll for a ball-handling turnover.

        Parameters
        ----------
        dribbles : int
            Dribbles taken during the movement.
        handle_rating : float
            Handler's handle rating.
        pressure : float
            Defensive pressure in ``[0, 1]``.
        fatigue : float
            Handler fatigue as a fraction.
        rng : random.Random
            Possession random stream.

        Returns
        -------
        bool
            ``True`` when the ball is lost.
        """
        cfg = self.config.movement
        rate = max(cfg.min_turnover, dribbles * cfg.turnover_per_dribble)
        rate *= (100 - handle_rating) / 100
        rate *= 1 + pressure * cfg.turnover_pressure
        rate *= 1 + fatigue * cfg.turnover_fatigue
        return rng.random() < rate

    def calculate_dribbles_for_action(self, action: str, handle_rating: float, pressure: float) -> int:
        """Estimate the dribbles a with-ball action needs.

        Parameters
        ----------
        action : str
            With-ball action name.
        handle_rating : float
            Handler's handle rating.
        pressure : float
            Defensive pressure in ``[0, 1]``.

        Returns
        -------
        int
            Dribble count used for assist eligibility.
        """
        if action == "catchShoot":
            return 0
        if action == "pullup":
            return min(2, math.floor(pressure * 2) + 1)
        if action == "drive":
            return min(4, math.floor((100 - handle_rating) / 20) + 2)
        if action == "post":
            return math.floor(pressure) + 1
        return 1

    def _success_rate(self, kind: MovementKind, context: MovementContext) -> float:
        """Combine the base success rate with situational modifiers.

        Parameters
        ----------
        kind : MovementKind
            Movement being attempted.
        context : MovementContext
            Situation of the attempt.

        Returns
        -------
        float
            Success probability within the configured clamp.
        """
        cfg = self.config.movement
        floor, skill_range = cfg.base_success[kind]
        rate = floor + skill_range * context.player.ratings.handle / 100
        if context.defender_distance < cfg.close_guard_distance:
            rate *= cfg.close_guard_factor
        elif context.defender_distance < cfg.tight_guard_distance:
            rate *= cfg.tight_guard_factor
        rate *= 1 + context.open_lanes * cfg.lane_bonus
        rate *= 1 + context.spacing * cfg.spacing_bonus
        rate *= 1 - context.fatigue * cfg.fatigue_penalty
        return clamp(rate, cfg.min_success, cfg.max_success)

    def _position_delta(
        self,
        kind: MovementKind,
        success: bool,
        speed_factor: float,
        rng: random.Random,
    ) -> Tuple[float, float]:
        """Return the displacement produced by a movement.

        Parameters
        ----------
        kind : MovementKind
            Movement being attempted.
        success : bool
            Whether the movement succeeded; failures do not move the handler.
        speed_factor : float
            Handler speed as a fraction.
        rng : random.Random
            Possession random stream, used for the crossover direction.

        Returns
        -------
        Tuple[float, float]
            Displacement in the attack-left frame.
        """
        if not success:
            return (0.0, 0.0)
        step = speed_factor * self.config.movement.step_distance
        if kind == "drive":
            return (-step * 2, 0.0)
        if kind == "stepback":
            return (step, 0.0)
        if kind == "crossover":
            return (0.0, step if rng.random() > 0.5 else -step)
        if kind == "hesitation":
            return (-step * 0.5, 0.0)
        return (0.0, 0.0)


__all__ = ["MOVEMENT_KINDS", "MovementContext", "MovementKind", "MovementOutcome", "MovementResolver"]
