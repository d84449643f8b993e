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
"""Tests for ball-handling movement resolution."""

import random
from dataclasses import fields
from typing import List

import pytest

from courtside.engine.movement import MOVEMENT_KINDS, MovementContext, MovementResolver
from courtside.models.player import Player, Ratings


class ScriptedRandom(random.Random):
    """Random stream that replays a fixed list of draws."""

    def __init__(self, draws: List[float]) -> None:
        super().__init__(0)
        self.draws = list(draws)

    def random(self) -> float:
        return self.draws.pop(0)


def _context(handle: int = 50, speed: int = 50, defender_distance: float = 5.0) -> MovementContext:
    values = {item.name: 50 for item in fields(Ratings) if item.name not in ("height_in", "wingspan_in")}
    values.update(handle=handle, speed=speed)
    player = Player("h1", "Handler", Ratings(**values))
    return MovementContext(player, defender_distance, open_lanes=0.5, spacing=0.6, fatigue=0.1)


class TestExecuteMovement:
    """Tests for execute_movement."""

    def test_unknown_movement(self) -> None:
        """Unknown movement kinds are rejected."""
        with pytest.raises(ValueError, match="Unknown movement"):
            MovementResolver().execute_movement("spin", _context(), random.Random(1))  # type: ignore[arg-type]

    def test_successful_drive(self) -> None:
        """A successful drive moves the handler toward the basket."""
        outcome = MovementResolver().execute_movement("drive", _context(speed=50), ScriptedRandom([0.0, 0.99]))
        assert outcome.success
        assert not outcome.turnover
        assert outcome.dribbles == 3
        assert outcome.position_delta == pytest.approx((-3.0, 0.0))
        assert outcome.separation_gained == 2.0
        assert outcome.time_elapsed == pytest.approx(1.5 * 1.25)

    def test_failed_movement_adds_a_dribble(self) -> None:
        """A failed move gains nothing and may cost an extra dribble."""
        outcome = MovementResolver().execute_movement("crossover", _context(), ScriptedRandom([0.99, 0.99, 0.99]))
        assert not outcome.success
        assert outcome.dribbles == 3
        assert outcome.position_delta == (0.0, 0.0)
        assert outcome.separation_gained == 0.0

    def test_crossover_direction_draw(self) -> None:
        """A successful crossover draws its lateral direction."""
        outcome = MovementResolver().execute_movement("crossover", _context(), ScriptedRandom([0.0, 0.9, 0.99]))
        assert outcome.position_delta[0] == 0.0
        assert outcome.position_delta[1] == pytest.approx(1.5)

    @pytest.mark.parametrize("kind", MOVEMENT_KINDS)
    def test_every_kind_is_deterministic(self, kind: str) -> None:
        """Identical seeds reproduce identical outcomes."""
        resolver = MovementResolver()
        first = resolver.execute_movement(kind, _context(), random.Random(11))  # type: ignore[arg-type]
        second = resolver.execute_movement(kind, _context(), random.Random(11))  # type: ignore[arg-type]
        assert first == second

    def test_tight_defence_lowers_success(self) -> None:
        """Close guarding reduces the success rate."""
        resolver = MovementResolver()
        loose = resolver._success_rate("dribble", _context(defender_distance=9.0))
        tight = resolver._success_rate("dribble", _context(defender_distance=1.0))
        assert tight < loose
        assert 0.1 <= tight <= 0.95


class TestTurnovers:
    """Tests for the handling turnover roll."""

    def test_perfect_handle_never_loses_the_ball(self) -> None:
        """A 100 handle zeroes the turnover rate."""
        assert not MovementResolver().check_for_turnover(4, 100, 1.0, 1.0, ScriptedRandom([0.0]))

    def test_pressure_and_fatigue_raise_the_rate(self) -> None:
        """A draw that survives calm handling is lost under pressure."""
        resolver = MovementResolver()
        assert not resolver.check_for_turnover(2, 50, 0.0, 0.0, ScriptedRandom([0.025]))
        assert resolver.check_for_turnover(2, 50, 1.0, 1.0, ScriptedRandom([0.025]))


class TestDribbleEstimates:
    """Tests for calculate_dribbles_for_action."""

    @pytest.mark.parametrize(
        "action, handle, pressure, expected",
        [
            ("catchShoot", 50, 0.9, 0),
            ("pullup", 50, 0.0, 1),
            ("pullup", 50, 0.6, 2),
            ("drive", 90, 0.0, 2),
            ("drive", 10, 0.0, 4),
            ("post", 50, 0.5, 1),
            ("reset", 50, 0.5, 1),
        ],
    )
    def test_dribbles(self, action: str, handle: float, pressure: float, expected: int) -> None:
        """Dribble counts follow action, handle and pressure."""
        assert MovementResolver().calculate_dribbles_for_action(action, handle, pressure) == expected
