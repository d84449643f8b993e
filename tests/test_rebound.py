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
"""Tests for rebound trajectories, box-outs and contests."""

import random
from typing import List, Optional

import pytest

from courtside.engine.formation import FormationManager
from courtside.engine.rebound import ReboundResolver
from courtside.engine.spatial import Position
from courtside.utils.generator import generate_team


class ScriptedRandom(random.Random):
    """Random stream that replays a fixed list of draws."""

    def __init__(self, draws: List[float]) -> None:
        super().__init__(0)
        self.draws = list(draws)

    def random(self) -> float:
        return self.draws.pop(0)


class RecordingDebugger:
    """Collects rebound log calls."""

    def __init__(self) -> None:
        self.rebounds: list = []

    def log_rebound(
        self, winner: str, offense_won: bool, contested: bool, tip_out: bool, trajectory: Optional[str]
    ) -> None:
        self.rebounds.append((winner, offense_won, contested, tip_out, trajectory))


def _setup(attacking_left: bool = True):
    offense = generate_team("OFF", "Offense", seed=5)
    defense = generate_team("DEF", "Defense", seed=6)
    manager = FormationManager()
    off = manager.create_offensive_formation(offense, attacking_left)
    dfn = manager.create_defensive_formation(defense, "man", off, attacking_left)
    return offense, defense, off, dfn


class TestTrajectory:
    """Tests for carom selection and landing spots."""

    def test_high_quality_misses_come_off_soft(self) -> None:
        """Good looks usually produce soft caroms."""
        resolver = ReboundResolver()
        assert resolver.determine_trajectory("three", 0.9, ScriptedRandom([0.0])) == "soft"
        assert resolver.determine_trajectory("three", 0.9, ScriptedRandom([0.99])) == "short"

    def test_zone_tendencies_without_quality(self) -> None:
        """Without a quality the zone odds apply."""
        resolver = ReboundResolver()
        assert resolver.determine_trajectory("three", None, ScriptedRandom([0.1])) == "long"
        assert resolver.determine_trajectory("three", None, ScriptedRandom([0.9])) == "hard"
        assert resolver.determine_trajectory("close", 0.5, ScriptedRandom([0.1])) == "soft"

    def test_straight_on_landing(self) -> None:
        """A miss from straight away comes back along the same line."""
        resolver = ReboundResolver()
        landing = resolver.landing_spot(Position(25.0, 25.0), "soft", True)
        assert landing.x == pytest.approx(11.25)
        assert landing.y == pytest.approx(25.0)

    def test_long_caroms_kick_to_the_weak_side(self) -> None:
        """Hard and long misses land on the opposite side of the rim."""
        resolver = ReboundResolver()
        shot = Position(15.25, 35.0)
        assert resolver.landing_spot(shot, "soft", True).y > 25.0
        assert resolver.landing_spot(shot, "hard", True).y < 25.0

    def test_landing_mirrors_for_right_basket(self) -> None:
        """The same miss at the other end lands at the mirrored spot."""
        resolver = ReboundResolver()
        left = resolver.landing_spot(Position(15.25, 35.0), "soft", True)
        right = resolver.landing_spot(Position(94.0 - 15.25, 35.0), "soft", False)
        assert right.x == pytest.approx(94.0 - left.x)
        assert right.y == pytest.approx(left.y)


class TestContest:
    """Tests for resolve_rebound."""

    def test_box_outs_pair_shadowing_defenders(self) -> None:
        """Man defenders box out the offender they are shading."""
        offense, defense, off, dfn = _setup()
        box_outs = ReboundResolver().determine_box_outs(offense, defense, off, dfn)
        assert box_outs == {f"DEF-{i}": f"OFF-{i}" for i in range(1, 6)}

    def test_exactly_one_winner(self) -> None:
        """The winner is one of the ten participants and its side is consistent."""
        offense, defense, off, dfn = _setup()
        result = ReboundResolver().resolve_rebound(
            offense, defense, off, dfn, random.Random(3), True, Position(20.0, 30.0), shot_quality=0.5
        )
        ids = [p.player_id for p in result.participants]
        assert len(ids) == 10
        assert ids.count(result.winner) == 1
        assert result.offense_won == offense.has_player(result.winner)
        assert result.trajectory in ("short", "soft", "hard", "long")
        assert result.landing is not None

    def test_contest_is_deterministic(self) -> None:
        """The same seed produces the same rebound."""
        offense, defense, off, dfn = _setup(False)
        resolver = ReboundResolver()
        first = resolver.resolve_rebound(offense, defense, off, dfn, random.Random(9), False, Position(70.0, 10.0))
        second = resolver.resolve_rebound(offense, defense, off, dfn, random.Random(9), False, Position(70.0, 10.0))
        assert first == second

    def test_participants_are_ranked_by_weight(self) -> None:
        """Participants are reported heaviest first."""
        offense, defense, off, dfn = _setup()
        result = ReboundResolver().resolve_rebound(
            offense, defense, off, dfn, random.Random(1), True, Position(10.0, 25.0)
        )
        weights = [p.weight for p in result.participants]
        assert weights == sorted(weights, reverse=True)

    def test_fallback_without_location(self) -> None:
        """Without a shot location the positionless contest runs."""
        offense, defense, off, dfn = _setup()
        debugger = RecordingDebugger()
        result = ReboundResolver(debugger=debugger).resolve_rebound(
            offense, defense, off, dfn, random.Random(2), True
        )
        assert result.trajectory is None
        assert result.landing is None
        assert not result.contested
        assert len(result.participants) == 10
        assert debugger.rebounds == [(result.winner, result.offense_won, False, False, None)]

