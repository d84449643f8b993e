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
"""Tests for offensive sets and defensive layouts."""

import pytest

from courtside.engine.formation import DEFENSIVE_SCHEMES, FormationManager
from courtside.engine.spatial import Position
from courtside.utils.generator import generate_team


@pytest.fixture
def offense():
    """Generated offensive team."""
    return generate_team("OFF", "Offense", seed=1)


@pytest.fixture
def defense():
    """Generated defensive team."""
    return generate_team("DEF", "Defense", seed=2)


class TestOffensiveFormation:
    """Tests for set-play layouts."""

    def test_default_set_play_layout(self, offense) -> None:
        """The lineup fills the 1-out-4 slots in order with the ball at the point."""
        formation = FormationManager().create_offensive_formation(offense, True)
        assert formation.player_ids() == [p.player_id for p in offense.lineup]
        assert formation.position_of("OFF-1") == Position(25.0, 25.0)
        assert formation.ball_handler == "OFF-1"
        assert formation.ball_position == Position(25.0, 25.0)

    def test_layout_mirrors_for_right_basket(self, offense) -> None:
        """Attacking right reflects every slot across half court."""
        formation = FormationManager().create_offensive_formation(offense, False, "5-out")
        assert formation.position_of("OFF-1") == Position(94.0 - 28.0, 25.0)
        assert not formation.attacking_left

    def test_requested_ball_handler(self, offense) -> None:
        """A named handler starts with the ball; unknown ids fall back to slot one."""
        manager = FormationManager()
        formation = manager.create_offensive_formation(offense, True, ball_handler="OFF-3")
        assert formation.ball_handler == "OFF-3"
        assert formation.ball_position == formation.position_of("OFF-3")
        fallback = manager.create_offensive_formation(offense, True, ball_handler="OFF-10")
        assert fallback.ball_handler == "OFF-1"

    def test_unknown_set_play(self, offense) -> None:
        """Unknown set plays are rejected with the known names."""
        with pytest.raises(ValueError, match="Unknown set play"):
            FormationManager().create_offensive_formation(offense, True, "triangle")

    def test_known_set_plays(self) -> None:
        """Every configured set play is listed."""
        assert {"1-out-4", "4-out-1-in", "5-out", "dribble-drive"} <= set(FormationManager().known_set_plays())


class TestDefensiveFormation:
    """Tests for scheme layouts."""

    def test_man_defenders_sit_toward_the_basket(self, offense, defense) -> None:
        """Man defenders shade 2.5 feet toward the defended basket."""
        manager = FormationManager()
        off = manager.create_offensive_formation(offense, True)
        formation = manager.create_defensive_formation(defense, "man", off, True)
        assert formation.position_of("DEF-1").x == pytest.approx(22.5)
        assert formation.position_of("DEF-1").y == pytest.approx(25.0)
        assert formation.ball_position == off.ball_position

    def test_zone_layout(self, offense, defense) -> None:
        """Zone spots are fixed regardless of the offence."""
        manager = FormationManager()
        off = manager.create_offensive_formation(offense, True)
        formation = manager.create_defensive_formation(defense, "zone2-3", off, True)
        assert formation.position_of("DEF-1") == Position(25.0, 15.0)
        mirrored = manager.create_defensive_formation(defense, "zone2-3", off, False)
        assert mirrored.position_of("DEF-1") == Position(69.0, 15.0)

    def test_press_layout(self, offense, defense) -> None:
        """The press puts one defender on the ball and one trapping."""
        manager = FormationManager()
        off = manager.create_offensive_formation(offense, True)
        formation = manager.create_defensive_formation(defense, "fullCourt", off, True)
        assert formation.position_of("DEF-1") == Position(22.0, 25.0)
        assert formation.position_of("DEF-2") == Position(22.0, 20.0)
        assert len(formation.positions) == 5

    @pytest.mark.parametrize("scheme", DEFENSIVE_SCHEMES)
    def test_every_scheme_places_five_in_bounds(self, offense, defense, scheme: str) -> None:
        """All schemes place a full unit on the floor."""
        manager = FormationManager()
        off = manager.create_offensive_formation(offense, False)
        formation = manager.create_defensive_formation(defense, scheme, off, False)
        assert len(formation.positions) == 5
        assert all(0 <= spot.x <= 94 and 0 <= spot.y <= 50 for spot in formation.positions.values())

    def test_unknown_scheme(self, offense, defense) -> None:
        """Unknown schemes raise ValueError."""
        manager = FormationManager()
        off = manager.create_offensive_formation(offense, True)
        with pytest.raises(ValueError, match="Unknown defensive scheme"):
            manager.create_defensive_formation(defense, "box-and-one", off, True)


class TestFormationUpdates:
    """Tests for immutable updates and analysis."""

    def test_with_player_returns_new_version(self, offense) -> None:
        """Relocating a player never mutates the original snapshot."""
        formation = FormationManager().create_offensive_formation(offense, True)
        moved = formation.with_player("OFF-2", Position(30.0, 30.0))
        assert moved.version == formation.version + 1
        assert formation.position_of("OFF-2") == Position(20.0, 15.0)
        assert moved.position_of("OFF-2") == Position(30.0, 30.0)

    def test_ball_movement_is_clamped(self, offense) -> None:
        """Ball updates stay on the floor and record the new handler."""
        manager = FormationManager()
        formation = manager.create_offensive_formation(offense, True)
        updated = manager.update_formation_after_ball_movement(formation, Position(-5.0, 20.0), "OFF-4")
        assert updated.ball_position == Position(0.0, 20.0)
        assert updated.ball_handler == "OFF-4"
        assert updated.positions == formation.positions

    def test_analysis_metrics_in_range(self, offense) -> None:
        """Shape metrics are bounded and a full unit has full coverage."""
        manager = FormationManager()
        analysis = manager.analyze_formation(manager.create_offensive_formation(offense, True))
        assert 0.0 < analysis.spacing <= 1.0
        assert 0.0 < analysis.balance <= 1.0
        assert analysis.coverage == 1.0
