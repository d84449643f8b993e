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
"""Tests for utility modules (generator, roster, debug)."""

import json
import random
from pathlib import Path

import pytest

from courtside.models.player import Tendencies
from courtside.utils.debug import MatchDebugger
from courtside.utils.generator import generate_random_player, generate_team
from courtside.utils.roster import load_teams_from_json, player_from_dict


class TestGenerator:
    """Tests for generator utility functions."""

    def test_generate_random_player(self) -> None:
        """Test generating a random player."""
        player = generate_random_player("X-1", rng=random.Random(3))
        assert player.player_id == "X-1"
        assert isinstance(player.name, str)
        assert len(player.name) > 0
        assert player.position in {"PG", "SG", "SF", "PF", "C"}
        assert 0 <= player.ratings.three <= 99
        assert 19 <= player.age <= 36

    def test_generate_random_player_with_position(self) -> None:
        """Position-important ratings are boosted."""
        player = generate_random_player("X-2", name="Big Man", position="C", rng=random.Random(4))
        assert player.position == "C"
        assert player.name == "Big Man"
        assert player.ratings.rebound >= 60
        assert player.ratings.height_in >= 81
        assert sum(player.tendencies.with_ball) == pytest.approx(1.0)

    def test_generate_team(self) -> None:
        """Test generating a complete team."""
        team = generate_team("HOM", "Test Hoopers", seed=1, set_play="5-out", defensive_scheme="zone3-2")
        assert team.team_id == "HOM"
        assert team.name == "Test Hoopers"
        assert len(team.players) == 10
        assert team.players[0].player_id == "HOM-1"
        assert [p.position for p in team.lineup] == ["PG", "SG", "SF", "PF", "C"]
        assert team.set_play == "5-out"
        assert team.defensive_scheme == "zone3-2"

    def test_generate_team_is_seeded(self) -> None:
        """The same seed builds the same roster."""
        first = generate_team("A", "Same", seed=9)
        second = generate_team("A", "Same", seed=9)
        assert [p.ratings for p in first.players] == [p.ratings for p in second.players]


class TestRoster:
    """Tests for roster loading."""

    def test_player_from_dict_defaults(self) -> None:
        """Missing ratings default to the league mean."""
        player = player_from_dict({"id": 7, "name": "Sparse", "ratings": {"three": 88, "pass": 77}})
        assert player.player_id == "7"
        assert player.ratings.three == 88
        assert player.ratings.pass_ == 77
        assert player.ratings.mid == 50
        assert player.ratings.height_in == 78
        assert player.tendencies == Tendencies()

    def test_player_from_dict_tendencies(self) -> None:
        """Tendency vectors and scalars are parsed."""
        player = player_from_dict(
            {"id": "a", "tendencies": {"with_ball": [0.3, 0.1, 0.2, 0.1, 0.1, 0.1, 0.1], "crash_oreb": 80}}
        )
        assert player.tendencies.with_ball[0] == 0.3
        assert player.tendencies.crash_oreb == 80.0
        assert player.name == "player_a"

    def test_load_teams_from_json(self, tmp_path: Path) -> None:
        """Home and away sections become teams."""
        payload = {
            section: {
                "id": code,
                "name": f"{code} Team",
                "set_play": "4-out-1-in",
                "defensive_scheme": "switch",
                "players": [{"id": f"{code}-{i}", "name": f"P{i}"} for i in range(1, 6)],
            }
            for section, code in (("home", "H"), ("away", "A"))
        }
        path = tmp_path / "players.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        home, away = load_teams_from_json(str(path))
        assert home.team_id == "H"
        assert away.name == "A Team"
        assert home.set_play == "4-out-1-in"
        assert away.defensive_scheme == "switch"
        assert len(home.lineup) == 5

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_teams_from_json(str(tmp_path / "nope.json"))

    def test_missing_section(self, tmp_path: Path) -> None:
        """A payload without an away section raises KeyError."""
        path = tmp_path / "half.json"
        players = [{"id": f"H-{i}"} for i in range(1, 6)]
        path.write_text(json.dumps({"home": {"id": "H", "players": players}}), encoding="utf-8")
        with pytest.raises(KeyError):
            load_teams_from_json(str(path))


class TestDebugger:
    """Tests for MatchDebugger."""

    def test_log_lines_are_written_and_buffered(self, tmp_path: Path) -> None:
        """Entries reach the file and the recent-events buffer."""
        debugger = MatchDebugger(str(tmp_path / "nested" / "logs"))
        debugger.log_possession_state(3, 2400.0, 18.0, "HOM", "HOM-1", (10, 8))
        debugger.log_player_state(2400.0, "HOM-1", "Home", (25.0, 25.0), True, 4.5, "drive")
        debugger.log_player_state(2400.0, "HOM-2", "Home", None, False)
        debugger.log_rebound("AWY-5", False, True, False, None)
        debugger.log_error("TEST", "something odd")
        recent = debugger.get_recent_events(limit=2)
        debugger.close()

        assert len(recent) == 2
        assert recent[0].startswith("00004 ")
        assert "Trajectory: fallback" in recent[0]
        text = next((tmp_path / "nested" / "logs").glob("game_debug_*.txt")).read_text(encoding="utf-8")
        assert "Handler: HOM-1" in text
        assert "Pos: unplaced" in text
        assert "Action: drive" in text
        assert "ERROR: Type: TEST" in text
