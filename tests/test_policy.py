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
"""Tests for the action policy and tendency distributions."""

import random
from dataclasses import fields
from typing import Optional, Tuple

import pytest

from courtside.engine.config import ENGINE_CONFIG
from courtside.engine.policy import (
    ACTIONS,
    action_probabilities,
    beta_mean,
    calculate_epv,
    calculate_temperature,
    choose_action,
    dirichlet_mean,
    initialize_tendency_distributions,
    normalize_values,
    update_beta,
    update_dirichlet,
)
from courtside.models.player import Player, Ratings, Tendencies


def _player(iq: int = 50, discipline: int = 50, with_ball: Optional[Tuple[float, ...]] = None) -> Player:
    values = {item.name: 50 for item in fields(Ratings) if item.name not in ("height_in", "wingspan_in")}
    values.update(iq=iq, discipline=discipline)
    tendencies = Tendencies(with_ball=with_ball) if with_ball else Tendencies()
    return Player("p1", "Policy Tester", Ratings(**values), tendencies)


class TestEPV:
    """Tests for expected point value estimates."""

    def test_fallback_without_position(self) -> None:
        """An unplaced handler uses the fallback table."""
        epv = calculate_epv(False, None, 0.5, 0.0, 0.5, 24.0, 0)
        assert epv == ENGINE_CONFIG.epv.fallback
        assert list(epv) == list(ACTIONS)

    def test_catch_and_shoot_beyond_arc(self) -> None:
        """Catch-and-shoot value uses the three-point coefficients from deep."""
        epv = calculate_epv(True, "three", 0.5, 0.0, 0.6, 24.0, 0)
        assert epv["catchShoot"] == pytest.approx(0.4 + 0.5 * 0.6)
        assert epv["post"] == pytest.approx(0.08)

    def test_post_value_at_rim(self) -> None:
        """Posting up is attractive only at the rim."""
        epv = calculate_epv(True, "rim", 0.5, 0.0, 0.6, 24.0, 0)
        assert epv["post"] == pytest.approx(0.45)

    def test_late_clock_favours_shots(self) -> None:
        """Late in the shot clock shots are boosted and resets suppressed."""
        early = calculate_epv(False, None, 0.5, 0.0, 0.5, 20.0, 0)
        late = calculate_epv(False, None, 0.5, 0.0, 0.5, 6.0, 0)
        assert late["catchShoot"] == pytest.approx(early["catchShoot"] * 1.5)
        assert late["reset"] == pytest.approx(early["reset"] * 0.2)

    def test_desperation_stacks_on_late_clock(self) -> None:
        """Under four seconds both multiplier tables apply."""
        early = calculate_epv(False, None, 0.5, 0.0, 0.5, 20.0, 0)
        desperate = calculate_epv(False, None, 0.5, 0.0, 0.5, 3.0, 0)
        assert desperate["pullup"] == pytest.approx(early["pullup"] * 1.4 * 2.0)

    def test_score_context(self) -> None:
        """Leading teams slow down and trailing teams push."""
        base = calculate_epv(False, None, 0.5, 0.0, 0.5, 20.0, 0)
        leading = calculate_epv(False, None, 0.5, 0.0, 0.5, 20.0, 15)
        trailing = calculate_epv(False, None, 0.5, 0.0, 0.5, 20.0, -15)
        assert leading["reset"] == pytest.approx(base["reset"] * 1.2)
        assert trailing["drive"] == pytest.approx(base["drive"] * 1.1)


class TestPolicy:
    """Tests for temperature and sampling."""

    def test_average_player_temperature(self) -> None:
        """An average, fresh player samples at the base temperature."""
        assert calculate_temperature(50, 50, 0) == pytest.approx(1.0)

    def test_temperature_is_clamped(self) -> None:
        """Elite decision makers hit the lower bound."""
        assert calculate_temperature(99, 99, 0) == pytest.approx(0.55)
        assert calculate_temperature(0, 0, 100) == pytest.approx(1.2)

    def test_normalize_values_degenerate(self) -> None:
        """Identical values normalise to zeros."""
        assert normalize_values([0.3, 0.3, 0.3]) == [0.0, 0.0, 0.0]
        assert normalize_values([]) == []

    def test_action_probabilities_sum_to_one(self) -> None:
        """The sampling distribution covers every action."""
        epv = calculate_epv(True, "mid", 0.4, 0.1, 0.5, 18.0, 0)
        probs = action_probabilities(_player(), epv, 10.0)
        assert set(probs) == set(ACTIONS)
        assert sum(probs.values()) == pytest.approx(1.0)
        assert all(p > 0 for p in probs.values())

    def test_tendencies_shift_the_distribution(self) -> None:
        """A drive-heavy player drives more often than a neutral one."""
        epv = calculate_epv(False, None, 0.5, 0.0, 0.5, 20.0, 0)
        neutral = action_probabilities(_player(), epv, 0.0)
        slasher = action_probabilities(_player(with_ball=(0.7, 0.05, 0.05, 0.05, 0.05, 0.05, 0.05)), epv, 0.0)
        assert slasher["drive"] > neutral["drive"]

    def test_choose_action_is_deterministic(self) -> None:
        """The same seed yields the same sequence of actions."""
        epv = calculate_epv(True, "mid", 0.4, 0.1, 0.5, 18.0, 0)
        player = _player()
        rng_a, rng_b = random.Random(7), random.Random(7)
        first = [choose_action(player, epv, 0.0, rng_a) for _ in range(20)]
        second = [choose_action(player, epv, 0.0, rng_b) for _ in range(20)]
        assert first == second
        assert all(action in ACTIONS for action in first)


class TestTendencyDistributions:
    """Tests for the Dirichlet and Beta helpers."""

    def test_dirichlet_mean(self) -> None:
        """The mean is the normalised concentration."""
        assert dirichlet_mean([1.0, 3.0]) == [0.25, 0.75]
        assert dirichlet_mean([0.0, 0.0]) == [0.5, 0.5]

    def test_beta_mean(self) -> None:
        """The mean is a / (a + b) with an uninformed fallback."""
        assert beta_mean(3.0, 1.0) == 0.75
        assert beta_mean(0.0, 0.0) == 0.5

    def test_updates_record_observations(self) -> None:
        """Updates decay existing counts and add one observation."""
        assert update_dirichlet([1.0, 1.0], 1, decay=0.5) == [0.5, 1.5]
        assert update_beta(2.0, 2.0, True) == (3.0, 2.0)
        assert update_beta(2.0, 2.0, False, decay=0.5) == (1.0, 2.0)

    def test_initialize_from_tendencies(self) -> None:
        """Every distribution is proper with positive parameters."""
        dists = initialize_tendency_distributions(Tendencies(pass_risk=80.0))
        assert sum(dists.with_ball.mean) == pytest.approx(1.0)
        assert all(alpha > 0 for alpha in dists.shot_zone.alphas)
        assert dists.pass_risk.mean > 0.5
        assert dists.help.mean == pytest.approx(0.5)
