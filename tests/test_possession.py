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
"""Tests for the possession engine."""

import random
from typing import List, Optional

import pytest

from courtside.engine.formation import DEFENSIVE_SCHEMES
from courtside.engine.movement import MovementOutcome
from courtside.engine.outcomes import DriveOutcome, PassOutcome, ShotOutcome
from courtside.engine.possession import BallHandlerNotFoundError, PossessionEngine, _PossessionContext
from courtside.engine.probability import EMPTY_EXPLAIN
from courtside.engine.rebound import ReboundResult
from courtside.engine.state import GameClock, PossessionState, Score
from courtside.models.team import Team
from courtside.utils.generator import generate_team


class RecordingSink:
    """Stats sink that remembers every call."""

    def __init__(self) -> None:
        self.plays: list = []
        self.assists: list = []
        self.free_throws: list = []
        self.finishes: list = []
        self.possessions: list = []

    def record_play(self, record) -> None:
        self.plays.append(record)

    def record_assist(self, side, passer_id) -> None:
        self.assists.append((side, passer_id))

    def record_free_throws(self, side, player_id, attempts, makes) -> None:
        self.free_throws.append((side, player_id, attempts, makes))

    def record_finish(self, side, player_id, made) -> None:
        self.finishes.append((side, player_id, made))

    def update_possessions(self, side) -> None:
        self.possessions.append(side)


def _teams(scheme: str = "man", set_play: str = "1-out-4"):
    home = generate_team("HOM", "Home", seed=10, set_play=set_play)
    away = generate_team("AWY", "Away", seed=11, defensive_scheme=scheme)
    return home, away


def _state(home: Team, away: Team, seed: int = 7, **overrides) -> PossessionState:
    values = dict(
        game_id="test",
        offense=home.team_id,
        defense=away.team_id,
        ball_handler=home.players[0].player_id,
        seed=seed,
        home_team=home.team_id,
    )
    values.update(overrides)
    return PossessionState(**values)


class TestValidation:
    """Tests for run() argument checks."""

    def test_handler_not_on_roster(self) -> None:
        """An unknown ball-handler raises a dedicated error."""
        home, away = _teams()
        state = _state(home, away, ball_handler="AWY-1")
        with pytest.raises(BallHandlerNotFoundError) as info:
            PossessionEngine().run(home, away, state)
        assert info.value.player_id == "AWY-1"
        assert info.value.team_id == "HOM"
        assert isinstance(info.value, ValueError)

    def test_teams_must_match_state(self) -> None:
        """Teams passed in the wrong order are rejected."""
        home, away = _teams()
        with pytest.raises(ValueError, match="do not match"):
            PossessionEngine().run(away, home, _state(home, away))

    def test_unknown_scheme(self) -> None:
        """Unknown defensive schemes surface as ValueError."""
        home, away = _teams()
        with pytest.raises(ValueError, match="Unknown defensive scheme"):
            PossessionEngine().run(home, away, _state(home, away), scheme="matchup")

    def test_unknown_set_play(self) -> None:
        """An offence running an unknown set play is rejected."""
        home, away = _teams(set_play="triangle")
        with pytest.raises(ValueError, match="Unknown set play"):
            PossessionEngine().run(home, away, _state(home, away))


class TestRun:
    """Tests for full possessions."""

    @pytest.mark.parametrize("scheme", DEFENSIVE_SCHEMES)
    def test_possession_terminates_for_every_scheme(self, scheme: str) -> None:
        """Every scheme produces at least one play and a finished possession."""
        home, away = _teams(scheme)
        state, plays = PossessionEngine().run(home, away, _state(home, away), scheme=scheme)
        assert plays
        assert plays[0].player_id == "HOM-1"
        assert plays[0].team_id == "HOM"
        assert state.possession == 1

    @pytest.mark.parametrize("seed", range(12))
    def test_clock_and_rebound_invariants(self, seed: int) -> None:
        """Play timestamps never run backwards and each rebound has one winner."""
        home, away = _teams()
        state, plays = PossessionEngine().run(home, away, _state(home, away, seed=seed))
        clocks = [play.game_clock for play in plays]
        assert clocks == sorted(clocks, reverse=True)
        assert 0.0 <= state.shot_clock <= 24.0
        assert state.clock.seconds < 2880.0
        for play in plays:
            if play.kind == "rebound":
                winners = [p for p in play.rebound.participants if p.player_id == play.player_id]
                assert len(winners) == 1

    @pytest.mark.parametrize("seed", range(12))
    def test_swap_rebuilds_the_court(self, seed: int) -> None:
        """After a change of possession the other team attacks the right basket."""
        home, away = _teams()
        state, _ = PossessionEngine().run(home, away, _state(home, away, seed=seed))
        if state.offense == "AWY":
            assert state.defense == "HOM"
            assert state.ball_handler == "AWY-1"
            assert state.shot_clock == 24.0
            assert not state.attacking_left
            assert state.offense_formation.ball_handler == "AWY-1"
            assert state.offense_formation.position_of("AWY-1").x > 47.0
            assert state.assignments.scheme == home.defensive_scheme

    def test_replay_is_deterministic(self) -> None:
        """The same seed and possession number replay identically."""
        home, away = _teams()
        first_state, first = PossessionEngine().run(home, away, _state(home, away, seed=99, possession=4))
        second_state, second = PossessionEngine().run(home, away, _state(home, away, seed=99, possession=4))
        assert [p.description for p in first] == [p.description for p in second]
        assert first_state.score == second_state.score
        assert first_state.clock == second_state.clock
        assert first_state.fatigue == second_state.fatigue

    def test_sink_receives_every_play(self) -> None:
        """The sink sees each record and one possession count."""
        home, away = _teams()
        sink = RecordingSink()
        _, plays = PossessionEngine().run(home, away, _state(home, away, seed=5), sink=sink)
        assert sink.plays == plays
        assert sink.possessions == ["home"]

    def test_fatigue_accrues_for_the_handler(self) -> None:
        """Acting players tire."""
        home, away = _teams()
        state, plays = PossessionEngine().run(home, away, _state(home, away, seed=3))
        actors = {play.player_id for play in plays if play.kind == "action"}
        assert all(state.fatigue_of(player_id) > 0 for player_id in actors)

    def test_expired_clock_ends_immediately(self) -> None:
        """A possession that starts with no game time produces no plays."""
        home, away = _teams()
        state, plays = PossessionEngine().run(home, away, _state(home, away, clock=GameClock(4, 0.0)))
        assert plays == []
        assert state.offense == "HOM"

    def test_expired_shot_clock_forces_a_shot(self) -> None:
        """With no shot clock left the offence still gets a desperation attempt."""
        home, away = _teams()
        state, plays = PossessionEngine().run(home, away, _state(home, away, shot_clock=0.0))
        assert len(plays) >= 1
        assert plays[0].action == "pullup"
        assert isinstance(plays[0].outcome, ShotOutcome)


class TestCatchAndShoot:
    """Tests for a single catch-and-shoot step."""

    def _step(self, seed: int):
        home, away = _teams()
        state = _state(home, away, seed=seed)
        engine = PossessionEngine()
        ctx = _PossessionContext(home, away, state, random.Random(seed), "man", None)
        engine._setup_court(ctx)
        engine._step(ctx, forced="catchShoot")
        return state, ctx.plays

    @pytest.mark.parametrize("seed", range(20))
    def test_made_shot_adds_two_or_three(self, seed: int) -> None:
        """A make adds exactly the value matching the three flag."""
        state, plays = self._step(seed)
        outcome = plays[0].outcome
        assert isinstance(outcome, ShotOutcome)
        value = 3 if outcome.three else 2
        if outcome.fouled:
            assert state.offense == "AWY"
            assert 0 <= state.score.defense <= value
        elif outcome.make:
            assert state.offense == "AWY"
            assert state.score == Score(0, value)
        else:
            assert state.score == Score()

    def test_step_is_deterministic(self) -> None:
        """A fixed seed yields the same make or miss."""
        _, first = self._step(21)
        _, second = self._step(21)
        assert first[0].outcome == second[0].outcome

    def test_step_drains_both_clocks(self) -> None:
        """A shot attempt costs the default drain on both clocks."""
        state, plays = self._step(2)
        assert plays[0].game_clock == 2880.0
        assert state.clock.seconds == pytest.approx(2874.0)


class ScriptedRandom(random.Random):
    """Random stream that replays a fixed list of draws."""

    def __init__(self, draws: List[float]) -> None:
        super().__init__(0)
        self.draws = list(draws)

    def random(self) -> float:
        return self.draws.pop(0)


class StubRebounds:
    """Rebound resolver that always awards the ball to one player."""

    def __init__(self, winner: str, offense_won: bool, tip_out: bool = False) -> None:
        self.result = ReboundResult(winner, offense_won, True, tip_out, None, None, (), EMPTY_EXPLAIN)
        self.calls: list = []

    def resolve_rebound(
        self,
        offense,
        defense,
        offense_formation,
        defense_formation,
        rng,
        attacking_left,
        shot_location=None,
        shot_zone=None,
        shot_quality=None,
    ) -> ReboundResult:
        self.calls.append((shot_location, shot_zone, shot_quality))
        return self.result


class StubMovement:
    """Movement resolver returning a fixed drive micro-action."""

    def __init__(self, success: bool, turnover: bool, dribbles: int = 4) -> None:
        self.outcome = MovementOutcome(
            kind="drive",
            success=success,
            dribbles=dribbles,
            time_elapsed=1.5,
            position_delta=(0.0, 0.0),
            separation_gained=0.0,
            turnover=turnover,
        )

    def execute_movement(self, kind, context, rng) -> MovementOutcome:
        return self.outcome


def _context(rng: random.Random, sink: Optional[RecordingSink] = None, **overrides):
    home, away = _teams()
    state = _state(home, away, **overrides)
    engine = PossessionEngine()
    ctx = _PossessionContext(home, away, state, rng, "man", sink)
    engine._setup_court(ctx)
    handler = home.players[0]
    return engine, ctx, handler, state.offense_formation.position_of(handler.player_id)


class TestActionConversion:
    """Tests for the pre-resolution conversion stage."""

    @pytest.mark.parametrize(
        ("action", "zone", "draws", "expected"),
        [
            ("post", "rim", [0.59], "pullup"),
            ("post", "rim", [0.6], "post"),
            ("pnrAttack", "mid", [0.39, 0.59], "pullup"),
            ("pnrAttack", "mid", [0.39, 0.6], "drive"),
            ("pnrAttack", "three", [0.4], "pnrAttack"),
        ],
    )
    def test_conversion_odds(self, action: str, zone: str, draws: List[float], expected: str) -> None:
        """Post-ups at the rim and pick-and-roll attacks convert at their configured odds."""
        rng = ScriptedRandom(draws)
        assert PossessionEngine()._convert_action(action, zone, rng) == expected
        assert rng.draws == []

    @pytest.mark.parametrize(
        ("action", "zone"),
        [("post", "mid"), ("post", None), ("drive", "rim"), ("reset", "three"), ("catchShoot", "three")],
    )
    def test_other_actions_pass_through_without_drawing(self, action: str, zone: Optional[str]) -> None:
        """Only rim post-ups and pick-and-roll attacks consume a draw."""
        rng = ScriptedRandom([])
        assert PossessionEngine()._convert_action(action, zone, rng) == action

    @pytest.mark.parametrize("action", ["post", "pnrAttack", "reset"])
    def test_unconverted_actions_resolve_as_ball_movement(self, action: str) -> None:
        """Unconverted actions become a completed pass with an empty breakdown."""
        engine, ctx, handler, position = _context(ScriptedRandom([]))
        outcome = engine._resolve(ctx, action, handler, position)
        assert outcome == PassOutcome()


class TestOutcomeBranches:
    """Tests for how each outcome advances or ends the possession."""

    @pytest.mark.parametrize(("shot_clock", "expected"), [(5.0, 14.0), (20.0, 20.0)])
    @pytest.mark.parametrize("tip_out", [False, True])
    def test_offensive_rebound_keeps_the_ball(self, shot_clock: float, expected: float, tip_out: bool) -> None:
        """The rebounder takes over and the shot clock is floored at fourteen."""
        sink = RecordingSink()
        engine, ctx, handler, position = _context(ScriptedRandom([]), sink, shot_clock=shot_clock)
        engine.rebounds = StubRebounds("HOM-4", True, tip_out)
        ctx.last_passer = "HOM-2"
        state = ctx.state

        assert engine._apply_outcome(ctx, handler, position, ShotOutcome(make=False, zone="mid")) is True
        assert engine.rebounds.calls == [(position, "mid", None)]
        assert state.offense == "HOM"
        assert state.ball_handler == "HOM-4"
        assert state.offense_formation.ball_handler == "HOM-4"
        assert state.shot_clock == expected
        assert ctx.last_passer is None
        assert [(p.kind, p.team_id, p.player_id) for p in sink.plays] == [("rebound", "HOM", "HOM-4")]

    def test_defensive_rebound_swaps_sides(self) -> None:
        """A defensive board hands the new offence a fresh shot clock."""
        engine, ctx, handler, position = _context(ScriptedRandom([]), shot_clock=9.0)
        engine.rebounds = StubRebounds("AWY-2", False)
        state = ctx.state

        assert engine._apply_outcome(ctx, handler, position, ShotOutcome(make=False, zone="three")) is False
        assert (state.offense, state.defense) == ("AWY", "HOM")
        assert state.ball_handler == "AWY-1"
        assert state.shot_clock == 24.0

    def test_pass_turnover_swaps_immediately(self) -> None:
        """A lost pass ends the possession with no rebound and the score inverted."""
        engine, ctx, handler, position = _context(ScriptedRandom([]), score=Score(10, 4))
        engine.rebounds = StubRebounds("HOM-4", True)
        state = ctx.state

        outcome = PassOutcome(complete=False, turnover=True)
        assert engine._apply_outcome(ctx, handler, position, outcome) is False
        assert engine.rebounds.calls == []
        assert state.offense == "AWY"
        assert state.score == Score(4, 10)
        assert ctx.plays == []

    def test_completed_pass_continues(self) -> None:
        """Ball movement keeps the same offence live."""
        engine, ctx, handler, position = _context(ScriptedRandom([]))
        assert engine._apply_outcome(ctx, handler, position, PassOutcome()) is True
        assert ctx.state.offense == "HOM"

    def test_drive_turnover_swaps(self) -> None:
        """Losing the handle ends the possession."""
        engine, ctx, handler, position = _context(ScriptedRandom([]))
        assert engine._apply_outcome(ctx, handler, position, DriveOutcome(turnover=True)) is False
        assert ctx.state.offense == "AWY"
        assert ctx.state.score == Score()

    def test_stopped_drive_continues(self) -> None:
        """A drive that neither beats the defender nor draws a foul keeps the ball."""
        engine, ctx, handler, position = _context(ScriptedRandom([]))
        assert engine._apply_outcome(ctx, handler, position, DriveOutcome()) is True
        assert ctx.state.offense == "HOM"

    def test_drive_foul_reports_two_free_throws(self) -> None:
        """A fouled drive goes to the line for two, charges the defender and ends the possession."""
        sink = RecordingSink()
        engine, ctx, handler, position = _context(random.Random(3), sink)
        defender, _ = engine._defender(ctx, handler.player_id)
        state = ctx.state

        assert engine._apply_outcome(ctx, handler, position, DriveOutcome(foul=True)) is False
        assert len(sink.free_throws) == 1
        side, shooter, attempts, makes = sink.free_throws[0]
        assert (side, shooter, attempts) == ("home", "HOM-1", 2)
        assert 0 <= makes <= 2
        assert state.offense == "AWY"
        assert state.score == Score(0, makes)
        assert state.fouls.team_fouls == {"AWY": 1}
        assert state.fouls.history[0].player_id == defender.player_id

    def test_shooting_foul_on_a_three_is_not_reported_as_a_trip(self) -> None:
        """Fouled jump shots score through the engine but skip record_free_throws."""
        sink = RecordingSink()
        engine, ctx, handler, position = _context(random.Random(4), sink)
        outcome = ShotOutcome(make=False, fouled=True, three=True, zone="three")

        assert engine._apply_outcome(ctx, handler, position, outcome) is False
        assert sink.free_throws == []
        assert 0 <= ctx.state.score.defense <= 3
        assert ctx.state.fouls.team_fouls == {"AWY": 1}

    def test_blowby_finish_scores_two(self) -> None:
        """A made finish after beating the defender is reported and worth two."""
        sink = RecordingSink()
        rng = ScriptedRandom([0.0])
        engine, ctx, handler, position = _context(rng, sink)

        assert engine._apply_outcome(ctx, handler, position, DriveOutcome(blowby=True)) is False
        assert sink.finishes == [("home", "HOM-1", True)]
        assert ctx.state.offense == "AWY"
        assert ctx.state.score == Score(0, 2)
        assert rng.draws == []

    def test_missed_finish_uses_the_positionless_rebound(self) -> None:
        """A blown finish is contested without a shot location."""
        sink = RecordingSink()
        engine, ctx, handler, position = _context(ScriptedRandom([0.95]), sink)
        engine.rebounds = StubRebounds("HOM-5", True)

        assert engine._apply_outcome(ctx, handler, position, DriveOutcome(blowby=True)) is True
        assert sink.finishes == [("home", "HOM-1", False)]
        assert engine.rebounds.calls == [(None, None, None)]
        assert ctx.state.ball_handler == "HOM-5"
        assert ctx.state.score == Score()

    def test_completed_pass_then_make_credits_the_passer(self) -> None:
        """The passer of a completed pass is credited when the receiver scores at once."""
        sink = RecordingSink()
        rng = ScriptedRandom([0.0])
        engine, ctx, passer, _ = _context(rng, sink)
        engine._update_positions(ctx, "pnrPass", PassOutcome(complete=True, target="HOM-3"))
        assert ctx.state.ball_handler == "HOM-3"
        assert ctx.last_passer == "HOM-1"
        assert ctx.dribbles_since_catch == 0

        shooter = ctx.offense.get_player("HOM-3")
        spot = ctx.state.offense_formation.position_of("HOM-3")
        assert engine._apply_outcome(ctx, shooter, spot, ShotOutcome(make=True, zone="mid")) is False
        assert sink.assists == [("home", passer.player_id)]
        assert ctx.state.score == Score(0, 2)
        assert rng.draws == []

    def test_no_assist_after_too_many_dribbles(self) -> None:
        """Beyond two dribbles since the catch the assist draw cannot succeed."""
        sink = RecordingSink()
        rng = ScriptedRandom([0.0])
        engine, ctx, handler, position = _context(rng, sink)
        ctx.last_passer = "HOM-2"
        ctx.dribbles_since_catch = 3

        engine._apply_outcome(ctx, handler, position, ShotOutcome(make=True, three=True, zone="three"))
        assert sink.assists == []
        assert ctx.state.score == Score(0, 3)
        assert rng.draws == []

    def test_unassisted_make_does_not_draw(self) -> None:
        """Without a preceding pass no assist draw is taken."""
        sink = RecordingSink()
        engine, ctx, handler, position = _context(ScriptedRandom([]), sink)
        engine._apply_outcome(ctx, handler, position, ShotOutcome(make=True, zone="rim"))
        assert sink.assists == []
        assert ctx.state.score == Score(0, 2)


class TestDriveResolution:
    """Tests for how the handling micro-action feeds a drive."""

    def test_failed_handle_still_reaches_the_blowby_draw(self) -> None:
        """Only a turnover stops the drive; the dribble count is carried."""
        rng = ScriptedRandom([0.0, 0.99])
        engine, ctx, handler, position = _context(rng)
        engine.movement = StubMovement(success=False, turnover=False, dribbles=4)

        outcome = engine._resolve(ctx, "drive", handler, position)
        assert isinstance(outcome, DriveOutcome)
        assert outcome.blowby is True
        assert outcome.foul is False
        assert ctx.dribbles_since_catch == 4
        assert rng.draws == []

    def test_turnover_skips_the_blowby_draw(self) -> None:
        """A lost handle ends the drive before any blow-by or foul draw."""
        engine, ctx, handler, position = _context(ScriptedRandom([]))
        engine.movement = StubMovement(success=False, turnover=True, dribbles=3)

        assert engine._resolve(ctx, "drive", handler, position) == DriveOutcome(turnover=True)
        assert ctx.dribbles_since_catch == 3


class AuditingEngine(PossessionEngine):
    """Engine that snapshots points and clocks around each loop iteration."""

    def __post_init__(self) -> None:
        super().__post_init__()
        self.steps: list = []

    @staticmethod
    def _snapshot(state: PossessionState) -> dict:
        return {
            "offense": state.offense,
            "points": {state.offense: state.score.offense, state.defense: state.score.defense},
            "shot_clock": state.shot_clock,
            "game_clock": state.clock.seconds,
        }

    def _step(self, ctx: _PossessionContext, forced=None) -> bool:
        before = self._snapshot(ctx.state)
        first = len(ctx.plays)
        live = super()._step(ctx, forced)
        self.steps.append((before, self._snapshot(ctx.state), ctx.plays[first:]))
        return live


def _scoring_outcome(outcome) -> bool:
    if isinstance(outcome, ShotOutcome):
        return outcome.make or outcome.fouled
    if isinstance(outcome, DriveOutcome):
        return outcome.foul or outcome.blowby
    return False


class TestPerStepInvariants:
    """Tests that replay possessions and check every loop iteration."""

    @pytest.mark.parametrize("shot_clock", [24.0, 5.0])
    @pytest.mark.parametrize("seed", range(25))
    def test_points_and_shot_clock_per_step(self, seed: int, shot_clock: float) -> None:
        """Points only rise on scoring outcomes and the shot clock only rises on an offensive board."""
        home, away = _teams()
        engine = AuditingEngine()
        engine.run(home, away, _state(home, away, seed=seed, possession=seed + 1, shot_clock=shot_clock))
        assert engine.steps

        for before, after, plays in engine.steps:
            action = next(play for play in plays if play.kind == "action")
            offense = before["offense"]
            defense = next(team for team in before["points"] if team != offense)

            assert after["points"][defense] == before["points"][defense]
            assert after["points"][offense] >= before["points"][offense]
            if after["points"][offense] != before["points"][offense]:
                assert _scoring_outcome(action.outcome)

            assert 0.0 <= after["game_clock"] <= before["game_clock"]
            assert after["shot_clock"] >= 0.0
            if after["offense"] != offense:
                assert after["shot_clock"] == 24.0
            elif after["shot_clock"] > before["shot_clock"]:
                boards = [play for play in plays if play.kind == "rebound" and play.team_id == offense]
                assert boards
                assert after["shot_clock"] == 14.0
