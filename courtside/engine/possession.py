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
"""Possession state machine: choose, resolve, advance and branch.

A possession runs synchronously from its first decision to a score, a
turnover, a defensive rebound or the expiry of a clock. Every random draw
comes from one ``random.Random`` seeded from the game seed and the
possession number, so a replay with the same inputs produces the same
plays. Aggregate statistics are left to an optional :class:`StatsSink`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, List, Literal, Optional, Protocol, Tuple

from courtside.models.box_score import calculate_assist_probability, simulate_free_throws

from .config import ENGINE_CONFIG, EngineConfig
from .defense import DefensiveCoordinator
from .events import PlayRecord
from .formation import Formation, FormationManager
from .movement import MovementContext, MovementResolver
from .officiating import free_throws_awarded
from .outcomes import ActionOutcome, DriveOutcome, PassOutcome, ShotOutcome
from .policy import Action, calculate_epv, choose_action
from .probability import (
    drive_blowby_probability,
    pass_complete_probability,
    safe_probability,
    shooting_foul_probability,
    shot_make_probability,
)
from .rebound import ReboundResolver
from .spatial import (
    COURT,
    Position,
    calculate_open_lanes,
    calculate_shot_quality,
    drive_angle,
    get_shot_zone,
)
from .state import PossessionState, Spacing

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.player import Player
    from courtside.models.team import Team
    from courtside.utils.debug import MatchDebugger

POSSESSION_SEED_STRIDE = 7919

Side = Literal["home", "away"]


class BallHandlerNotFoundError(ValueError):
    """Raised when the designated ball-handler is not on the offensive roster.

    Parameters
    ----------
    player_id : str
        Ball-handler id that could not be found.
    team_id : str
        Offensive team that was searched.
    """

    def __init__(self, player_id: str, team_id: str) -> None:
        """Build the error message.

        Parameters
        ----------
        player_id : str
            Ball-handler id that could not be found.
        team_id : str
            Offensive team that was searched.
        """
        super().__init__(f"Ball-handler '{player_id}' is not on the roster of team '{team_id}'")
        self.player_id = player_id
        self.team_id = team_id


class StatsSink(Protocol):
    """Aggregator notified of the plays a possession produces."""

    def record_play(self, record: PlayRecord) -> None:
        """Receive an action or rebound record.

        Parameters
        ----------
        record : PlayRecord
            Resolved play.
        """

    def record_assist(self, side: Side, passer_id: str) -> None:
        """Receive an assist credit.

        Parameters
        ----------
        side : Side
            Side of the passer.
        passer_id : str
            Passer credited with the assist.
        """

    def record_free_throws(self, side: Side, player_id: str, attempts: int, makes: int) -> None:
        """Receive the result of a trip to the line after a drive foul.

        Parameters
        ----------
        side : Side
            Side of the shooter.
        player_id : str
            Shooter.
        attempts : int
            Free throws attempted.
        makes : int
            Free throws made.
        """

    def record_finish(self, side: Side, player_id: str, made: bool) -> None:
        """Receive the finish attempt that follows a successful drive.

        Parameters
        ----------
        side : Side
            Side of the finisher.
        player_id : str
            Finisher.
        made : bool
            Whether the finish scored.
        """

    def update_possessions(self, side: Side) -> None:
        """Count a completed possession.

        Parameters
        ----------
        side : Side
            Side that started the possession with the ball.
        """


@dataclass
class _PossessionContext:
    """Working set for one call to :meth:`PossessionEngine.run`.

    Parameters
    ----------
    offense : Team
        Team currently with the ball.
    defense : Team
        Team currently defending.
    state : PossessionState
        Possession aggregate being advanced.
    rng : random.Random
        Possession random stream.
    scheme : str
        Scheme of the current defence.
    sink : StatsSink | None
        Optional statistics sink.
    """

    offense: "Team"
    defense: "Team"
    state: PossessionState
    rng: random.Random
    scheme: str
    sink: Optional[StatsSink]
    plays: List[PlayRecord] = field(default_factory=list, init=False)
    last_passer: Optional[str] = field(default=None, init=False)
    dribbles_since_catch: int = field(default=0, init=False)
    last_shot_quality: Optional[float] = field(default=None, init=False)


@dataclass
class PossessionEngine:
    """Run possessions one at a time.

    Parameters
    ----------
    config : EngineConfig, optional
        Configuration override; defaults to ``ENGINE_CONFIG``.
    debugger : MatchDebugger | None, optional
        Telemetry sink; nothing is logged without one.
    """

    config: EngineConfig = field(default_factory=lambda: ENGINE_CONFIG)
    debugger: Optional["MatchDebugger"] = None
    formations: FormationManager = field(init=False)
    coordinator: DefensiveCoordinator = field(init=False)
    movement: MovementResolver = field(init=False)
    rebounds: ReboundResolver = field(init=False)

    def __post_init__(self) -> None:
        """Create the component resolvers sharing this engine's configuration."""
        self.formations = FormationManager(self.config)
        self.coordinator = DefensiveCoordinator(self.config)
        self.movement = MovementResolver(self.config)
        self.rebounds = ReboundResolver(self.config, self.debugger)

    def run(
        self,
        offense: "Team",
        defense: "Team",
        state: PossessionState,
        scheme: str = "man",
        sink: Optional[StatsSink] = None,
    ) -> Tuple[PossessionState, List[PlayRecord]]:
        """Play a possession to completion.

        ``state`` is advanced in place. When the possession ends by a score,
        a turnover or a defensive rebound the sides are swapped before
        returning, so the state describes the start of the next possession.

        Parameters
        ----------
        offense : Team
            Team with the ball; must match ``state.offense``.
        defense : Team
            Defending team; must match ``state.defense``.
        state : PossessionState
            Initial possession state.
        scheme : str, default="man"
            Defensive scheme of ``defense``.
        sink : StatsSink | None, optional
            Statistics sink notified of every play.

        Returns
        -------
        Tuple[PossessionState, List[PlayRecord]]
            Final state and the plays in the order they were resolved.

        Raises
        ------
        BallHandlerNotFoundError
            If ``state.ball_handler`` is not on the offensive roster.
        ValueError
            If the teams do not match the state, or ``scheme`` or the
            offence's set play is unknown.
        """
        if state.offense != offense.team_id or state.defense != defense.team_id:
            raise ValueError(
                f"Teams {offense.team_id}/{defense.team_id} do not match possession state "
                f"{state.offense}/{state.defense}"
            )
        if not offense.has_player(state.ball_handler):
            raise BallHandlerNotFoundError(state.ball_handler, offense.team_id)

        rng = random.Random(state.seed ^ (state.possession * POSSESSION_SEED_STRIDE))
        ctx = _PossessionContext(offense, defense, state, rng, scheme, sink)
        starting_side = self._side(state, state.offense)
        self._setup_court(ctx)

        live = True
        while live and state.is_live:
            live = self._step(ctx)

        if live and state.shot_clock <= 0 and state.clock.seconds > 0:
            if self.debugger is not None:
                self.debugger.log_game_event(
                    state.clock.seconds, "SHOT_CLOCK", f"Violation for {state.offense} - forcing desperation shot"
                )
            self._step(ctx, forced="pullup")

        if sink is not None:
            sink.update_possessions(starting_side)
        return state, ctx.plays

    def _step(self, ctx: _PossessionContext, forced: Optional[Action] = None) -> bool:
        """Run one iteration of the possession loop.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        forced : Action | None, optional
            Action that bypasses selection and conversion.

        Returns
        -------
        bool
            ``True`` while the current offence keeps the ball.
        """
        state = ctx.state
        handler = self._handler(ctx)
        position = state.offense_formation.position_of(handler.player_id) if state.offense_formation else None
        zone = get_shot_zone(position, state.attacking_left) if position is not None else None

        if self.debugger is not None:
            self.debugger.log_possession_state(
                state.possession,
                state.clock.seconds,
                state.shot_clock,
                state.offense,
                handler.player_id,
                (state.score.offense, state.score.defense),
            )

        if forced is None:
            action = self._choose(ctx, handler, position, zone)
            resolved = self._convert_action(action, zone, ctx.rng)
        else:
            action = resolved = forced

        outcome = self._resolve(ctx, resolved, handler, position)
        self._record(ctx, handler, action, resolved, position, outcome)
        self._advance_fatigue(ctx, handler, outcome)
        self._update_positions(ctx, resolved, outcome)
        self._drain(ctx, resolved)
        return self._apply_outcome(ctx, handler, position, outcome)

    def _handler(self, ctx: _PossessionContext) -> "Player":
        """Return the current ball-handler.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.

        Returns
        -------
        Player
            Ball-handler from the offensive roster.

        Raises
        ------
        BallHandlerNotFoundError
            If the handler has left the offensive roster.
        """
        player = ctx.offense.get_player(ctx.state.ball_handler)
        if player is None:
            raise BallHandlerNotFoundError(ctx.state.ball_handler, ctx.offense.team_id)
        return player

    def _choose(
        self,
        ctx: _PossessionContext,
        handler: "Player",
        position: Optional[Position],
        zone: Optional[str],
    ) -> Action:
        """Pick the handler's next action from EPV and tendencies.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        handler : Player
            Ball-handler.
        position : Position | None
            Handler location, if placed.
        zone : str | None
            Handler shot zone, if placed.

        Returns
        -------
        Action
            Chosen action.
        """
        state = ctx.state
        epv = calculate_epv(
            position is not None,
            zone,
            state.spacing.open_lanes,
            state.spacing.ball_movement,
            state.spacing.shot_quality,
            state.shot_clock,
            state.score.differential,
            self.config,
        )
        return choose_action(handler, epv, state.fatigue_of(handler.player_id), ctx.rng, self.config)

    def _convert_action(self, action: Action, zone: Optional[str], rng: random.Random) -> Action:
        """Turn post-ups and pick-and-roll attacks into the action they create.

        Parameters
        ----------
        action : Action
            Chosen action.
        zone : str | None
            Handler shot zone, if placed.
        rng : random.Random
            Possession random stream.

        Returns
        -------
        Action
            Action to resolve; unconverted post-ups, pick-and-roll attacks and
            resets resolve as plain ball movement.
        """
        cfg = self.config.resolution
        if action == "post" and zone == "rim":
            if rng.random() < cfg.post_conversion:
                return "pullup"
        elif action == "pnrAttack":
            if rng.random() < cfg.pnr_shot_chance:
                return "pullup" if rng.random() < cfg.pnr_pullup_share else "drive"
        return action

    def _resolve(
        self,
        ctx: _PossessionContext,
        action: Action,
        handler: "Player",
        position: Optional[Position],
    ) -> ActionOutcome:
        """Resolve an action against the handler's defender.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        action : Action
            Action to resolve.
        handler : Player
            Ball-handler.
        position : Position | None
            Handler location, if placed.

        Returns
        -------
        ActionOutcome
            Drive, shot or pass outcome.
        """
        defender, defender_position = self._defender(ctx, handler.player_id)
        pressure = self._pressure(position, defender_position)

        if action == "drive":
            return self._resolve_drive(ctx, handler, defender, position, defender_position)

        ctx.dribbles_since_catch += self.movement.calculate_dribbles_for_action(
            action, handler.ratings.handle, pressure
        )
        if action in ("pullup", "catchShoot"):
            return self._resolve_shot(ctx, action, handler, defender, position, defender_position)
        if action == "pnrPass":
            return self._resolve_pass(ctx, handler, pressure)
        return PassOutcome()

    def _resolve_drive(
        self,
        ctx: _PossessionContext,
        handler: "Player",
        defender: "Player",
        position: Optional[Position],
        defender_position: Optional[Position],
    ) -> DriveOutcome:
        """Resolve a drive: the handling micro-action, then blow-by and foul draws.

        Only the micro-action's turnover flag and dribble count feed the drive.
        A failed handle that keeps the ball still reaches the blow-by draw,
        whose odds depend on open lanes and the drive angle alone.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        handler : Player
            Driver.
        defender : Player
            On-ball defender.
        position : Position | None
            Driver location, if placed.
        defender_position : Position | None
            Defender location, if placed.

        Returns
        -------
        DriveOutcome
            Drive result.
        """
        cfg = self.config.resolution
        state = ctx.state
        if position is not None and defender_position is not None:
            gap = position.distance_to(defender_position)
        else:
            gap = self.config.movement.pressure_distance * (1 - cfg.default_pressure)

        spacing = self.formations.analyze_formation(state.offense_formation).spacing if state.offense_formation else 0.0
        context = MovementContext(
            handler, gap, state.spacing.open_lanes, spacing, state.fatigue_of(handler.player_id) / 100
        )
        movement = self.movement.execute_movement("drive", context, ctx.rng)
        ctx.dribbles_since_catch += movement.dribbles
        if movement.turnover:
            return DriveOutcome(turnover=True)

        angle = drive_angle(position, defender_position, state.attacking_left) if position is not None else 0.0
        blowby = drive_blowby_probability(
            handler.ratings, defender.ratings, state.spacing.open_lanes, abs(angle), self.config
        )
        contact = cfg.drive_high_contact if blowby.p > cfg.drive_contact_threshold else cfg.drive_low_contact
        foul = shooting_foul_probability(handler.ratings, defender.ratings, contact, cfg.drive_contest, self.config)
        beat = ctx.rng.random() < safe_probability(blowby.p)
        fouled = ctx.rng.random() < safe_probability(foul.p)
        return DriveOutcome(beat, fouled, False, blowby, foul)

    def _resolve_shot(
        self,
        ctx: _PossessionContext,
        action: Action,
        handler: "Player",
        defender: "Player",
        position: Optional[Position],
        defender_position: Optional[Position],
    ) -> ShotOutcome:
        """Resolve a pull-up or catch-and-shoot attempt.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        action : Action
            ``"pullup"`` or ``"catchShoot"``.
        handler : Player
            Shooter.
        defender : Player
            Closest-out defender.
        position : Position | None
            Shooter location, if placed.
        defender_position : Position | None
            Defender location, if placed.

        Returns
        -------
        ShotOutcome
            Shot result.
        """
        cfg = self.config.resolution
        state = ctx.state
        if position is not None:
            quality = calculate_shot_quality(position, defender_position, state.attacking_left)
            zone = get_shot_zone(position, state.attacking_left)
        else:
            quality = cfg.default_shot_quality
            zone = "mid"
        if position is not None and defender_position is not None:
            contest = max(0.0, 1 - position.distance_to(defender_position) / cfg.contest_radius)
        else:
            contest = cfg.default_contest
        release = cfg.catch_release if action == "catchShoot" else cfg.pullup_release
        clutch = 1.0 if state.clock.is_clutch(self.config) else 0.0

        make_explain = shot_make_probability(
            handler.ratings,
            quality,
            contest,
            state.fatigue_of(handler.player_id) / 100,
            clutch,
            release,
            zone,
            self.config,
        )
        foul = shooting_foul_probability(handler.ratings, defender.ratings, cfg.shot_contact, contest, self.config)
        make = ctx.rng.random() < safe_probability(make_explain.p)
        fouled = ctx.rng.random() < safe_probability(foul.p)
        ctx.last_shot_quality = quality
        return ShotOutcome(make, fouled, zone == "three", zone, make_explain, foul)

    def _resolve_pass(self, ctx: _PossessionContext, handler: "Player", pressure: float) -> PassOutcome:
        """Resolve a pick-and-roll pass and pick its receiver.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        handler : Player
            Passer.
        pressure : float
            On-ball pressure in ``[0, 1]``.

        Returns
        -------
        PassOutcome
            Completed pass with a receiver, or a turnover.
        """
        cfg = self.config.resolution
        lane_risk = cfg.pass_lane_risk * (1 - cfg.ball_movement_relief * ctx.state.spacing.ball_movement)
        explain = pass_complete_probability(handler.ratings, lane_risk, pressure, self.config)
        if ctx.rng.random() >= safe_probability(explain.p):
            return PassOutcome(complete=False, turnover=True, explain=explain)

        teammates = [p for p in ctx.offense.lineup if p.player_id != handler.player_id]
        receiver = teammates[int(ctx.rng.random() * len(teammates))]
        return PassOutcome(complete=True, turnover=False, target=receiver.player_id, explain=explain)

    def _defender(self, ctx: _PossessionContext, player_id: str) -> Tuple["Player", Optional[Position]]:
        """Return the defender responsible for ``player_id`` and where they stand.

        Falls back to the first defender in the lineup when no man assignment
        covers the player.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        player_id : str
            Offensive player.

        Returns
        -------
        Tuple[Player, Position | None]
            Defender and their position, if placed.
        """
        state = ctx.state
        defender = None
        if state.assignments is not None:
            defender_id = self.coordinator.get_matchup(player_id, state.assignments)
            if defender_id is not None:
                defender = ctx.defense.get_player(defender_id)
        if defender is None:
            defender = ctx.defense.lineup[0]
        position = state.defense_formation.position_of(defender.player_id) if state.defense_formation else None
        return defender, position

    def _pressure(self, position: Optional[Position], defender_position: Optional[Position]) -> float:
        """Return on-ball pressure from the defender's distance.

        Parameters
        ----------
        position : Position | None
            Handler location.
        defender_position : Position | None
            Defender location.

        Returns
        -------
        float
            Pressure in ``[0, 1]``; the configured default when either is unplaced.
        """
        cfg = self.config.resolution
        if position is None or defender_position is None:
            return cfg.default_pressure
        return max(0.0, 1 - position.distance_to(defender_position) / cfg.pressure_radius)

    def _record(
        self,
        ctx: _PossessionContext,
        handler: "Player",
        action: Action,
        resolved: Action,
        position: Optional[Position],
        outcome: ActionOutcome,
    ) -> None:
        """Append an action record and forward it to the sink.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        handler : Player
            Acting player.
        action : Action
            Chosen action.
        resolved : Action
            Action after conversion.
        position : Position | None
            Acting player's location.
        outcome : ActionOutcome
            Outcome of the action.
        """
        state = ctx.state
        record = PlayRecord(
            possession=state.possession,
            player_id=handler.player_id,
            team_id=state.offense,
            action=action,
            resolved_action=resolved,
            side=self._side(state, state.offense),
            game_clock=state.clock.seconds,
            quarter=state.clock.quarter,
            position=position,
            outcome=outcome,
        )
        ctx.plays.append(record)
        if ctx.sink is not None:
            ctx.sink.record_play(record)
        if self.debugger is not None:
            self.debugger.log_game_event(state.clock.seconds, outcome.kind.upper(), record.description)

    def _advance_fatigue(self, ctx: _PossessionContext, handler: "Player", outcome: ActionOutcome) -> None:
        """Charge the handler for the action just taken.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        handler : Player
            Acting player.
        outcome : ActionOutcome
            Outcome of the action; shot attempts cost extra.
        """
        cfg = self.config.fatigue
        cost = cfg.per_action + (cfg.per_shot if isinstance(outcome, ShotOutcome) else 0.0)
        ctx.state.add_fatigue(handler.player_id, cost)

    def _update_positions(self, ctx: _PossessionContext, resolved: Action, outcome: ActionOutcome) -> None:
        """Replace the formations and spacing after an action.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        resolved : Action
            Action after conversion.
        outcome : ActionOutcome
            Outcome of the action.
        """
        cfg = self.config.resolution
        state = ctx.state
        offense_formation = state.offense_formation
        if offense_formation is None or state.defense_formation is None:
            return

        handler_id = state.ball_handler
        position = offense_formation.position_of(handler_id)
        if resolved == "drive" and position is not None:
            basket = COURT.basket(state.attacking_left)
            advanced = COURT.constrain_to_bounds(position.move_towards(basket, cfg.drive_advance))
            offense_formation = offense_formation.with_player(handler_id, advanced).with_ball(advanced, handler_id)
        elif isinstance(outcome, PassOutcome) and outcome.target is not None:
            receiver_spot = offense_formation.position_of(outcome.target)
            if receiver_spot is not None:
                offense_formation = self.formations.update_formation_after_ball_movement(
                    offense_formation, receiver_spot, outcome.target
                )
            state.ball_handler = outcome.target
            ctx.last_passer = handler_id
            ctx.dribbles_since_catch = 0

        ball_movement = state.spacing.ball_movement
        if resolved in ("pnrPass", "reset"):
            ball_movement = min(1.0, ball_movement + cfg.ball_movement_step)

        state.offense_formation = offense_formation
        state.defense_formation = self._react_defense(state.defense_formation, offense_formation.ball_position)
        state.spacing = self._spacing(ctx, ball_movement)

        if self.debugger is not None:
            spot = offense_formation.position_of(state.ball_handler)
            self.debugger.log_player_state(
                state.clock.seconds,
                state.ball_handler,
                ctx.offense.name,
                (spot.x, spot.y) if spot is not None else None,
                True,
                state.fatigue_of(state.ball_handler),
                resolved,
            )

    def _react_defense(self, formation: Formation, ball: Position) -> Formation:
        """Step defenders who are far from the ball toward it.

        Parameters
        ----------
        formation : Formation
            Current defensive formation.
        ball : Position
            Ball location.

        Returns
        -------
        Formation
            New defensive formation following the ball.
        """
        cfg = self.config.resolution
        positions = {}
        for player_id, spot in formation.positions.items():
            if spot.distance_to(ball) > cfg.defender_reaction_range:
                spot = spot.move_towards(ball, cfg.defender_step)
            positions[player_id] = spot
        return replace(formation, positions=positions, ball_position=ball, version=formation.version + 1)

    def _drain(self, ctx: _PossessionContext, resolved: Action) -> None:
        """Run both clocks down by the action's time cost.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        resolved : Action
            Action after conversion.
        """
        cfg = self.config.clock
        state = ctx.state
        seconds = cfg.action_drain.get(resolved, cfg.default_drain)
        quarter = state.clock.quarter
        state.shot_clock = max(0.0, state.shot_clock - seconds)
        state.clock = state.clock.drain(seconds, self.config)
        if state.clock.quarter != quarter:
            state.fouls.reset_quarter()
            if self.debugger is not None:
                self.debugger.log_game_event(state.clock.seconds, "QUARTER", f"Start of quarter {state.clock.quarter}")

    def _apply_outcome(
        self,
        ctx: _PossessionContext,
        handler: "Player",
        position: Optional[Position],
        outcome: ActionOutcome,
    ) -> bool:
        """Branch on the outcome: score, free throws, rebound, turnover or continue.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        handler : Player
            Acting player.
        position : Position | None
            Acting player's location when the action started.
        outcome : ActionOutcome
            Outcome of the action.

        Returns
        -------
        bool
            ``True`` while the same offence keeps the ball.

        Raises
        ------
        TypeError
            If ``outcome`` is not a known outcome variant.
        """
        state = ctx.state
        if isinstance(outcome, ShotOutcome):
            if outcome.fouled:
                attempts = free_throws_awarded("shooting", outcome.three)
                self._free_throws(ctx, handler, attempts, report=False)
                self._swap_possession(ctx)
                return False
            if outcome.make:
                self._credit_assist(ctx, handler)
                self._score(ctx, outcome.points)
                self._swap_possession(ctx)
                return False
            location = position if position is not None else (
                state.offense_formation.ball_position if state.offense_formation else None
            )
            return self._rebound(ctx, location, outcome.zone, ctx.last_shot_quality)

        if isinstance(outcome, DriveOutcome):
            if outcome.turnover:
                self._swap_possession(ctx)
                return False
            if outcome.foul:
                self._free_throws(ctx, handler, free_throws_awarded("shooting"), report=True)
                self._swap_possession(ctx)
                return False
            if outcome.blowby:
                made = ctx.rng.random() < safe_probability(self.config.resolution.blowby_finish)
                if ctx.sink is not None:
                    ctx.sink.record_finish(self._side(state, state.offense), handler.player_id, made)
                if made:
                    self._credit_assist(ctx, handler)
                    self._score(ctx, 2)
                    self._swap_possession(ctx)
                    return False
                return self._rebound(ctx, None, None, None)
            return True

        if isinstance(outcome, PassOutcome):
            if outcome.turnover:
                self._swap_possession(ctx)
                return False
            return True

        raise TypeError(f"Unknown action outcome: {type(outcome).__name__}")

    def _free_throws(self, ctx: _PossessionContext, shooter: "Player", attempts: int, report: bool) -> None:
        """Charge the shooting foul and shoot the awarded free throws.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        shooter : Player
            Fouled player.
        attempts : int
            Free throws awarded.
        report : bool
            Forward the trip to the sink's ``record_free_throws``.
        """
        state = ctx.state
        defender, _ = self._defender(ctx, shooter.player_id)
        state.fouls.record_foul(defender.player_id, state.defense, "shooting", state.clock.quarter, state.clock.seconds)

        clutch = 1.0 if state.clock.is_clutch(self.config) else 0.0
        makes = simulate_free_throws(shooter, attempts, clutch, ctx.rng)
        if self.debugger is not None:
            self.debugger.log_game_event(
                state.clock.seconds, "FREE_THROWS", f"{shooter.player_id} makes {makes}/{attempts}"
            )
        self._score(ctx, makes)
        if report and ctx.sink is not None:
            ctx.sink.record_free_throws(self._side(state, state.offense), shooter.player_id, attempts, makes)

    def _credit_assist(self, ctx: _PossessionContext, scorer: "Player") -> None:
        """Draw for an assist on a made field goal that followed a completed pass.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        scorer : Player
            Player who scored.
        """
        if ctx.last_passer is None or ctx.last_passer == scorer.player_id:
            return
        passer = ctx.offense.get_player(ctx.last_passer)
        if passer is None:
            return
        p = calculate_assist_probability(passer, ctx.dribbles_since_catch)
        if ctx.rng.random() < safe_probability(p):
            state = ctx.state
            if ctx.sink is not None:
                ctx.sink.record_assist(self._side(state, state.offense), passer.player_id)
            if self.debugger is not None:
                self.debugger.log_game_event(
                    state.clock.seconds, "ASSIST", f"{passer.player_id} to {scorer.player_id}"
                )

    def _score(self, ctx: _PossessionContext, points: int) -> None:
        """Add points for the offence.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        points : int
            Points scored.
        """
        state = ctx.state
        state.score = state.score.add_offense(points)
        if points and self.debugger is not None:
            self.debugger.log_game_event(
                state.clock.seconds,
                "SCORE",
                f"{state.offense} +{points} | {state.score.offense}-{state.score.defense}",
            )

    def _rebound(
        self,
        ctx: _PossessionContext,
        shot_location: Optional[Position],
        shot_zone: Optional[str],
        shot_quality: Optional[float],
    ) -> bool:
        """Contest a miss and hand the ball to the winner.

        The winner's team always takes possession. ``tip_out`` on the result is
        recorded in the play log but does not change who gets the ball.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        shot_location : Position | None
            Where the shot was taken; ``None`` selects the positionless contest.
        shot_zone : str | None
            Zone of the shot.
        shot_quality : float | None
            Quality of the shot.

        Returns
        -------
        bool
            ``True`` when the offence rebounds and play continues.
        """
        state = ctx.state
        result = self.rebounds.resolve_rebound(
            ctx.offense,
            ctx.defense,
            state.offense_formation,
            state.defense_formation,
            ctx.rng,
            state.attacking_left,
            shot_location,
            shot_zone,
            shot_quality,
        )
        team_id = state.offense if result.offense_won else state.defense
        record = PlayRecord(
            possession=state.possession,
            player_id=result.winner,
            team_id=team_id,
            action="rebound",
            resolved_action="rebound",
            side=self._side(state, team_id),
            game_clock=state.clock.seconds,
            quarter=state.clock.quarter,
            position=result.landing,
            rebound=result,
            kind="rebound",
        )
        ctx.plays.append(record)
        if ctx.sink is not None:
            ctx.sink.record_play(record)

        if not result.offense_won:
            self._swap_possession(ctx)
            return False

        state.ball_handler = result.winner
        state.shot_clock = max(state.shot_clock, self.config.clock.offensive_rebound_floor)
        ctx.last_passer = None
        ctx.dribbles_since_catch = 0
        spot = state.offense_formation.position_of(result.winner) if state.offense_formation else None
        if spot is not None:
            state.offense_formation = self.formations.update_formation_after_ball_movement(
                state.offense_formation, spot, result.winner
            )
            state.spacing = self._spacing(ctx, state.spacing.ball_movement)
        return True

    def _swap_possession(self, ctx: _PossessionContext) -> None:
        """Hand the ball to the other team and rebuild the court for the new sides.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        """
        state = ctx.state
        ctx.offense, ctx.defense = ctx.defense, ctx.offense
        state.offense, state.defense = state.defense, state.offense
        state.score = state.score.swapped()
        state.ball_handler = ctx.offense.players[0].player_id
        state.shot_clock = self.config.clock.shot_clock
        ctx.scheme = ctx.defense.defensive_scheme
        ctx.last_passer = None
        ctx.dribbles_since_catch = 0
        ctx.last_shot_quality = None
        self._setup_court(ctx)
        if self.debugger is not None:
            self.debugger.log_game_event(state.clock.seconds, "POSSESSION", f"{state.offense} ball")

    def _setup_court(self, ctx: _PossessionContext) -> None:
        """Build formations, assignments and spacing for the current sides.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        """
        state = ctx.state
        attacking_left = state.attacking_left
        offense_formation = self.formations.create_offensive_formation(
            ctx.offense, attacking_left, ctx.offense.set_play, state.ball_handler
        )
        defense_formation = self.formations.create_defensive_formation(
            ctx.defense, ctx.scheme, offense_formation, attacking_left
        )
        state.offense_formation = offense_formation
        state.defense_formation = defense_formation
        state.assignments = self.coordinator.assign_defenders(
            ctx.offense, ctx.defense, ctx.scheme, offense_formation, defense_formation
        )
        state.spacing = self._spacing(ctx, 0.0)

    def _spacing(self, ctx: _PossessionContext, ball_movement: float) -> Spacing:
        """Derive spacing for the current handler from the formations.

        Parameters
        ----------
        ctx : _PossessionContext
            Possession working set.
        ball_movement : float
            Ball movement to carry into the new spacing.

        Returns
        -------
        Spacing
            Open lanes, ball movement and handler shot quality.
        """
        state = ctx.state
        offense_formation = state.offense_formation
        defense_formation = state.defense_formation
        if offense_formation is None or defense_formation is None:
            return Spacing(ball_movement=ball_movement)

        open_lanes = calculate_open_lanes(
            offense_formation.ball_position,
            list(offense_formation.positions.values()),
            list(defense_formation.positions.values()),
            state.attacking_left,
        )
        spot = offense_formation.position_of(state.ball_handler) or offense_formation.ball_position
        _, defender_position = self._defender(ctx, state.ball_handler)
        quality = calculate_shot_quality(spot, defender_position, state.attacking_left)
        return Spacing(open_lanes, ball_movement, quality)

    @staticmethod
    def _side(state: PossessionState, team_id: str) -> Side:
        """Return whether ``team_id`` is the home or away side.

        Parameters
        ----------
        state : PossessionState
            State naming the home team.
        team_id : str
            Team to classify.

        Returns
        -------
        Side
            ``"home"`` or ``"away"``.
        """
        return "home" if team_id == state.home_team else "away"


__all__ = ["BallHandlerNotFoundError", "POSSESSION_SEED_STRIDE", "PossessionEngine", "StatsSink"]
