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
"""Ten-player rebound contest.

A missed shot produces a carom whose trajectory depends on shot quality and
zone. Defenders box out the nearest offender, every on-court player receives an
exponential weight from the rebound model, and the winner is drawn from the
resulting distribution. When the shot location is unknown the resolver falls
back to a positionless weighting of the same ten players.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Literal, Optional, Tuple

from .config import ENGINE_CONFIG, EngineConfig
from .probability import EMPTY_EXPLAIN, Explain, rebound_weight
from .spatial import COURT, Position, get_shot_zone

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.team import Team
    from courtside.utils.debug import MatchDebugger

    from .formation import Formation

Trajectory = Literal["short", "soft", "hard", "long"]
Side = Literal["offense", "defense"]


@dataclass(frozen=True)
class ReboundParticipant:
    """A player competing for a rebound.

    Parameters
    ----------
    player_id : str
        Competing player.
    side : Side
        Whether the player is on offence or defence.
    position : Position | None
        Court position; ``None`` on the positionless fallback path.
    distance : float
        Feet from the landing spot.
    weight : float
        Unnormalised contest weight.
    boxed_out : bool
        Offender is being boxed out.
    box_out_target : str | None
        Offender this defender is boxing out.
    explain : Explain
        Rebound model breakdown.
    """

    player_id: str
    side: Side
    position: Optional[Position]
    distance: float
    weight: float
    boxed_out: bool = False
    box_out_target: Optional[str] = None
    explain: Explain = EMPTY_EXPLAIN


@dataclass(frozen=True)
class ReboundResult:
    """Outcome of a rebound contest.

    Parameters
    ----------
    winner : str
        Player who secured the ball.
    offense_won : bool
        Winner belongs to the offensive roster.
    contested : bool
        More than one player was near the landing spot.
    tip_out : bool
        Ball was tipped out rather than cleanly secured. Reported only; the
        winner still takes possession.
    trajectory : Trajectory | None
        Carom type; ``None`` on the fallback path.
    landing : Position | None
        Landing spot; ``None`` on the fallback path.
    participants : Tuple[ReboundParticipant, ...]
        All weighted participants.
    explain : Explain
        Winner's rebound model breakdown.
    """

    winner: str
    offense_won: bool
    contested: bool
    tip_out: bool
    trajectory: Optional[Trajectory]
    landing: Optional[Position]
    participants: Tuple[ReboundParticipant, ...]
    explain: Explain


@dataclass
class ReboundResolver:
    """Resolve rebound contests on missed shots.

    Parameters
    ----------
    config : EngineConfig, optional
        Configuration override; defaults to ``ENGINE_CONFIG``.
    debugger : MatchDebugger | None, optional
        Telemetry sink for contest summaries.
    """

    config: EngineConfig = field(default_factory=lambda: ENGINE_CONFIG)
    debugger: Optional["MatchDebugger"] = None

    def resolve_rebound(
        self,
        offense: "Team",
        defense: "Team",
        offense_formation: "Formation",
        defense_formation: "Formation",
        rng: random.Random,
        attacking_left: bool,
        shot_location: Optional[Position] = None,
        shot_zone: Optional[str] = None,
        shot_quality: Optional[float] = None,
    ) -> ReboundResult:
        """Decide who secures a missed shot.

        Parameters
        ----------
        offense : Team
            Shooting team.
        defense : Team
            Defending team.
        offense_formation : Formation
            Offensive positions at the time of the miss.
        defense_formation : Formation
            Defensive positions at the time of the miss.
        rng : random.Random
            Possession random stream.
        attacking_left : bool
            Whether the offence attacks the left basket.
        shot_location : Position | None, optional
            Where the shot was taken; the fallback path runs without it.
        shot_zone : str | None, optional
            Zone of the shot; derived from ``shot_location`` when omitted.
        shot_quality : float | None, optional
            Quality of the shot; zone tendencies alone apply when omitted.

        Returns
        -------
        ReboundResult
            Contest outcome.
        """
        if shot_location is None:
            result = self._resolve_fallback(offense, defense, rng)
        else:
            zone = shot_zone or get_shot_zone(shot_location, attacking_left)
            trajectory = self.determine_trajectory(zone, shot_quality, rng)
            landing = self.landing_spot(shot_location, trajectory, attacking_left)
            box_outs = self.determine_box_outs(offense, defense, offense_formation, defense_formation)
            participants = self._build_participants(
                offense, defense, offense_formation, defense_formation, landing, box_outs
            )
            result = self._resolve_contest(offense, participants, trajectory, landing, rng)

        if self.debugger is not None:
            self.debugger.log_rebound(
                result.winner,
                result.offense_won,
                result.contested,
                result.tip_out,
                result.trajectory,
            )
        return result

    def determine_trajectory(self, zone: str, shot_quality: Optional[float], rng: random.Random) -> Trajectory:
        """Draw the carom type of a missed shot.

        Parameters
        ----------
        zone : str
            Shot zone.
        shot_quality : float | None
            Shot quality; extreme values override zone tendencies.
        rng : random.Random
            Possession random stream.

        Returns
        -------
        Trajectory
            Carom type.
        """
        cfg = self.config.rebound
        if shot_quality is not None and shot_quality > cfg.high_quality:
            key = "high"
        elif shot_quality is not None and shot_quality < cfg.low_quality:
            key = "low"
        else:
            key = zone
        likely, chance, otherwise = cfg.trajectory_odds.get(key, cfg.trajectory_odds["mid"])
        return likely if rng.random() < chance else otherwise  # type: ignore[return-value]

    def landing_spot(self, shot_location: Position, trajectory: Trajectory, attacking_left: bool) -> Position:
        """Project where a carom lands.

        Short and soft caroms come back toward the shooter's side; hard and
        long caroms kick out to the weak side.

        Parameters
        ----------
        shot_location : Position
            Where the shot was taken.
        trajectory : Trajectory
            Carom type.
        attacking_left : bool
            Whether the offence attacks the left basket.

        Returns
        -------
        Position
            Landing spot clamped to the court.
        """
        distance = self.config.rebound.carom_distance[trajectory]
        basket = COURT.orient(COURT.basket(attacking_left), attacking_left)
        shooter = COURT.orient(shot_location, attacking_left)
        dx, dy = shooter.x - basket.x, shooter.y - basket.y
        length = (dx * dx + dy * dy) ** 0.5
        if length == 0:
            dx, dy, length = 1.0, 0.0, 1.0
        ux, uy = dx / length, dy / length
        if trajectory in ("hard", "long"):
            uy = -uy
        local = Position(basket.x + ux * distance, basket.y + uy * distance)
        return COURT.constrain_to_bounds(COURT.orient(COURT.constrain_to_bounds(local), attacking_left))

    def determine_box_outs(
        self,
        offense: "Team",
        defense: "Team",
        offense_formation: "Formation",
        defense_formation: "Formation",
    ) -> Dict[str, Optional[str]]:
        """Pair each defender with the nearest offender in box-out range.

        Parameters
        ----------
        offense : Team
            Shooting team.
        defense : Team
            Defending team.
        offense_formation : Formation
            Offensive positions.
        defense_formation : Formation
            Defensive positions.

        Returns
        -------
        Dict[str, str | None]
            Offender boxed out by each placed defender, or ``None``.
        """
        reach = self.config.rebound.box_out_range
        box_outs: Dict[str, Optional[str]] = {}
        for defender in defense.lineup:
            def_pos = defense_formation.position_of(defender.player_id)
            if def_pos is None:
                continue
            closest: Optional[str] = None
            closest_distance = float("inf")
            for offender in offense.lineup:
                off_pos = offense_formation.position_of(offender.player_id)
                if off_pos is None:
                    continue
                gap = def_pos.distance_to(off_pos)
                if gap < closest_distance and gap < reach:
                    closest_distance = gap
                    closest = offender.player_id
            box_outs[defender.player_id] = closest
        return box_outs

    def _build_participants(
        self,
        offense: "Team",
        defense: "Team",
        offense_formation: "Formation",
        defense_formation: "Formation",
        landing: Position,
        box_outs: Dict[str, Optional[str]],
    ) -> List[ReboundParticipant]:
        """Weight every placed player for the contest.

        Parameters
        ----------
        offense : Team
            Shooting team.
        defense : Team
            Defending team.
        offense_formation : Formation
            Offensive positions.
        defense_formation : Formation
            Defensive positions.
        landing : Position
            Landing spot.
        box_outs : Dict[str, str | None]
            Box-out pairings from :meth:`determine_box_outs`.

        Returns
        -------
        List[ReboundParticipant]
            Offensive participants followed by defensive participants.
        """
        spacing_cfg = self.config.spacing
        boxed = {target for target in box_outs.values() if target is not None}
        participants: List[ReboundParticipant] = []

        for player in offense.lineup:
            spot = offense_formation.position_of(player.player_id)
            if spot is None:
                continue
            is_boxed = player.player_id in boxed
            advantage = spacing_cfg.being_boxed_out_penalty if is_boxed else 0.0
            gap = spot.distance_to(landing)
            weight, explain = rebound_weight(player.ratings, advantage, gap, self.config)
            participants.append(
                ReboundParticipant(player.player_id, "offense", spot, gap, weight, is_boxed, None, explain)
            )

        for player in defense.lineup:
            spot = defense_formation.position_of(player.player_id)
            if spot is None:
                continue
            target = box_outs.get(player.player_id)
            advantage = spacing_cfg.boxing_out_advantage if target is not None else 0.0
            gap = spot.distance_to(landing)
            weight, explain = rebound_weight(player.ratings, advantage, gap, self.config)
            participants.append(
                ReboundParticipant(player.player_id, "defense", spot, gap, weight, False, target, explain)
            )

        return participants

    def _resolve_contest(
        self,
        offense: "Team",
        participants: List[ReboundParticipant],
        trajectory: Trajectory,
        landing: Position,
        rng: random.Random,
    ) -> ReboundResult:
        """Draw the winner of a positional contest and classify it.

        Parameters
        ----------
        offense : Team
            Shooting team, used to derive ``offense_won``.
        participants : List[ReboundParticipant]
            Weighted participants.
        trajectory : Trajectory
            Carom type.
        landing : Position
            Landing spot.
        rng : random.Random
            Possession random stream.

        Returns
        -------
        ReboundResult
            Contest outcome.
        """
        cfg = self.config.rebound
        ranked = sorted(participants, key=lambda p: p.weight, reverse=True)
        winner = _draw_weighted(ranked, rng)

        near = sum(1 for p in participants if p.distance <= cfg.contested_radius)
        contested = near > 1
        tip_out = contested and winner.weight < cfg.tip_out_weight and rng.random() < cfg.tip_out_chance

        return ReboundResult(
            winner=winner.player_id,
            offense_won=offense.has_player(winner.player_id),
            contested=contested,
            tip_out=tip_out,
            trajectory=trajectory,
            landing=landing,
            participants=tuple(ranked),
            explain=winner.explain,
        )

    def _resolve_fallback(self, offense: "Team", defense: "Team", rng: random.Random) -> ReboundResult:
        """Weight all ten players without positional information.

        Parameters
        ----------
        offense : Team
            Shooting team.
        defense : Team
            Defending team.
        rng : random.Random
            Possession random stream.

        Returns
        -------
        ReboundResult
            Contest outcome without trajectory or landing data.
        """
        cfg = self.config.rebound
        participants: List[ReboundParticipant] = []
        for team, side, (advantage, gap) in (
            (offense, "offense", cfg.fallback_offense),
            (defense, "defense", cfg.fallback_defense),
        ):
            for player in team.lineup:
                weight, explain = rebound_weight(player.ratings, advantage, gap, self.config)
                participants.append(
                    ReboundParticipant(player.player_id, side, None, gap, weight, explain=explain)  # type: ignore[arg-type]
                )

        winner = _draw_weighted(participants, rng)
        return ReboundResult(
            winner=winner.player_id,
            offense_won=offense.has_player(winner.player_id),
            contested=False,
            tip_out=False,
            trajectory=None,
            landing=None,
            participants=tuple(participants),
            explain=winner.explain,
        )


def _draw_weighted(participants: List[ReboundParticipant], rng: random.Random) -> ReboundParticipant:
    """Sample one participant proportionally to weight.

    Parameters
    ----------
    participants : List[ReboundParticipant]
        Candidates; must not be empty.
    rng : random.Random
        Possession random stream.

    Returns
    -------
    ReboundParticipant
        Sampled participant; the first candidate if rounding leaves the draw unmatched.
    """
    total = sum(p.weight for p in participants)
    draw = rng.random() * total
    cumulative = 0.0
    for participant in participants:
        cumulative += participant.weight
        if draw < cumulative:
            return participant
    return participants[0]


__all__ = ["ReboundParticipant", "ReboundResolver", "ReboundResult", "Side", "Trajectory"]
