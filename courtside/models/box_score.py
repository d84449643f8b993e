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
"""Box-score aggregation and the free-throw and assist models that feed it.

The possession engine never owns aggregate statistics. It reports each play
to a :class:`BoxScore` (or any object with the same methods) and the box score
accumulates per-player and per-team lines.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Literal, Optional, Tuple

from courtside.engine.config import ENGINE_CONFIG
from courtside.engine.outcomes import DriveOutcome, PassOutcome, ShotOutcome
from courtside.engine.probability import logistic, rating_z, safe_probability
from courtside.models.player import Player
from courtside.models.team import Team

if TYPE_CHECKING:  # pragma: no cover
    from courtside.engine.events import PlayRecord
    from courtside.engine.officiating import FoulTracker

TeamSide = Literal["home", "away"]

FLAT_FREE_THROW_RATE = 0.75
"""Make rate credited for shooting-foul free throws reported through ``record_play``."""


def simulate_free_throws(player: Player, attempts: int, clutch_context: float, rng: random.Random) -> int:
    """Shoot a trip of free throws.

    Each attempt draws twice from ``rng``: once for shot-to-shot noise and
    once for the make.

    Parameters
    ----------
    player : Player
        Shooter.
    attempts : int
        Free throws awarded.
    clutch_context : float
        ``1.0`` in clutch time, otherwise ``0.0``.
    rng : random.Random
        Possession random stream.

    Returns
    -------
    int
        Free throws made.
    """
    cfg = ENGINE_CONFIG.free_throw
    ratings = player.ratings
    base = (
        cfg.rating * rating_z(ratings.ft)
        + cfg.consistency * rating_z(ratings.consistency)
        + cfg.clutch * rating_z(ratings.clutch) * clutch_context
    )
    noise_scale = cfg.noise * (1 - ratings.consistency / 100)
    makes = 0
    for _ in range(attempts):
        score = base + (rng.random() - 0.5) * noise_scale
        if rng.random() < safe_probability(logistic(score)):
            makes += 1
    return makes


def calculate_assist_probability(passer: Player, dribbles_since_catch: int) -> float:
    """Return the chance a made basket is credited as an assist.

    Parameters
    ----------
    passer : Player
        Player who made the last completed pass.
    dribbles_since_catch : int
        Dribbles the scorer took after the catch.

    Returns
    -------
    float
        Zero beyond the dribble limit, otherwise a logistic in pass skill.
    """
    cfg = ENGINE_CONFIG.assist
    if dribbles_since_catch > cfg.dribble_limit:
        return 0.0
    score = cfg.base + cfg.passing * rating_z(passer.ratings.pass_) + cfg.dribble_penalty * dribbles_since_catch
    return logistic(score)


@dataclass
class ZoneLine:
    """Made and attempted shots from one zone.

    Parameters
    ----------
    made : int, default=0
        Field goals made.
    attempted : int, default=0
        Field goals attempted.
    """

    made: int = 0
    attempted: int = 0


@dataclass
class PlayerLine:
    """Counting statistics for one player (or a team total).

    Parameters
    ----------
    player_id : str
        Player (or team) the line belongs to.
    minutes : float, default=0.0
        Minutes on court.
    points : int, default=0
        Points scored.
    fgm : int, default=0
        Field goals made.
    fga : int, default=0
        Field goals attempted.
    tpm : int, default=0
        Three-pointers made.
    tpa : int, default=0
        Three-pointers attempted.
    ftm : int, default=0
        Free throws made.
    fta : int, default=0
        Free throws attempted.
    oreb : int, default=0
        Offensive rebounds.
    dreb : int, default=0
        Defensive rebounds.
    assists : int, default=0
        Assists.
    turnovers : int, default=0
        Turnovers.
    fouls : int, default=0
        Personal fouls.
    possessions_used : int, default=0
        Shots and drives attempted.
    drives : int, default=0
        Drives attempted.
    drives_successful : int, default=0
        Drives that beat the defender.
    passes_attempted : int, default=0
        Passes attempted, ball movement included.
    passes_completed : int, default=0
        Passes completed.
    shots_by_zone : Dict[str, ZoneLine], optional
        Shooting split by zone.
    plus_minus : float, default=0.0
        Minutes-weighted plus/minus.
    """

    player_id: str
    minutes: float = 0.0
    points: int = 0
    fgm: int = 0
    fga: int = 0
    tpm: int = 0
    tpa: int = 0
    ftm: int = 0
    fta: int = 0
    oreb: int = 0
    dreb: int = 0
    assists: int = 0
    turnovers: int = 0
    fouls: int = 0
    possessions_used: int = 0
    drives: int = 0
    drives_successful: int = 0
    passes_attempted: int = 0
    passes_completed: int = 0
    shots_by_zone: Dict[str, ZoneLine] = field(
        default_factory=lambda: {zone: ZoneLine() for zone in ("rim", "close", "mid", "three")}
    )
    plus_minus: float = 0.0

    @property
    def rebounds(self) -> int:
        """Return total rebounds."""
        return self.oreb + self.dreb

    @property
    def effective_fg_pct(self) -> float:
        """Return effective field-goal percentage, or zero without attempts."""
        if self.fga == 0:
            return 0.0
        return (self.fgm + 0.5 * self.tpm) / self.fga

    @property
    def true_shooting_attempts(self) -> float:
        """Return field-goal attempts plus weighted free-throw attempts."""
        return self.fga + 0.44 * self.fta


@dataclass
class TeamLine:
    """Player lines and team totals for one side.

    Parameters
    ----------
    team_id : str
        Team identifier.
    name : str
        Team display name.
    players : Dict[str, PlayerLine]
        Line per rostered player.
    """

    team_id: str
    name: str
    players: Dict[str, PlayerLine]
    totals: PlayerLine = field(init=False)
    possessions: int = field(default=0, init=False)
    pace: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        """Create the team-total line."""
        self.totals = PlayerLine(self.team_id)

    def lines_for(self, player_id: str) -> List[PlayerLine]:
        """Return the player line and the team totals to update together.

        Parameters
        ----------
        player_id : str
            Player to look up.

        Returns
        -------
        List[PlayerLine]
            ``[player line, totals]``, or ``[]`` for players not on the roster.
        """
        line = self.players.get(player_id)
        return [line, self.totals] if line is not None else []


class BoxScore:
    """Game-level statistics sink fed by the possession engine.

    Parameters
    ----------
    game_id : str
        Game identifier.
    home : Team
        Home team.
    away : Team
        Away team.
    """

    def __init__(self, game_id: str, home: Team, away: Team) -> None:
        """Create empty lines for both rosters.

        Parameters
        ----------
        game_id : str
            Game identifier.
        home : Team
            Home team.
        away : Team
            Away team.
        """
        self.game_id = game_id
        self.home = TeamLine(home.team_id, home.name, {p.player_id: PlayerLine(p.player_id) for p in home.players})
        self.away = TeamLine(away.team_id, away.name, {p.player_id: PlayerLine(p.player_id) for p in away.players})
        self.play_by_play: List["PlayRecord"] = []
        self.game_minutes = 0.0
        self.final_score: Optional[Tuple[int, int]] = None

    def team(self, side: TeamSide) -> TeamLine:
        """Return the line for a side.

        Parameters
        ----------
        side : TeamSide
            ``"home"`` or ``"away"``.

        Returns
        -------
        TeamLine
            Requested side.
        """
        return self.home if side == "home" else self.away

    def record_play(self, record: "PlayRecord") -> None:
        """Accumulate statistics for a play record.

        Parameters
        ----------
        record : PlayRecord
            Action or rebound reported by the engine.

        Raises
        ------
        TypeError
            If an action record carries an unknown outcome variant.
        """
        self.play_by_play.append(record)
        lines = self.team(record.side).lines_for(record.player_id)
        if not lines:
            return

        if record.kind == "rebound":
            if record.rebound is not None and record.rebound.winner == record.player_id:
                for line in lines:
                    if record.rebound.offense_won:
                        line.oreb += 1
                    else:
                        line.dreb += 1
            return

        outcome = record.outcome
        if outcome is None:
            return
        if isinstance(outcome, ShotOutcome):
            self._record_shot(lines, outcome)
            for line in lines:
                line.possessions_used += 1
        elif isinstance(outcome, DriveOutcome):
            for line in lines:
                line.possessions_used += 1
                line.drives += 1
                line.drives_successful += int(outcome.blowby)
                line.turnovers += int(outcome.turnover)
        elif isinstance(outcome, PassOutcome):
            for line in lines:
                line.passes_attempted += 1
                if outcome.complete:
                    line.passes_completed += 1
                elif outcome.turnover:
                    line.turnovers += 1
        else:
            raise TypeError(f"Unknown action outcome: {type(outcome).__name__}")

    def record_assist(self, side: TeamSide, passer_id: str) -> None:
        """Credit an assist.

        Parameters
        ----------
        side : TeamSide
            Side of the passer.
        passer_id : str
            Passer credited with the assist.
        """
        for line in self.team(side).lines_for(passer_id):
            line.assists += 1

    def record_free_throws(self, side: TeamSide, player_id: str, attempts: int, makes: int) -> None:
        """Credit a trip to the line.

        Parameters
        ----------
        side : TeamSide
            Side of the shooter.
        player_id : str
            Shooter.
        attempts : int
            Free throws attempted.
        makes : int
            Free throws made.
        """
        for line in self.team(side).lines_for(player_id):
            line.fta += attempts
            line.ftm += makes
            line.points += makes

    def record_finish(self, side: TeamSide, player_id: str, made: bool) -> None:
        """Credit the finish at the rim after a successful drive.

        Parameters
        ----------
        side : TeamSide
            Side of the finisher.
        player_id : str
            Finisher.
        made : bool
            Whether the layup went in.
        """
        for line in self.team(side).lines_for(player_id):
            line.fga += 1
            line.shots_by_zone["rim"].attempted += 1
            if made:
                line.fgm += 1
                line.shots_by_zone["rim"].made += 1
                line.points += 2

    def score(self) -> Tuple[int, int]:
        """Return the game score.

        Returns
        -------
        Tuple[int, int]
            ``(home, away)``; the official score once finalised, otherwise the
            points credited to each team line.
        """
        if self.final_score is not None:
            return self.final_score
        return self.home.totals.points, self.away.totals.points

    def update_possessions(self, side: TeamSide) -> None:
        """Count one completed possession for a side.

        Parameters
        ----------
        side : TeamSide
            Side that had the ball.
        """
        self.team(side).possessions += 1

    def update_minutes(self, home_lineup: Iterable[str], away_lineup: Iterable[str], minutes: float) -> None:
        """Add court time to every player on the floor.

        Parameters
        ----------
        home_lineup : Iterable[str]
            Home players on court.
        away_lineup : Iterable[str]
            Away players on court.
        minutes : float
            Minutes elapsed.
        """
        for side, lineup in (("home", home_lineup), ("away", away_lineup)):
            team = self.team(side)  # type: ignore[arg-type]
            for player_id in lineup:
                if player_id in team.players:
                    team.players[player_id].minutes += minutes

    def finalize(
        self,
        game_minutes: float = 48.0,
        fouls: Optional["FoulTracker"] = None,
        final_score: Optional[Tuple[int, int]] = None,
    ) -> None:
        """Compute pace, plus/minus and foul totals once the game is over.

        Parameters
        ----------
        game_minutes : float, default=48.0
            Minutes played.
        fouls : FoulTracker | None, optional
            Game foul counters to copy into the lines.
        final_score : Tuple[int, int] | None, optional
            Official ``(home, away)`` score; the team point totals are used when omitted.
        """
        self.final_score = final_score
        self.game_minutes = game_minutes
        pace_factor = 48.0 / game_minutes if game_minutes > 0 else 0.0
        for team in (self.home, self.away):
            team.pace = team.possessions * pace_factor

        if fouls is not None:
            for team in (self.home, self.away):
                for player_id, line in team.players.items():
                    line.fouls = fouls.player_fouls.get(player_id, 0)
                team.totals.fouls = fouls.team_fouls.get(team.team_id, 0)

        home_points, away_points = self.score()
        margin = home_points - away_points
        total_minutes = game_minutes * 5
        for team, sign in ((self.home, 1), (self.away, -1)):
            for line in team.players.values():
                line.plus_minus = sign * margin * (line.minutes / total_minutes) if total_minutes else 0.0

    def summary(self) -> str:
        """Render a short text summary of the game.

        Returns
        -------
        str
            Multi-line summary with the score, pace, top scorers and team shooting.
        """
        lines = ["=== BOX SCORE ==="]
        home_points, away_points = self.score()
        lines.append(f"{self.home.name} {home_points} - {away_points} {self.away.name}")
        lines.append(f"Pace: {self.home.pace:.1f} possessions per 48 min")
        for team in (self.home, self.away):
            top = max(team.players.values(), key=lambda line: line.points)
            totals = team.totals
            fg_pct = 100 * totals.fgm / totals.fga if totals.fga else 0.0
            lines.append(
                f"{team.name}: {totals.fgm}/{totals.fga} FG ({fg_pct:.1f}%), "
                f"{totals.tpm}/{totals.tpa} 3P, {totals.ftm}/{totals.fta} FT, "
                f"{totals.rebounds} REB, {totals.assists} AST, {totals.turnovers} TOV | "
                f"Top scorer {top.player_id} {top.points} pts"
            )
        return "\n".join(lines)

    def _record_shot(self, lines: List[PlayerLine], outcome: ShotOutcome) -> None:
        """Accumulate a field-goal attempt or a shooting-foul trip.

        Parameters
        ----------
        lines : List[PlayerLine]
            Player line and team totals.
        outcome : ShotOutcome
            Shot result.
        """
        if outcome.fouled:
            attempts = 3 if outcome.three else 2
            made = math.floor(attempts * FLAT_FREE_THROW_RATE)
            for line in lines:
                line.fta += attempts
                line.ftm += made
                line.points += made
            return

        zone = outcome.zone if outcome.zone in ("rim", "close", "mid", "three") else "mid"
        for line in lines:
            line.fga += 1
            line.shots_by_zone[zone].attempted += 1
            if outcome.three:
                line.tpa += 1
            if outcome.make:
                line.fgm += 1
                line.shots_by_zone[zone].made += 1
                line.points += outcome.points
                if outcome.three:
                    line.tpm += 1


__all__ = [
    "BoxScore",
    "PlayerLine",
    "TeamLine",
    "TeamSide",
    "ZoneLine",
    "calculate_assist_probability",
    "simulate_free_throws",
]
