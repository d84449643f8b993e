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
"""Mutable per-possession state and the small value types it aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from .config import ENGINE_CONFIG, ClockConfig, EngineConfig
from .officiating import FoulTracker

if TYPE_CHECKING:  # pragma: no cover
    from .defense import DefensiveAssignments
    from .formation import Formation


@dataclass(frozen=True)
class GameClock:
    """Game clock expressed as seconds remaining in regulation.

    The clock remembers the configuration it was built with so that quarter
    validation, quarter arithmetic and clutch checks agree on one clock shape.

    Parameters
    ----------
    quarter : int
        Current quarter, starting at 1.
    seconds : float
        Seconds remaining in the game.
    config : EngineConfig | None, optional
        Configuration supplying the clock shape; defaults to ``ENGINE_CONFIG``.
    """

    quarter: int = 1
    seconds: float = 2880.0
    config: Optional[EngineConfig] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Reject negative clocks and quarters outside regulation."""
        quarters = self._clock_config().quarters
        if self.seconds < 0:
            raise ValueError("Game clock cannot be negative")
        if not 1 <= self.quarter <= quarters:
            raise ValueError(f"Quarter must be between 1 and {quarters}")

    def _clock_config(self, config: Optional[EngineConfig] = None) -> ClockConfig:
        """Return the clock block to use for a calculation.

        Parameters
        ----------
        config : EngineConfig | None, optional
            Per-call override; falls back to the clock's own configuration.

        Returns
        -------
        ClockConfig
            Clock parameters.
        """
        return (config or self.config or ENGINE_CONFIG).clock

    @property
    def seconds_in_quarter(self) -> float:
        """Return the seconds left in the current quarter."""
        cfg = self._clock_config()
        return max(0.0, self.seconds - (cfg.quarters - self.quarter) * cfg.quarter_length)

    def drain(self, seconds: float, config: Optional[EngineConfig] = None) -> "GameClock":
        """Return the clock after ``seconds`` have elapsed.

        Parameters
        ----------
        seconds : float
            Time elapsed.
        config : EngineConfig | None, optional
            Configuration override; the new clock keeps it.

        Returns
        -------
        GameClock
            Clock floored at zero with the quarter re-derived.
        """
        cfg = self._clock_config(config)
        remaining = max(0.0, self.seconds - seconds)
        elapsed = cfg.game_length - remaining
        quarter = min(cfg.quarters, 1 + int(elapsed // cfg.quarter_length))
        return GameClock(quarter, remaining, config or self.config)

    def is_clutch(self, config: Optional[EngineConfig] = None) -> bool:
        """Return whether the game is in clutch time.

        Parameters
        ----------
        config : EngineConfig | None, optional
            Configuration override.

        Returns
        -------
        bool
            ``True`` in the final quarter inside the clutch window.
        """
        cfg = self._clock_config(config)
        return self.quarter == cfg.quarters and self.seconds < cfg.clutch_window


@dataclass(frozen=True)
class Score:
    """Score from the current offence's point of view.

    Parameters
    ----------
    offense : int
        Points for the team with the ball.
    defense : int
        Points for the team defending.
    """

    offense: int = 0
    defense: int = 0

    @property
    def differential(self) -> int:
        """Return the offence's lead (negative when trailing)."""
        return self.offense - self.defense

    def add_offense(self, points: int) -> "Score":
        """Return the score after the offence adds ``points``.

        Parameters
        ----------
        points : int
            Non-negative points scored.

        Returns
        -------
        Score
            Updated score.
        """
        if points < 0:
            raise ValueError("Points cannot be negative")
        return Score(self.offense + points, self.defense)

    def swapped(self) -> "Score":
        """Return the same score viewed from the other team.

        Returns
        -------
        Score
            Score with offence and defence exchanged.
        """
        return Score(self.defense, self.offense)


@dataclass(frozen=True)
class Spacing:
    """Derived spatial context for the current ball-handler.

    Parameters
    ----------
    open_lanes : float
        Fraction of unobstructed lanes from the ball.
    ball_movement : float
        Accumulated ball movement this possession, capped at 1.
    shot_quality : float
        Quality of a shot by the handler from the current spot.
    """

    open_lanes: float = 0.5
    ball_movement: float = 0.0
    shot_quality: float = 0.5


@dataclass
class PossessionState:
    """Single mutable aggregate describing one possession.

    Parameters
    ----------
    game_id : str
        Identifier of the game.
    offense : str
        Team id of the team with the ball.
    defense : str
        Team id of the defending team.
    ball_handler : str
        Player id of the current ball-handler.
    clock : GameClock, optional
        Game clock.
    shot_clock : float, default=24.0
        Shot-clock seconds remaining.
    score : Score, optional
        Score from the offence's point of view.
    seed : int, default=0
        Game seed; combined with ``possession`` to seed the possession RNG.
    possession : int, default=1
        Possession number within the game.
    home_team : str | None, optional
        Team that attacks the left basket when it has the ball; defaults to ``offense``.
    fatigue : Dict[str, float], optional
        Fatigue accumulator per player id, on a 0-100 scale.
    fouls : FoulTracker, optional
        Game foul counters.
    offense_formation : Formation | None, optional
        Current offensive formation.
    defense_formation : Formation | None, optional
        Current defensive formation.
    assignments : DefensiveAssignments | None, optional
        Current defensive assignments.
    spacing : Spacing, optional
        Derived spacing for the current handler.
    """

    game_id: str
    offense: str
    defense: str
    ball_handler: str
    clock: GameClock = field(default_factory=GameClock)
    shot_clock: float = 24.0
    score: Score = field(default_factory=Score)
    seed: int = 0
    possession: int = 1
    home_team: Optional[str] = None
    fatigue: Dict[str, float] = field(default_factory=dict)
    fouls: FoulTracker = field(default_factory=FoulTracker)
    offense_formation: Optional["Formation"] = None
    defense_formation: Optional["Formation"] = None
    assignments: Optional["DefensiveAssignments"] = None
    spacing: Spacing = field(default_factory=Spacing)

    def __post_init__(self) -> None:
        """Default the home team and validate the shot clock."""
        if self.home_team is None:
            self.home_team = self.offense
        if self.shot_clock < 0:
            raise ValueError("Shot clock cannot be negative")
        if self.offense == self.defense:
            raise ValueError("Offense and defense must be different teams")

    @property
    def attacking_left(self) -> bool:
        """Return ``True`` when the offence attacks the left basket."""
        return self.offense == self.home_team

    @property
    def is_live(self) -> bool:
        """Return ``True`` while both clocks are running."""
        return self.shot_clock > 0 and self.clock.seconds > 0

    def fatigue_of(self, player_id: str) -> float:
        """Return a player's fatigue accumulator.

        Parameters
        ----------
        player_id : str
            Player to look up.

        Returns
        -------
        float
            Fatigue on a 0-100 scale; zero for untracked players.
        """
        return self.fatigue.get(player_id, 0.0)

    def add_fatigue(self, player_id: str, amount: float) -> None:
        """Accumulate fatigue for a player, capped at 100.

        Parameters
        ----------
        player_id : str
            Player to tire.
        amount : float
            Fatigue to add.
        """
        self.fatigue[player_id] = min(100.0, self.fatigue_of(player_id) + amount)

    def recover_fatigue(self, amount: float) -> None:
        """Reduce every player's fatigue, flooring at zero.

        Parameters
        ----------
        amount : float
            Fatigue to remove from each player.
        """
        for player_id, value in self.fatigue.items():
            self.fatigue[player_id] = max(0.0, value - amount)

    def next_possession(self) -> "PossessionState":
        """Start the following possession from this one's end state.

        Score, clock, shot clock, fatigue and fouls carry over; formations,
        assignments and spacing are left for the engine to rebuild.

        Returns
        -------
        PossessionState
            Fresh state with the possession number incremented.
        """
        return PossessionState(
            game_id=self.game_id,
            offense=self.offense,
            defense=self.defense,
            ball_handler=self.ball_handler,
            clock=self.clock,
            shot_clock=self.shot_clock,
            score=self.score,
            seed=self.seed,
            possession=self.possession + 1,
            home_team=self.home_team,
            fatigue=dict(self.fatigue),
            fouls=self.fouls,
        )


__all__ = ["GameClock", "PossessionState", "Score", "Spacing"]
