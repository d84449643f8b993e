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
"""Full-game driver that chains possessions until regulation expires."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from courtside.models.box_score import BoxScore

from .config import ENGINE_CONFIG, EngineConfig
from .events import PlayRecord
from .officiating import FoulTracker
from .possession import PossessionEngine
from .state import GameClock, PossessionState

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.team import Team
    from courtside.utils.debug import MatchDebugger


@dataclass
class GameResult:
    """Final outcome of a simulated game.

    Parameters
    ----------
    game_id : str
        Identifier of the game.
    home_team : str
        Home team id.
    away_team : str
        Away team id.
    home_score : int
        Home points.
    away_score : int
        Away points.
    possessions : int
        Possessions played.
    plays : List[PlayRecord]
        Full play-by-play.
    box_score : BoxScore
        Finalised box score.
    """

    game_id: str
    home_team: str
    away_team: str
    home_score: int
    away_score: int
    possessions: int
    plays: List[PlayRecord]
    box_score: BoxScore

    @property
    def winner(self) -> Optional[str]:
        """Return the winning team id, or ``None`` for a tie."""
        if self.home_score == self.away_score:
            return None
        return self.home_team if self.home_score > self.away_score else self.away_team


class GameSimulator:
    """Run a game one possession at a time.

    Parameters
    ----------
    home : Team
        Home team; it has the opening possession and attacks the left basket.
    away : Team
        Away team.
    seed : int, default=0
        Game seed shared by every possession.
    game_id : str, default="game-1"
        Identifier of the game.
    config : EngineConfig | None, optional
        Configuration override.
    debugger : MatchDebugger | None, optional
        Telemetry sink shared with the engine and the foul tracker.
    """

    def __init__(
        self,
        home: "Team",
        away: "Team",
        seed: int = 0,
        game_id: str = "game-1",
        config: Optional[EngineConfig] = None,
        debugger: Optional["MatchDebugger"] = None,
    ) -> None:
        """Prepare the opening possession.

        Parameters
        ----------
        home : Team
            Home team.
        away : Team
            Away team.
        seed : int
            Game seed.
        game_id : str
            Identifier of the game.
        config : EngineConfig | None
            Configuration override.
        debugger : MatchDebugger | None
            Telemetry sink.
        """
        self.config = config or ENGINE_CONFIG
        self.home = home
        self.away = away
        self.game_id = game_id
        self.debugger = debugger
        self.engine = PossessionEngine(self.config, debugger)
        self.box_score = BoxScore(game_id, home, away)
        self.plays: List[PlayRecord] = []
        self.finished = False
        self._teams: Dict[str, "Team"] = {home.team_id: home, away.team_id: away}
        self.state = PossessionState(
            game_id=game_id,
            offense=home.team_id,
            defense=away.team_id,
            ball_handler=home.players[0].player_id,
            clock=GameClock(1, self.config.clock.game_length, self.config),
            shot_clock=self.config.clock.shot_clock,
            seed=seed,
            home_team=home.team_id,
            fouls=FoulTracker(debugger=debugger),
        )

    def score(self) -> Tuple[int, int]:
        """Return the current score.

        Returns
        -------
        Tuple[int, int]
            ``(home, away)`` points.
        """
        if self.state.offense == self.home.team_id:
            return self.state.score.offense, self.state.score.defense
        return self.state.score.defense, self.state.score.offense

    def step(self) -> List[PlayRecord]:
        """Play the next possession.

        Returns
        -------
        List[PlayRecord]
            Plays of the possession; empty once the game is over.
        """
        if self.finished:
            return []

        offense = self._teams[self.state.offense]
        defense = self._teams[self.state.defense]
        quarter = self.state.clock.quarter
        start_clock = self.state.clock.seconds

        state, plays = self.engine.run(offense, defense, self.state, defense.defensive_scheme, self.box_score)
        self.plays.extend(plays)
        self.box_score.update_minutes(
            [p.player_id for p in self.home.lineup],
            [p.player_id for p in self.away.lineup],
            (start_clock - state.clock.seconds) / 60,
        )

        if state.clock.quarter != quarter:
            state.recover_fatigue(self.config.fatigue.recover_per_break)
            if self.debugger is not None:
                self.debugger.log_game_event(
                    state.clock.seconds, "QUARTER_BREAK", f"End of quarter {quarter} | Score: {self.score()}"
                )

        if state.clock.seconds <= 0:
            self.state = state
            self.finished = True
            if self.debugger is not None:
                home_score, away_score = self.score()
                self.debugger.log_game_event(0.0, "FINAL", f"{self.home.name} {home_score} - {away_score} {self.away.name}")
        else:
            self.state = state.next_possession()
        return plays

    def simulate(self) -> GameResult:
        """Play the remaining possessions and return the result.

        Returns
        -------
        GameResult
            Final score, play-by-play and finalised box score.
        """
        while not self.finished:
            self.step()
        return self.result()

    def result(self) -> GameResult:
        """Finalise the box score and summarise the game so far.

        Returns
        -------
        GameResult
            Result built from the current state.
        """
        home_score, away_score = self.score()
        elapsed_minutes = (self.config.clock.game_length - self.state.clock.seconds) / 60
        self.box_score.finalize(elapsed_minutes, self.state.fouls, (home_score, away_score))
        return GameResult(
            game_id=self.game_id,
            home_team=self.home.team_id,
            away_team=self.away.team_id,
            home_score=home_score,
            away_score=away_score,
            possessions=self.state.possession,
            plays=list(self.plays),
            box_score=self.box_score,
        )


__all__ = ["GameResult", "GameSimulator"]
