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
"""Structured logging utilities used to trace possession simulations."""
import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple


class MatchDebugger:
    """Helper object that streams structured game telemetry to disk.

    Parameters
    ----------
    output_dir : str, default="debug_logs"
        Directory where session logs are created; created automatically when missing.
    """

    def __init__(self, output_dir: str = "debug_logs") -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str
            Filesystem directory where log files are created.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file: Optional[TextIO] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        self.start_new_session()

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.log_file:
            self.log_file.close()

        filename = f"game_debug_{self.session_start}.txt"
        self.log_file = open(self.output_dir / filename, "w", encoding="utf-8")
        self.log_file.write(f"=== Game Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_possession_state(
        self,
        possession: int,
        game_clock: float,
        shot_clock: float,
        offense: str,
        ball_handler: str,
        score: tuple[int, int],
    ) -> None:
        """Log the state of the possession at the top of a loop iteration.

        Parameters
        ----------
        possession : int
            Possession number within the game.
        game_clock : float
            Game seconds remaining.
        shot_clock : float
            Shot-clock seconds remaining.
        offense : str
            Team id with the ball.
        ball_handler : str
            Current ball-handler id.
        score : tuple[int, int]
            Score as ``(offense, defense)``.
        """
        self._write_log(
            "POSSESSION_STATE",
            f"Poss {possession} | Clock: {game_clock:.1f}s | Shot: {shot_clock:.1f}s | "
            f"Offense: {offense} | Handler: {ball_handler} | Score: {score[0]}-{score[1]}",
        )

    def log_player_state(
        self,
        game_clock: float,
        player_id: str,
        team_name: str,
        position: tuple[float, float] | None,
        has_ball: bool,
        fatigue: float = 0.0,
        action: str | None = None,
    ) -> None:
        """Log the current state of a player.

        Parameters
        ----------
        game_clock : float
            Game seconds remaining.
        player_id : str
            Identifier of the tracked player.
        team_name : str
            Label for the player's team.
        position : tuple[float, float] | None
            Court coordinates in feet, when placed.
        has_ball : bool
            Whether the player currently holds the ball.
        fatigue : float
            Fatigue accumulator on a 0-100 scale.
        action : str | None
            Action the player just took, if any.
        """
        pos_str = f"({position[0]:.1f}, {position[1]:.1f})" if position is not None else "unplaced"
        action_str = f" | Action: {action}" if action else ""
        self._write_log(
            "PLAYER_STATE",
            f"Clock: {game_clock:.1f}s | Player {player_id} ({team_name}) | Pos: {pos_str} | "
            f"Has Ball: {has_ball} | Fatigue: {fatigue:.1f}{action_str}",
        )

    def log_game_event(self, game_clock: float, event_type: str, description: str) -> None:
        """Log a game event (shot, foul, turnover, etc.).

        Parameters
        ----------
        game_clock : float
            Game seconds remaining.
        event_type : str
            Short label identifying the event category.
        description : str
            Human-readable summary of the event.
        """
        self._write_log("GAME_EVENT", f"Clock: {game_clock:.1f}s | Event: {event_type} | Details: {description}")

    def log_rebound(
        self,
        winner: str,
        offense_won: bool,
        contested: bool,
        tip_out: bool,
        trajectory: str | None,
    ) -> None:
        """Log the result of a rebound contest.

        Parameters
        ----------
        winner : str
            Player who secured the ball.
        offense_won : bool
            Whether the offence kept the ball.
        contested : bool
            Whether several players were near the landing spot.
        tip_out : bool
            Whether the ball was tipped out.
        trajectory : str | None
            Carom type, or ``None`` on the positionless path.
        """
        side = "OFF" if offense_won else "DEF"
        self._write_log(
            "REBOUND",
            f"Winner: {winner} ({side}) | Contested: {contested} | Tip-out: {tip_out} | "
            f"Trajectory: {trajectory or 'fallback'}",
        )

    def log_error(self, error_type: str, description: str) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the file.

        Parameters
        ----------
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest debug entries with line numbers for live displays.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
