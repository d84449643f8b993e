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
"""Entry point for a demo game and the optional court visualiser."""
import argparse
from pathlib import Path
from typing import List, Optional, Tuple

from courtside.engine.game import GameSimulator
from courtside.models.team import Team
from courtside.utils.debug import MatchDebugger
from courtside.utils.generator import generate_team  # Fallback if no roster file
from courtside.utils.roster import load_teams_from_json  # For loading saved rosters


def load_or_generate_teams(roster_file: Path, seed: int) -> Tuple[Team, Team]:
    """Load teams from a roster file, falling back to generated teams.

    Parameters
    ----------
    roster_file : Path
        JSON roster to try first.
    seed : int
        Seed for generated teams.

    Returns
    -------
    Tuple[Team, Team]
        ``(home, away)`` teams.
    """
    if roster_file.exists():
        try:
            return load_teams_from_json(str(roster_file))
        except (KeyError, ValueError) as e:
            print(f"Error loading teams from {roster_file}: {e}")
            print("Falling back to generated teams...")
    else:
        print(f"No roster file found at {roster_file}")
        print("Using generated teams...")
    home = generate_team("HOM", "Portland Pilots", seed=seed)
    away = generate_team("AWY", "Memphis Miners", seed=seed + 1, defensive_scheme="zone2-3")
    return home, away


def main(argv: Optional[List[str]] = None) -> None:
    """Simulate a game and print the final score and a short box score.

    Parameters
    ----------
    argv : Optional[List[str]]
        Command-line arguments; ``sys.argv`` when omitted.
    """
    parser = argparse.ArgumentParser(description="Simulate a basketball game possession by possession.")
    parser.add_argument("--roster", default="data/players.json", help="Roster JSON with home and away teams")
    parser.add_argument("--seed", type=int, default=2024, help="Game seed")
    parser.add_argument("--visual", action="store_true", help="Step through the game in the pygame viewer")
    parser.add_argument("--debug-dir", default="debug_logs", help="Directory for debug session logs")
    args = parser.parse_args(argv)

    home_team, away_team = load_or_generate_teams(Path(args.roster), args.seed)
    debugger = MatchDebugger(args.debug_dir)
    simulator = GameSimulator(home_team, away_team, seed=args.seed, debugger=debugger)

    try:
        if args.visual:
            from courtside.visualizer.visualizer import start_visualizer

            start_visualizer(simulator)
        result = simulator.simulate()
    except KeyboardInterrupt:
        print("\nGame simulation interrupted.")
        result = simulator.result()
    finally:
        debugger.close()

    print(f"\nFinal Score: {home_team.name} {result.home_score} - {result.away_score} {away_team.name}")
    print(f"Possessions: {result.possessions}")
    print()
    print(result.box_score.summary())


if __name__ == "__main__":
    main()
