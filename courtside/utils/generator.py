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
"""Utilities that synthesise players and teams for quick simulations."""
import random
from dataclasses import fields
from typing import Dict, List, Optional, Tuple

from courtside.engine.config import ENGINE_CONFIG
from courtside.engine.policy import dirichlet_mean
from courtside.models.player import Player, Ratings, Tendencies
from courtside.models.team import Team

POSITION_IMPORTANT_RATINGS = {
    "PG": ["pass_", "handle", "three", "speed", "iq", "on_ball_def"],
    "SG": ["three", "mid", "handle", "speed", "lateral", "ft"],
    "SF": ["three", "finishing", "on_ball_def", "lateral", "mid"],
    "PF": ["finishing", "rebound", "strength", "post", "screen", "roll"],
    "C": ["rim_prot", "rebound", "strength", "post", "finishing", "vertical"],
}

# Base height and variance in inches.
POSITION_HEIGHTS: Dict[str, Tuple[int, int]] = {
    "PG": (74, 3),
    "SG": (77, 3),
    "SF": (80, 3),
    "PF": (82, 3),
    "C": (85, 4),
}

ROSTER_POSITIONS = ("PG", "SG", "SF", "PF", "C", "PG", "SG", "SF", "PF", "C")


def generate_random_player(
    player_id: str,
    name: Optional[str] = None,
    position: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Player:
    """Generate a player with random ratings weighted by position.

    Parameters
    ----------
    player_id : str
        Unique identifier assigned to the created player.
    name : Optional[str]
        Human-readable name to apply; a pseudo-random name is chosen when omitted.
    position : Optional[str]
        Listed position influencing rating weighting; random when ``None``.
    rng : Optional[random.Random]
        Random stream; an unseeded generator is used when omitted.

    Returns
    -------
    Player
        A newly constructed player with stochastic ratings and tendencies.
    """
    rng = rng or random.Random()
    if name is None:
        first_names = ["Marcus", "Jalen", "Devin", "Andre", "Luka", "Tyrese", "Nikola", "Jordan"]
        last_names = ["Williams", "Johnson", "Brown", "Green", "Davis", "Walker", "Harris"]
        name = f"{rng.choice(first_names)} {rng.choice(last_names)}"

    if position is None:
        position = rng.choice(list(POSITION_IMPORTANT_RATINGS))

    base_range = (35, 70)
    boost_range = (60, 92)
    important = POSITION_IMPORTANT_RATINGS.get(position, ["iq", "stamina"])

    values: Dict[str, int] = {}
    for item in fields(Ratings):
        if item.name in ("height_in", "wingspan_in"):
            continue
        low, high = boost_range if item.name in important else base_range
        values[item.name] = rng.randint(low, high)

    cfg = ENGINE_CONFIG.rating
    base_height, variance = POSITION_HEIGHTS.get(position, (78, 4))
    height = round(base_height + (rng.random() * 2 - 1) * variance)
    wingspan = height + round((rng.random() * 2 - 1) * 3)
    values["height_in"] = max(cfg.min_height_in, min(cfg.max_height_in, height))
    values["wingspan_in"] = max(cfg.min_height_in, min(cfg.max_height_in, wingspan))

    return Player(
        player_id=player_id,
        name=name,
        ratings=Ratings(**values),
        tendencies=_generate_tendencies(position, rng),
        position=position,
        age=rng.randint(19, 36),
    )


def _generate_tendencies(position: str, rng: random.Random) -> Tendencies:
    """Draw position-shaped tendencies and normalise each weight vector.

    Parameters
    ----------
    position : str
        Listed position of the player.
    rng : random.Random
        Random stream.

    Returns
    -------
    Tendencies
        Tendencies whose weight vectors each sum to one.
    """
    guard = position in ("PG", "SG")
    big = position in ("PF", "C")
    forward = position in ("SF", "PF")

    with_ball = [
        rng.random() * (0.25 if guard else 0.1 if big else 0.2),  # drive
        rng.random() * (0.2 if guard else 0.15),  # pullup
        rng.random() * (0.3 if guard else 0.25 if forward else 0.1),  # catchShoot
        rng.random() * (0.15 if guard else 0.1),  # pnrAttack
        rng.random() * (0.2 if guard else 0.05),  # pnrPass
        rng.random() * (0.3 if big else 0.05),  # post
        0.1,  # reset
    ]
    off_ball = [
        0.4 + rng.random() * 0.3,
        0.15 + rng.random() * 0.2,
        0.2 + rng.random() * 0.2,
        0.15 + rng.random() * 0.1 if big else 0.05,
        0.1 + rng.random() * 0.1,
    ]
    shot_zone = [
        0.4 + rng.random() * 0.2 if big else 0.15 + rng.random() * 0.1,
        0.25 + rng.random() * 0.15,
        0.35 + rng.random() * 0.2 if guard else 0.05 + rng.random() * 0.1 if big else 0.25,
    ]
    three_style = [0.7 + rng.random() * 0.2, 0.3 + rng.random() * 0.2]

    return Tendencies(
        with_ball=tuple(dirichlet_mean(with_ball)),
        off_ball=tuple(dirichlet_mean(off_ball)),
        shot_zone=tuple(dirichlet_mean(shot_zone)),
        three_style=tuple(dirichlet_mean(three_style)),
        pass_risk=float(round(30 + rng.random() * 40)),
        help=float(round(40 + rng.random() * 20)),
        gamble_steal=float(round(20 + rng.random() * 40)),
        crash_oreb=float(round((60 if big else 30) + rng.random() * 20)),
    )


def generate_team(
    team_id: str,
    name: Optional[str] = None,
    seed: Optional[int] = None,
    set_play: str = "1-out-4",
    defensive_scheme: str = "man",
) -> Team:
    """Generate a ten-player team: a starting five and a bench, one of each position apiece.

    Parameters
    ----------
    team_id : str
        Unique identifier assigned to the generated team.
    name : Optional[str]
        Team name to apply; synthesised when ``None``.
    seed : Optional[int]
        Seed for reproducible rosters; unseeded when ``None``.
    set_play : str
        Offensive set play for the team.
    defensive_scheme : str
        Defensive scheme for the team.

    Returns
    -------
    Team
        Team whose first five players form the starting lineup.
    """
    rng = random.Random(seed)
    if name is None:
        cities = ["Portland", "Denver", "Memphis", "Boston", "Phoenix"]
        nicknames = ["Comets", "Pilots", "Miners", "Rivermen", "Suns"]
        name = f"{rng.choice(cities)} {rng.choice(nicknames)}"

    players: List[Player] = []
    for index, position in enumerate(ROSTER_POSITIONS, start=1):
        players.append(generate_random_player(f"{team_id}-{index}", position=position, rng=rng))

    return Team(
        team_id=team_id,
        name=name,
        players=players,
        set_play=set_play,
        defensive_scheme=defensive_scheme,
    )
