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
"""Domain models representing basketball players, their ratings and tendencies."""
from dataclasses import dataclass, field, fields
from typing import Tuple

from courtside.engine.config import ENGINE_CONFIG
from courtside.engine.policy import ACTIONS

OFF_BALL_ACTIONS = ("spot", "relocate", "cut", "screen", "handoff")
SHOT_ZONE_PREFERENCES = ("rim", "mid", "three")
THREE_STYLES = ("catch", "offDribble")


@dataclass(frozen=True)
class Ratings:
    """Skill, physical and mental ratings on the 0-99 scale plus body measurements.

    Parameters
    ----------
    three : int
        Three-point shooting.
    mid : int
        Mid-range shooting.
    finishing : int
        Finishing at the rim.
    ft : int
        Free-throw shooting.
    pass_ : int
        Passing accuracy and vision.
    handle : int
        Ball security and dribble moves.
    post : int
        Back-to-the-basket scoring.
    roll : int
        Rolling to the rim after screens.
    screen : int
        Screen setting.
    on_ball_def : int
        On-ball perimeter defence.
    lateral : int
        Lateral quickness.
    rim_prot : int
        Rim protection.
    steal : int
        Hands and anticipation in passing lanes.
    speed : int
        Straight-line speed.
    strength : int
        Physical strength.
    vertical : int
        Leaping ability.
    rebound : int
        Rebounding instinct and timing.
    iq : int
        Basketball IQ.
    discipline : int
        Defensive discipline; high values foul less.
    consistency : int
        Game-to-game and shot-to-shot consistency.
    clutch : int
        Performance under late-game pressure.
    stamina : int
        Resistance to fatigue.
    height_in : int
        Height in inches.
    wingspan_in : int
        Wingspan in inches.
    """

    # Shooting
    three: int
    mid: int
    finishing: int
    ft: int

    # Playmaking
    pass_: int
    handle: int
    post: int
    roll: int
    screen: int

    # Defence
    on_ball_def: int
    lateral: int
    rim_prot: int
    steal: int

    # Physical
    speed: int
    strength: int
    vertical: int
    rebound: int

    # Mental
    iq: int
    discipline: int
    consistency: int
    clutch: int
    stamina: int

    height_in: int = 78
    wingspan_in: int = 80

    def __post_init__(self) -> None:
        """Validate that skills and measurements fall within their legal ranges."""
        cfg = ENGINE_CONFIG.rating
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name in ("height_in", "wingspan_in"):
                if not cfg.min_height_in <= value <= cfg.max_height_in:
                    raise ValueError(
                        f"{item.name} must be between {cfg.min_height_in} and {cfg.max_height_in} inches"
                    )
            elif not cfg.min_rating <= value <= cfg.max_rating:
                raise ValueError(f"{item.name} must be between {cfg.min_rating} and {cfg.max_rating}")


@dataclass(frozen=True)
class Tendencies:
    """Behavioural weights that bias decision making.

    Parameters
    ----------
    with_ball : Tuple[float, ...]
        Seven weights in :data:`ACTIONS` order.
    off_ball : Tuple[float, ...]
        Five weights for spot, relocate, cut, screen and handoff.
    shot_zone : Tuple[float, ...]
        Three weights for rim, mid and three.
    three_style : Tuple[float, ...]
        Two weights for catch-and-shoot and off-the-dribble threes.
    pass_risk : float
        Willingness to attempt risky passes, 0-100.
    help : float
        Eagerness to leave a man to help, 0-100.
    gamble_steal : float
        Frequency of gambling for steals, 0-100.
    crash_oreb : float
        Frequency of crashing the offensive glass, 0-100.
    """

    with_ball: Tuple[float, ...] = (0.2, 0.15, 0.2, 0.15, 0.1, 0.1, 0.1)
    off_ball: Tuple[float, ...] = (0.3, 0.2, 0.2, 0.2, 0.1)
    shot_zone: Tuple[float, ...] = (0.35, 0.3, 0.35)
    three_style: Tuple[float, ...] = (0.6, 0.4)
    pass_risk: float = 50.0
    help: float = 50.0
    gamble_steal: float = 50.0
    crash_oreb: float = 50.0

    def __post_init__(self) -> None:
        """Validate vector lengths, non-negative weights and scalar ranges."""
        expected = {
            "with_ball": len(ACTIONS),
            "off_ball": len(OFF_BALL_ACTIONS),
            "shot_zone": len(SHOT_ZONE_PREFERENCES),
            "three_style": len(THREE_STYLES),
        }
        for name, size in expected.items():
            weights = getattr(self, name)
            if len(weights) != size:
                raise ValueError(f"{name} must contain {size} weights, got {len(weights)}")
            if any(weight < 0 for weight in weights):
                raise ValueError(f"{name} weights must be non-negative")
        for name in ("pass_risk", "help", "gamble_steal", "crash_oreb"):
            if not 0 <= getattr(self, name) <= 100:
                raise ValueError(f"{name} must be between 0 and 100")


@dataclass
class Player:
    """Roster entry combining identity, ratings and tendencies.

    Parameters
    ----------
    player_id : str
        Unique identifier for the player.
    name : str
        Human-readable player name.
    ratings : Ratings
        Immutable skill ratings.
    tendencies : Tendencies, optional
        Decision-making weights; league-average defaults when omitted.
    position : str, default="SF"
        Listed position, one of ``"PG"``, ``"SG"``, ``"SF"``, ``"PF"`` or ``"C"``.
    age : int, default=25
        Player age in years.
    """

    player_id: str
    name: str
    ratings: Ratings
    tendencies: Tendencies = field(default_factory=Tendencies)
    position: str = "SF"  # PG, SG, SF, PF, C
    age: int = 25

    def tendency_bias(self) -> Tuple[float, ...]:
        """Return the centred with-ball tendency bias used by the policy.

        Returns
        -------
        Tuple[float, ...]
            ``(weight - center) * scale`` per action in :data:`ACTIONS` order.
        """
        cfg = ENGINE_CONFIG.policy
        return tuple((weight - cfg.tendency_center) * cfg.tendency_scale for weight in self.tendencies.with_ball)
