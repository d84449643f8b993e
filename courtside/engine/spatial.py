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
"""Court geometry primitives shared by the possession engine.

Every function in this module is pure: it reads the court description from
configuration and never touches possession state. Coordinates are feet on a
94 x 50 court with the origin at the left baseline/sideline corner. Functions
that depend on which basket is being attacked take an ``attacking_left`` flag;
``True`` means the offence shoots at the basket near ``x = 0``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from .config import ENGINE_CONFIG, CourtConfig

ShotZone = Literal["rim", "close", "mid", "three"]

SHOT_ZONES: tuple[ShotZone, ...] = ("rim", "close", "mid", "three")


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable point on the court.

    Parameters
    ----------
    x : float
        Distance from the left baseline in feet.
    y : float
        Distance from the bottom sideline in feet.
    """

    x: float
    y: float

    def __add__(self, other: "Position") -> "Position":
        """Return the component-wise sum of two positions."""
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Position") -> "Position":
        """Return the component-wise difference ``self - other``."""
        return Position(self.x - other.x, self.y - other.y)

    def distance_to(self, other: "Position") -> float:
        """Return the straight-line distance to ``other``.

        Parameters
        ----------
        other : Position
            Point whose separation from ``self`` should be measured.

        Returns
        -------
        float
            Euclidean distance in feet.
        """
        return math.hypot(other.x - self.x, other.y - self.y)

    def move_towards(self, target: "Position", step: float) -> "Position":
        """Return a point up to ``step`` feet closer to ``target``.

        Parameters
        ----------
        target : Position
            Destination point.
        step : float
            Maximum distance to travel.

        Returns
        -------
        Position
            ``target`` itself when it is within ``step``; otherwise the point
            ``step`` feet along the segment toward it.
        """
        gap = self.distance_to(target)
        if gap <= step or gap == 0:
            return target
        ratio = step / gap
        return Position(self.x + (target.x - self.x) * ratio, self.y + (target.y - self.y) * ratio)


class Court:
    """Regulation court with basket metadata and boundary helpers.

    Parameters
    ----------
    config : CourtConfig | None, optional
        Geometry override; defaults to ``ENGINE_CONFIG.court``.
    """

    def __init__(self, config: Optional[CourtConfig] = None) -> None:
        """Initialise the court from configuration.

        Parameters
        ----------
        config : CourtConfig | None, optional
            Geometry override; defaults to ``ENGINE_CONFIG.court``.
        """
        cfg = config or ENGINE_CONFIG.court
        self.length = cfg.length
        self.width = cfg.width
        self.home_basket = Position(*cfg.home_basket)
        self.away_basket = Position(*cfg.away_basket)

    def basket(self, attacking_left: bool) -> Position:
        """Return the basket being attacked.

        Parameters
        ----------
        attacking_left : bool
            Whether the offence attacks the left basket.

        Returns
        -------
        Position
            Centre of the attacked basket.
        """
        return self.home_basket if attacking_left else self.away_basket

    def is_in_bounds(self, position: Position) -> bool:
        """Check whether ``position`` lies on the playing surface.

        Parameters
        ----------
        position : Position
            Location to test.

        Returns
        -------
        bool
            ``True`` when the position is inside the court lines.
        """
        return 0.0 <= position.x <= self.length and 0.0 <= position.y <= self.width

    def constrain_to_bounds(self, position: Position) -> Position:
        """Clamp ``position`` onto the playing surface.

        Parameters
        ----------
        position : Position
            Location to clamp.

        Returns
        -------
        Position
            Closest in-bounds point.
        """
        return Position(
            max(0.0, min(self.length, position.x)),
            max(0.0, min(self.width, position.y)),
        )

    def mirror(self, position: Position) -> Position:
        """Reflect ``position`` across half court.

        Parameters
        ----------
        position : Position
            Location to reflect.

        Returns
        -------
        Position
            Point with ``x`` replaced by ``length - x``.
        """
        return Position(self.length - position.x, position.y)

    def orient(self, position: Position, attacking_left: bool) -> Position:
        """Convert between the attack-left frame and real court coordinates.

        The transform is its own inverse, so the same call maps layouts onto
        the court and maps court points back into the attack-left frame.

        Parameters
        ----------
        position : Position
            Location to convert.
        attacking_left : bool
            Whether the offence attacks the left basket.

        Returns
        -------
        Position
            ``position`` unchanged when attacking left, otherwise its mirror.
        """
        return position if attacking_left else self.mirror(position)


COURT = Court()


def distance(a: Position, b: Position) -> float:
    """Return the Euclidean distance between two court points.

    Parameters
    ----------
    a : Position
        First point.
    b : Position
        Second point.

    Returns
    -------
    float
        Distance in feet.
    """
    return a.distance_to(b)


def distance_to_basket(position: Position, attacking_left: bool) -> float:
    """Return the distance from ``position`` to the attacked basket.

    Parameters
    ----------
    position : Position
        Player or ball location.
    attacking_left : bool
        Whether the offence attacks the left basket.

    Returns
    -------
    float
        Distance in feet.
    """
    return position.distance_to(COURT.basket(attacking_left))


def is_inside_three_point(position: Position, attacking_left: bool) -> bool:
    """Return whether ``position`` is inside the three-point line.

    Parameters
    ----------
    position : Position
        Shot location.
    attacking_left : bool
        Whether the offence attacks the left basket.

    Returns
    -------
    bool
        ``True`` for two-point locations.
    """
    cfg = ENGINE_CONFIG.court
    local = COURT.orient(position, attacking_left)
    lateral = abs(local.y - cfg.home_basket[1])
    if local.x <= cfg.corner_three_depth and lateral >= cfg.corner_three_distance:
        return False
    if local.x <= cfg.corner_three_depth:
        return True
    return distance_to_basket(position, attacking_left) < cfg.three_point_radius


def is_in_paint(position: Position, attacking_left: bool) -> bool:
    """Return whether ``position`` is inside the painted lane.

    Parameters
    ----------
    position : Position
        Location to test.
    attacking_left : bool
        Whether the offence attacks the left basket.

    Returns
    -------
    bool
        ``True`` inside the lane.
    """
    cfg = ENGINE_CONFIG.court
    local = COURT.orient(position, attacking_left)
    return local.x <= cfg.paint_depth and abs(local.y - cfg.width / 2) <= cfg.paint_width / 2


def get_shot_zone(position: Position, attacking_left: bool) -> ShotZone:
    """Classify a shot location.

    Parameters
    ----------
    position : Position
        Shot location.
    attacking_left : bool
        Whether the offence attacks the left basket.

    Returns
    -------
    ShotZone
        ``"three"`` beyond the arc, otherwise ``"rim"``, ``"close"`` or ``"mid"``
        by distance to the basket.
    """
    cfg = ENGINE_CONFIG.court
    if not is_inside_three_point(position, attacking_left):
        return "three"
    dist = distance_to_basket(position, attacking_left)
    if dist <= cfg.rim_distance:
        return "rim"
    if dist <= cfg.close_distance:
        return "close"
    return "mid"


def calculate_spacing(positions: Sequence[Position]) -> float:
    """Score how well a group of players is spread out.

    Parameters
    ----------
    positions : Sequence[Position]
        Player locations.

    Returns
    -------
    float
        Mean pairwise distance divided by the ideal separation, capped at 1.
        Fewer than two players are treated as perfectly spaced.
    """
    if len(positions) < 2:
        return 1.0
    total = 0.0
    pairs = 0
    for i in range(len(positions)):
        for j in range(i + 1, len(positions)):
            total += positions[i].distance_to(positions[j])
            pairs += 1
    return min(1.0, (total / pairs) / ENGINE_CONFIG.spacing.ideal_player_distance)


def calculate_shot_quality(
    position: Position,
    defender_position: Optional[Position],
    attacking_left: bool,
) -> float:
    """Estimate shot quality from zone and defender proximity.

    Parameters
    ----------
    position : Position
        Shooter location.
    defender_position : Position | None
        Closest defender location; ``None`` treats the shot as open.
    attacking_left : bool
        Whether the offence attacks the left basket.

    Returns
    -------
    float
        Quality in ``[0, 1]``.
    """
    cfg = ENGINE_CONFIG.shot_quality
    quality = cfg.base_quality[get_shot_zone(position, attacking_left)]
    if defender_position is not None:
        gap = position.distance_to(defender_position)
        contest = max(0.0, min(1.0, 1.0 - gap / cfg.no_contest_distance))
        quality -= cfg.max_contest_penalty * contest
    return max(0.0, min(1.0, quality))


def _lane_blocked(origin: Position, target: Position, defenders: Sequence[Position]) -> bool:
    """Return whether any defender sits inside the lane from ``origin`` to ``target``.

    Parameters
    ----------
    origin : Position
        Start of the lane, normally the ball.
    target : Position
        End of the lane.
    defenders : Sequence[Position]
        Defender locations.

    Returns
    -------
    bool
        ``True`` when a defender closer than the target lies within half the
        configured lane width of the lane direction.
    """
    half_width = ENGINE_CONFIG.spacing.driving_lane_width / 2
    lane_length = origin.distance_to(target)
    lane_angle = math.atan2(target.y - origin.y, target.x - origin.x)
    for defender in defenders:
        gap = origin.distance_to(defender)
        if gap == 0 or gap >= lane_length:
            continue
        angle = math.atan2(defender.y - origin.y, defender.x - origin.x)
        offset = abs((angle - lane_angle + math.pi) % (2 * math.pi) - math.pi)
        if offset <= half_width:
            return True
    return False


def calculate_open_lanes(
    ball: Position,
    offense_positions: Sequence[Position],
    defense_positions: Sequence[Position],
    attacking_left: bool,
) -> float:
    """Return the fraction of unobstructed lanes from the ball.

    Lanes run from the ball to the attacked basket and to every teammate not
    standing on the ball.

    Parameters
    ----------
    ball : Position
        Ball location.
    offense_positions : Sequence[Position]
        Offensive player locations.
    defense_positions : Sequence[Position]
        Defensive player locations.
    attacking_left : bool
        Whether the offence attacks the left basket.

    Returns
    -------
    float
        Open fraction in ``[0, 1]``; ``1.0`` when there are no lanes to check.
    """
    targets = [COURT.basket(attacking_left)]
    targets.extend(pos for pos in offense_positions if pos.distance_to(ball) > 1e-6)
    open_count = sum(1 for target in targets if not _lane_blocked(ball, target, defense_positions))
    return open_count / len(targets)


def drive_angle(handler: Position, defender: Optional[Position], attacking_left: bool) -> float:
    """Return the bearing from the ball-handler to the defender.

    The bearing is measured in the attack-left frame so that both ends of the
    court produce the same value for the same relative alignment.

    Parameters
    ----------
    handler : Position
        Ball-handler location.
    defender : Position | None
        Primary defender location.
    attacking_left : bool
        Whether the offence attacks the left basket.

    Returns
    -------
    float
        Angle in radians in ``[-pi, pi]``; ``0.0`` without a defender.
    """
    if defender is None:
        return 0.0
    local_handler = COURT.orient(handler, attacking_left)
    local_defender = COURT.orient(defender, attacking_left)
    return math.atan2(local_defender.y - local_handler.y, local_defender.x - local_handler.x)


__all__ = [
    "COURT",
    "Court",
    "Position",
    "SHOT_ZONES",
    "ShotZone",
    "calculate_open_lanes",
    "calculate_shot_quality",
    "calculate_spacing",
    "distance",
    "distance_to_basket",
    "drive_angle",
    "get_shot_zone",
    "is_in_paint",
    "is_inside_three_point",
]
