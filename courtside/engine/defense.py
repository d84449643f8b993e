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
"""Defensive assignment logic.

The coordinator turns a defensive scheme plus the current formations into an
ordered set of :class:`Assignment` records. Man-based schemes are solved with a
greedy nearest-neighbour matching; zones hand out fixed court regions; the
full-court press focuses on the ball. Assignments are rebuilt from scratch
whenever the formations change sides.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Literal, Optional, Tuple

from .config import ENGINE_CONFIG, EngineConfig
from .formation import DEFENSIVE_SCHEMES, ZONE_SCHEMES, Formation
from .spatial import Position

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.team import Team

AssignmentKind = Literal["man", "zone", "help"]


@dataclass(frozen=True)
class Assignment:
    """Single defensive responsibility.

    Parameters
    ----------
    defender : str
        Defending player id.
    target : str
        Offensive player id for ``man``/``help`` kinds, region name for ``zone``.
    kind : AssignmentKind
        Responsibility type.
    priority : int
        Relative urgency; higher values matter more.
    """

    defender: str
    target: str
    kind: AssignmentKind
    priority: int


@dataclass(frozen=True)
class DefensiveAssignments:
    """Ordered assignments for a scheme.

    Parameters
    ----------
    scheme : str
        Defensive scheme the assignments implement.
    assignments : Tuple[Assignment, ...]
        Responsibilities in creation order.
    """

    scheme: str
    assignments: Tuple[Assignment, ...] = ()

    def for_defender(self, defender_id: str) -> Optional[Assignment]:
        """Return the first assignment held by ``defender_id``.

        Parameters
        ----------
        defender_id : str
            Defender to look up.

        Returns
        -------
        Assignment | None
            Matching assignment, if any.
        """
        for assignment in self.assignments:
            if assignment.defender == defender_id:
                return assignment
        return None


@dataclass(frozen=True)
class ZoneRegion:
    """Axis-aligned court region covered by a zone defender.

    Parameters
    ----------
    name : str
        Responsibility name, for example ``"left_wing"``.
    min_x : float
        Lower x bound in court coordinates.
    max_x : float
        Upper x bound in court coordinates.
    min_y : float
        Lower y bound.
    max_y : float
        Upper y bound.
    """

    name: str
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def contains(self, position: Position) -> bool:
        """Return whether ``position`` lies inside the region.

        Parameters
        ----------
        position : Position
            Court location.

        Returns
        -------
        bool
            ``True`` when inside the bounds, edges included.
        """
        return self.min_x <= position.x <= self.max_x and self.min_y <= position.y <= self.max_y


@dataclass
class DefensiveCoordinator:
    """Derive defensive assignments from schemes and formations.

    Parameters
    ----------
    config : EngineConfig, optional
        Configuration supplying zone regions; defaults to ``ENGINE_CONFIG``.
    """

    config: EngineConfig = field(default_factory=lambda: ENGINE_CONFIG)

    def assign_defenders(
        self,
        offense: "Team",
        defense: "Team",
        scheme: str,
        offense_formation: Formation,
        defense_formation: Optional[Formation] = None,
    ) -> DefensiveAssignments:
        """Assign every defender a responsibility for the given scheme.

        Parameters
        ----------
        offense : Team
            Team with the ball.
        defense : Team
            Team defending.
        scheme : str
            Defensive scheme name.
        offense_formation : Formation
            Offensive formation.
        defense_formation : Formation | None, optional
            Defensive formation; defender positions are unknown without it.

        Returns
        -------
        DefensiveAssignments
            Assignments for the scheme.

        Raises
        ------
        ValueError
            If ``scheme`` is not a known defensive scheme.
        """
        formations = [offense_formation] + ([defense_formation] if defense_formation is not None else [])
        if scheme == "man":
            assignments = self._man_to_man(offense, defense, formations)
        elif scheme == "switch":
            assignments = [
                Assignment(a.defender, a.target, a.kind, a.priority - 1)
                for a in self._man_to_man(offense, defense, formations)
            ]
        elif scheme in ZONE_SCHEMES:
            regions = self.config.formation.zone_regions[scheme]
            assignments = [
                Assignment(player.player_id, region[0], "zone", 5) for player, region in zip(defense.lineup, regions)
            ]
        elif scheme == "fullCourt":
            assignments = self._full_court(defense, offense_formation, formations)
        else:
            raise ValueError(f"Unknown defensive scheme '{scheme}'. Known schemes: {', '.join(DEFENSIVE_SCHEMES)}")
        return DefensiveAssignments(scheme, tuple(assignments))

    def get_matchup(self, offensive_player_id: str, assignments: DefensiveAssignments) -> Optional[str]:
        """Return the man defender guarding ``offensive_player_id``.

        Parameters
        ----------
        offensive_player_id : str
            Offensive player to look up.
        assignments : DefensiveAssignments
            Current assignments.

        Returns
        -------
        str | None
            Defender id, or ``None`` when nobody is guarding the player man-to-man.
        """
        for assignment in assignments.assignments:
            if assignment.kind == "man" and assignment.target == offensive_player_id:
                return assignment.defender
        return None

    def get_nearest_defender(
        self,
        position: Position,
        defense: "Team",
        formation: Formation,
    ) -> Optional[Tuple[str, float]]:
        """Return the defender standing closest to ``position``.

        Parameters
        ----------
        position : Position
            Reference location.
        defense : Team
            Defending team.
        formation : Formation
            Formation holding defender positions.

        Returns
        -------
        Tuple[str, float] | None
            ``(defender id, distance)``, or ``None`` when no defender is placed.
        """
        nearest: Optional[Tuple[str, float]] = None
        for player in defense.lineup:
            spot = formation.position_of(player.player_id)
            if spot is None:
                continue
            gap = position.distance_to(spot)
            if nearest is None or gap < nearest[1]:
                nearest = (player.player_id, gap)
        return nearest

    def zone_region(self, name: str, scheme: Optional[str] = None, attacking_left: bool = True) -> ZoneRegion:
        """Return the configured court region for a zone responsibility.

        Parameters
        ----------
        name : str
            Responsibility name.
        scheme : str | None, optional
            Zone scheme to search; every zone scheme in order when omitted.
        attacking_left : bool, default=True
            Orientation used to map the region onto the court.

        Returns
        -------
        ZoneRegion
            Region in court coordinates.

        Raises
        ------
        ValueError
            If no zone scheme defines ``name``.
        """
        schemes = [scheme] if scheme is not None else list(ZONE_SCHEMES)
        for candidate in schemes:
            for region_name, min_x, max_x, min_y, max_y in self.config.formation.zone_regions.get(candidate, ()):
                if region_name != name:
                    continue
                if attacking_left:
                    return ZoneRegion(name, min_x, max_x, min_y, max_y)
                length = self.config.court.length
                return ZoneRegion(name, length - max_x, length - min_x, min_y, max_y)
        raise ValueError(f"Unknown zone region '{name}'")

    def _man_to_man(self, offense: "Team", defense: "Team", formations: List[Formation]) -> List[Assignment]:
        """Greedily pair defenders with their nearest unguarded offender.

        Parameters
        ----------
        offense : Team
            Team with the ball.
        defense : Team
            Team defending.
        formations : List[Formation]
            Formations searched in order for player positions.

        Returns
        -------
        List[Assignment]
            Man assignments ordered by matching distance.
        """
        pairs: List[Tuple[float, str, str]] = []
        for offender in offense.lineup:
            off_pos = _lookup(offender.player_id, formations)
            if off_pos is None:
                continue
            for defender in defense.lineup:
                def_pos = _lookup(defender.player_id, formations)
                if def_pos is None:
                    continue
                pairs.append((off_pos.distance_to(def_pos), offender.player_id, defender.player_id))

        pairs.sort(key=lambda pair: pair[0])
        guarded: Dict[str, str] = {}
        used_defenders = set()
        assignments: List[Assignment] = []
        for gap, offender_id, defender_id in pairs:
            if defender_id in used_defenders or offender_id in guarded:
                continue
            guarded[offender_id] = defender_id
            used_defenders.add(defender_id)
            assignments.append(Assignment(defender_id, offender_id, "man", max(1, 10 - math.floor(gap / 5))))
        return assignments

    def _full_court(
        self,
        defense: "Team",
        offense_formation: Formation,
        formations: List[Formation],
    ) -> List[Assignment]:
        """Put primary pressure and a trap on the presumed ball-handler.

        Parameters
        ----------
        defense : Team
            Team defending.
        offense_formation : Formation
            Offensive formation supplying the ball location.
        formations : List[Formation]
            Formations searched in order for defender positions.

        Returns
        -------
        List[Assignment]
            Up to two assignments; remaining defenders stay unassigned.
        """
        ball = offense_formation.ball_position
        handler: Optional[Tuple[str, Position]] = None
        for player_id, spot in offense_formation.positions.items():
            if handler is None or spot.distance_to(ball) < handler[1].distance_to(ball):
                handler = (player_id, spot)
        if handler is None:
            return []

        ranked: List[Tuple[float, str]] = []
        for defender in defense.lineup:
            spot = _lookup(defender.player_id, formations)
            if spot is not None:
                ranked.append((spot.distance_to(handler[1]), defender.player_id))
        ranked.sort(key=lambda item: item[0])

        assignments: List[Assignment] = []
        if ranked:
            assignments.append(Assignment(ranked[0][1], handler[0], "man", 10))
        if len(ranked) > 1:
            assignments.append(Assignment(ranked[1][1], handler[0], "help", 8))
        return assignments


def _lookup(player_id: str, formations: List[Formation]) -> Optional[Position]:
    """Find a player's position in the first formation that contains it.

    Parameters
    ----------
    player_id : str
        Player to look up.
    formations : List[Formation]
        Formations searched in order.

    Returns
    -------
    Position | None
        Position, or ``None`` when absent from every formation.
    """
    for formation in formations:
        spot = formation.position_of(player_id)
        if spot is not None:
            return spot
    return None


__all__ = [
    "Assignment",
    "AssignmentKind",
    "DefensiveAssignments",
    "DefensiveCoordinator",
    "ZoneRegion",
]
