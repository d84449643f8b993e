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
"""Court formations for both sides of a possession.

A :class:`Formation` is an immutable snapshot mapping player ids to court
positions together with the ball location. The :class:`FormationManager`
builds them from named set plays and defensive schemes. Layouts are authored in
the attack-left frame and mirrored onto the court when the offence attacks the
right-hand basket. Formations are never edited in place: every update returns
a new snapshot with a bumped ``version``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, List, Literal, Mapping, Optional, Tuple

from .config import ENGINE_CONFIG, EngineConfig
from .spatial import COURT, Position, calculate_spacing

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.team import Team

DefensiveScheme = Literal["man", "switch", "zone2-3", "zone3-2", "zone1-3-1", "fullCourt"]

DEFENSIVE_SCHEMES: Tuple[DefensiveScheme, ...] = ("man", "switch", "zone2-3", "zone3-2", "zone1-3-1", "fullCourt")

ZONE_SCHEMES: Tuple[DefensiveScheme, ...] = ("zone2-3", "zone3-2", "zone1-3-1")


@dataclass(frozen=True)
class Formation:
    """Immutable player-to-position map for one side.

    Parameters
    ----------
    positions : Mapping[str, Position]
        Court position per player id, in lineup order.
    ball_position : Position
        Current ball location.
    attacking_left : bool
        Orientation of the possession the formation belongs to.
    ball_handler : str | None, optional
        Id of the player holding the ball, when on this side.
    version : int, default=0
        Monotonically increasing revision counter.
    """

    positions: Mapping[str, Position]
    ball_position: Position
    attacking_left: bool
    ball_handler: Optional[str] = None
    version: int = 0

    def position_of(self, player_id: str) -> Optional[Position]:
        """Return the position of ``player_id`` if it is part of the formation.

        Parameters
        ----------
        player_id : str
            Player to look up.

        Returns
        -------
        Position | None
            Court position, or ``None`` for players not in the formation.
        """
        return self.positions.get(player_id)

    def player_ids(self) -> List[str]:
        """Return the player ids in formation order.

        Returns
        -------
        List[str]
            Player ids.
        """
        return list(self.positions)

    def with_player(self, player_id: str, position: Position) -> "Formation":
        """Return a copy with one player relocated.

        Parameters
        ----------
        player_id : str
            Player to move.
        position : Position
            New court position.

        Returns
        -------
        Formation
            New snapshot with ``version`` incremented.
        """
        positions = dict(self.positions)
        positions[player_id] = position
        return replace(self, positions=positions, version=self.version + 1)

    def with_ball(self, position: Position, handler: Optional[str] = None) -> "Formation":
        """Return a copy with the ball relocated.

        Parameters
        ----------
        position : Position
            New ball location.
        handler : str | None, optional
            New ball-handler id; ``None`` clears it.

        Returns
        -------
        Formation
            New snapshot with ``version`` incremented.
        """
        return replace(self, ball_position=position, ball_handler=handler, version=self.version + 1)


@dataclass(frozen=True)
class FormationAnalysis:
    """Summary metrics describing a formation's shape.

    Parameters
    ----------
    spacing : float
        Mean pairwise distance relative to the ideal, capped at 1.
    balance : float
        Lateral spread relative to the court width, capped at 1.
    coverage : float
        Fraction of a full five-man unit present.
    """

    spacing: float
    balance: float
    coverage: float


@dataclass
class FormationManager:
    """Build and update formations from set plays and defensive schemes.

    Parameters
    ----------
    config : EngineConfig, optional
        Configuration supplying layouts; defaults to ``ENGINE_CONFIG``.
    """

    config: EngineConfig = field(default_factory=lambda: ENGINE_CONFIG)

    def known_set_plays(self) -> List[str]:
        """Return the names of the configured set plays.

        Returns
        -------
        List[str]
            Set-play names in configuration order.
        """
        return list(self.config.formation.set_plays)

    def create_offensive_formation(
        self,
        team: "Team",
        attacking_left: bool,
        set_play: Optional[str] = None,
        ball_handler: Optional[str] = None,
    ) -> Formation:
        """Lay out the offensive lineup in a named set play.

        Parameters
        ----------
        team : Team
            Offensive team; its lineup fills the five slots in order.
        attacking_left : bool
            Whether the offence attacks the left basket.
        set_play : str | None, optional
            Set-play name; the configured default when omitted.
        ball_handler : str | None, optional
            Player who starts with the ball; slot one when omitted or absent.

        Returns
        -------
        Formation
            Offensive formation with the ball at the handler.

        Raises
        ------
        ValueError
            If ``set_play`` is not a configured set play.
        """
        cfg = self.config.formation
        name = set_play or cfg.default_set_play
        try:
            slots = cfg.set_plays[name]
        except KeyError as exc:
            raise ValueError(f"Unknown set play '{name}'. Known set plays: {', '.join(cfg.set_plays)}") from exc

        positions: Dict[str, Position] = {}
        for player, (x, y) in zip(team.lineup, slots):
            positions[player.player_id] = COURT.orient(Position(x, y), attacking_left)

        handler = ball_handler if ball_handler in positions else next(iter(positions))
        return Formation(positions, positions[handler], attacking_left, handler)

    def create_defensive_formation(
        self,
        team: "Team",
        scheme: str,
        offense_formation: Formation,
        attacking_left: bool,
    ) -> Formation:
        """Lay out the defensive lineup for a scheme.

        Parameters
        ----------
        team : Team
            Defensive team; its lineup is placed in order.
        scheme : str
            Defensive scheme name.
        offense_formation : Formation
            Offensive formation the defence reacts to.
        attacking_left : bool
            Whether the offence attacks the left basket.

        Returns
        -------
        Formation
            Defensive formation sharing the offence's ball location.

        Raises
        ------
        ValueError
            If ``scheme`` is not a known defensive scheme.
        """
        if scheme in ("man", "switch"):
            spots = self._man_positions(offense_formation, attacking_left)
        elif scheme in ZONE_SCHEMES:
            spots = self._zone_positions(scheme, attacking_left)
        elif scheme == "fullCourt":
            spots = self._press_positions(offense_formation, attacking_left)
        else:
            raise ValueError(f"Unknown defensive scheme '{scheme}'. Known schemes: {', '.join(DEFENSIVE_SCHEMES)}")

        positions = {player.player_id: spot for player, spot in zip(team.lineup, spots)}
        return Formation(positions, offense_formation.ball_position, attacking_left)

    def update_formation_after_ball_movement(
        self,
        formation: Formation,
        new_ball_position: Position,
        new_ball_handler: Optional[str],
    ) -> Formation:
        """Return a formation with the ball moved to a new location.

        Parameters
        ----------
        formation : Formation
            Formation to update.
        new_ball_position : Position
            Destination of the ball.
        new_ball_handler : str | None
            Player now holding the ball, if any.

        Returns
        -------
        Formation
            New snapshot; player positions are unchanged.
        """
        return formation.with_ball(COURT.constrain_to_bounds(new_ball_position), new_ball_handler)

    def analyze_formation(self, formation: Formation) -> FormationAnalysis:
        """Summarise a formation's spacing, balance and coverage.

        Parameters
        ----------
        formation : Formation
            Formation to analyse.

        Returns
        -------
        FormationAnalysis
            Shape metrics.
        """
        spots = list(formation.positions.values())
        if len(spots) < 2:
            spacing = 0.0
        else:
            spacing = calculate_spacing(spots)
        if spots:
            ys = [spot.y for spot in spots]
            balance = min(1.0, (max(ys) - min(ys)) / self.config.court.width)
        else:
            balance = 0.0
        coverage = min(1.0, len(spots) / 5)
        return FormationAnalysis(spacing, balance, coverage)

    def _man_positions(self, offense_formation: Formation, attacking_left: bool) -> List[Position]:
        """Place each defender between an offender and the defended basket.

        Parameters
        ----------
        offense_formation : Formation
            Offensive formation whose slots are shadowed in order.
        attacking_left : bool
            Whether the offence attacks the left basket.

        Returns
        -------
        List[Position]
            One defensive spot per offensive player.
        """
        basket = COURT.basket(attacking_left)
        nudge = self.config.formation.man_nudge
        return [
            COURT.constrain_to_bounds(spot.move_towards(basket, nudge))
            for spot in offense_formation.positions.values()
        ]

    def _zone_positions(self, scheme: str, attacking_left: bool) -> List[Position]:
        """Place defenders in a fixed zone layout.

        Parameters
        ----------
        scheme : str
            Zone scheme name.
        attacking_left : bool
            Whether the offence attacks the left basket.

        Returns
        -------
        List[Position]
            Zone spots in roster order.
        """
        cfg = self.config.formation
        return [
            COURT.orient(Position(cfg.zone_depth + depth, y), attacking_left) for depth, y in cfg.zone_layouts[scheme]
        ]

    def _press_positions(self, offense_formation: Formation, attacking_left: bool) -> List[Position]:
        """Place defenders for a full-court press around the ball.

        Parameters
        ----------
        offense_formation : Formation
            Offensive formation supplying the ball and deny targets.
        attacking_left : bool
            Whether the offence attacks the left basket.

        Returns
        -------
        List[Position]
            On-ball spot, trap spot, then up to three deny spots.
        """
        cfg = self.config.formation
        mid_y = self.config.court.width / 2
        ball = COURT.orient(offense_formation.ball_position, attacking_left)
        toward_middle = cfg.press_trap_offset if ball.y < mid_y else -cfg.press_trap_offset
        local = [
            Position(ball.x - cfg.press_on_ball_gap, ball.y),
            Position(ball.x - cfg.press_on_ball_gap, ball.y + toward_middle),
        ]
        offense_spots = [COURT.orient(spot, attacking_left) for spot in offense_formation.positions.values()]
        for index, spot in enumerate(offense_spots[2:5]):
            lateral = cfg.press_deny_lateral if index % 2 == 0 else -cfg.press_deny_lateral
            local.append(Position(spot.x - cfg.press_deny_gap, spot.y + lateral))
        return [COURT.constrain_to_bounds(COURT.orient(spot, attacking_left)) for spot in local]


__all__ = [
    "DEFENSIVE_SCHEMES",
    "DefensiveScheme",
    "Formation",
    "FormationAnalysis",
    "FormationManager",
    "ZONE_SCHEMES",
]
