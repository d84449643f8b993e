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
"""Utilities for constructing team rosters from serialized data sources.

The helpers translate plain dictionaries or JSON payloads into the
:class:`~courtside.models.player.Player` and :class:`~courtside.models.team.Team`
objects the possession engine understands. Missing ratings default to the
league mean and missing tendencies to league-average weights, so sparse
datasets still produce valid rosters.
"""
import json
from dataclasses import fields
from pathlib import Path
from typing import Tuple

from courtside.engine.config import ENGINE_CONFIG
from courtside.models.player import Player, Ratings, Tendencies
from courtside.models.team import Team

_VECTOR_TENDENCIES = ("with_ball", "off_ball", "shot_zone", "three_style")


def player_from_dict(d: dict) -> Player:
    """Build a ``Player`` from a plain dictionary payload.

    Parameters
    ----------
    d
        A mapping containing the serialized player information. Supported keys
        include ``id``, ``name``, ``age``, ``position``, a ``ratings`` mapping
        and a ``tendencies`` mapping. ``pass`` is accepted as an alias for the
        ``pass_`` rating.

    Returns
    -------
    Player
        A fully initialised player with defaults for any missing values.
    """
    raw = dict(d.get("ratings", {}) or {})
    if "pass" in raw and "pass_" not in raw:
        raw["pass_"] = raw.pop("pass")

    defaults = Ratings.__dataclass_fields__
    values = {}
    for item in fields(Ratings):
        if item.name in raw:
            values[item.name] = int(raw[item.name])
        elif item.name in ("height_in", "wingspan_in"):
            values[item.name] = defaults[item.name].default
        else:
            values[item.name] = int(ENGINE_CONFIG.rating.mean)

    tendency_data = d.get("tendencies", {}) or {}
    tendency_values = {
        key: tuple(value) if key in _VECTOR_TENDENCIES else float(value)
        for key, value in tendency_data.items()
        if key in Tendencies.__dataclass_fields__
    }

    player_id = str(d.get("id", "0"))
    return Player(
        player_id=player_id,
        name=d.get("name", f"player_{player_id}"),
        ratings=Ratings(**values),
        tendencies=Tendencies(**tendency_values),
        position=d.get("position", "SF"),
        age=d.get("age", 25),
    )


def load_teams_from_json(path: str) -> Tuple[Team, Team]:
    """Load home and away teams from a roster JSON document.

    Parameters
    ----------
    path
        The filesystem path to a JSON document with ``home`` and ``away``
        sections, each holding ``id``, ``name``, ``players`` and optionally
        ``set_play`` and ``defensive_scheme``.

    Returns
    -------
    tuple[Team, Team]
        A pair of ``Team`` objects in ``(home, away)`` order.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    KeyError
        Raised when the JSON payload is missing a ``home`` or ``away`` section.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Roster JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    def build_team(section: str) -> Team:
        tdata = data[section]
        players = [player_from_dict(pl) for pl in tdata.get("players", [])]
        return Team(
            team_id=str(tdata.get("id", section)),
            name=tdata.get("name", f"Team_{section}"),
            players=players,
            set_play=tdata.get("set_play", "1-out-4"),
            defensive_scheme=tdata.get("defensive_scheme", "man"),
        )

    return build_team("home"), build_team("away")
