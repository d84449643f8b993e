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
"""Probability models converting ratings and situation into outcomes.

Each model returns an :class:`Explain` record so that every stochastic result
in a possession can be audited term by term. The models are pure functions;
randomness is applied by the caller against the returned probability.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .config import ENGINE_CONFIG, EngineConfig

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.player import Ratings


@dataclass(frozen=True, slots=True)
class Explain:
    """Auditable breakdown of a probability model evaluation.

    Parameters
    ----------
    terms : Tuple[Tuple[str, float], ...]
        Ordered ``(label, contribution)`` pairs.
    score : float
        Sum of the term contributions.
    p : float
        Probability derived from the score.
    """

    terms: Tuple[Tuple[str, float], ...] = field(default_factory=tuple)
    score: float = 0.0
    p: float = 0.0

    def term(self, label: str) -> float:
        """Return the contribution recorded under ``label``.

        Parameters
        ----------
        label : str
            Term label to look up.

        Returns
        -------
        float
            Contribution value.

        Raises
        ------
        KeyError
            If no term carries ``label``.
        """
        for name, value in self.terms:
            if name == label:
                return value
        raise KeyError(label)


EMPTY_EXPLAIN = Explain()
"""Explain record for outcomes that involve no probability model."""


def clamp(value: float, low: float, high: float) -> float:
    """Constrain ``value`` to the closed interval ``[low, high]``.

    Parameters
    ----------
    value : float
        Value to clamp.
    low : float
        Lower bound.
    high : float
        Upper bound.

    Returns
    -------
    float
        Clamped value.
    """
    return max(low, min(high, value))


def rating_z(rating: float, config: Optional[EngineConfig] = None) -> float:
    """Convert a 0-99 rating into a z-score.

    Parameters
    ----------
    rating : float
        Rating to convert.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    float
        ``(rating - mean) / std_dev`` using the configured rating scale.
    """
    cfg = (config or ENGINE_CONFIG).rating
    return (rating - cfg.mean) / cfg.std_dev


def logistic(score: float) -> float:
    """Map a real-valued score to ``(0, 1)``.

    Parameters
    ----------
    score : float
        Log-odds.

    Returns
    -------
    float
        Logistic transform of ``score``; saturates instead of overflowing.
    """
    if score >= 0:
        return 1.0 / (1.0 + math.exp(-score))
    exp_score = math.exp(score)
    return exp_score / (1.0 + exp_score)


def safe_probability(p: float) -> float:
    """Clamp a probability before it is compared with a random draw.

    Parameters
    ----------
    p : float
        Candidate probability.

    Returns
    -------
    float
        ``p`` clamped to ``[0, 1]``; ``0.0`` for NaN.
    """
    if math.isnan(p):
        return 0.0
    return clamp(p, 0.0, 1.0)


def softmax(scores: Sequence[float], temperature: float = 1.0) -> List[float]:
    """Return temperature-scaled softmax weights.

    Parameters
    ----------
    scores : Sequence[float]
        Raw preference scores.
    temperature : float, default=1.0
        Positive temperature; larger values flatten the distribution.

    Returns
    -------
    List[float]
        Probabilities summing to one, computed with max subtraction for
        numerical stability.
    """
    if not scores:
        return []
    peak = max(scores)
    weights = [math.exp((score - peak) / temperature) for score in scores]
    total = sum(weights)
    return [weight / total for weight in weights]


def _explain(terms: List[Tuple[str, float]], offset: float = 0.0) -> Explain:
    """Sum ``terms`` and wrap them with their logistic probability.

    Parameters
    ----------
    terms : List[Tuple[str, float]]
        Labelled contributions.
    offset : float, default=0.0
        Extra log-odds added after the score is summed but not reported in it.

    Returns
    -------
    Explain
        Populated explanation record.
    """
    score = sum(value for _, value in terms)
    return Explain(tuple(terms), score, logistic(score + offset))


def shot_make_probability(
    ratings: "Ratings",
    quality: float,
    contest: float,
    fatigue: float,
    clutch: float,
    release: float,
    zone: str,
    config: Optional[EngineConfig] = None,
) -> Explain:
    """Evaluate the chance that a field-goal attempt goes in.

    Parameters
    ----------
    ratings : Ratings
        Shooter ratings.
    quality : float
        Shot quality in ``[0, 1]``.
    contest : float
        Contest level in ``[0, 1]``.
    fatigue : float
        Shooter fatigue as a fraction.
    clutch : float
        Clutch context scalar.
    release : float
        Release modifier (catch versus off the dribble).
    zone : str
        Shot zone; ``"close"`` is evaluated with the mid-range rating.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Explain
        Skill and situation terms; ``p`` includes a bounded inconsistency
        offset driven by the shooter's consistency rating.
    """
    engine_cfg = config or ENGINE_CONFIG
    cfg = engine_cfg.shot_model
    if zone == "three":
        skill = ratings.three
    elif zone in ("mid", "close"):
        skill = ratings.mid
    else:
        skill = ratings.finishing
    terms = [
        ("skill", rating_z(skill, engine_cfg)),
        ("Q", cfg.quality * quality),
        ("contest", cfg.contest * contest),
        ("fatigue", cfg.fatigue * fatigue),
        ("clutch", cfg.clutch * clutch),
        ("release", cfg.release * release),
    ]
    noise = clamp(cfg.noise * (1 - ratings.consistency / 100), 0.0, cfg.noise_cap)
    return _explain(terms, noise)


def drive_blowby_probability(
    offense: "Ratings",
    defense: "Ratings",
    open_lanes: float,
    angle: float,
    config: Optional[EngineConfig] = None,
) -> Explain:
    """Evaluate the chance that a drive beats its defender.

    Parameters
    ----------
    offense : Ratings
        Driver ratings.
    defense : Ratings
        On-ball defender ratings.
    open_lanes : float
        Open-lane fraction.
    angle : float
        Absolute drive angle in radians.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Explain
        Blow-by explanation.
    """
    engine_cfg = config or ENGINE_CONFIG
    cfg = engine_cfg.drive_model
    terms = [
        ("speed gap", cfg.speed * (rating_z(offense.speed, engine_cfg) - rating_z(defense.lateral, engine_cfg))),
        (
            "handle gap",
            cfg.handle * (rating_z(offense.handle, engine_cfg) - rating_z(defense.on_ball_def, engine_cfg)),
        ),
        ("lane", cfg.lane * open_lanes),
        ("angle", cfg.angle * angle),
        ("base", cfg.base),
    ]
    return _explain(terms)


def shooting_foul_probability(
    offense: "Ratings",
    defense: "Ratings",
    contact: float,
    contest: float,
    config: Optional[EngineConfig] = None,
) -> Explain:
    """Evaluate the chance that a play draws a shooting foul.

    Parameters
    ----------
    offense : Ratings
        Ratings of the player drawing contact.
    defense : Ratings
        Ratings of the defender.
    contact : float
        Contact level of the play.
    contest : float
        Contest level of the play.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Explain
        Foul explanation.
    """
    engine_cfg = config or ENGINE_CONFIG
    cfg = engine_cfg.foul_model
    terms = [
        ("base", cfg.base),
        ("contact", cfg.contact * contact),
        ("whistle (off)", cfg.whistle * rating_z(offense.finishing, engine_cfg)),
        ("def discipline", cfg.defense_discipline * rating_z(defense.discipline, engine_cfg)),
        ("contest", cfg.contest * contest),
    ]
    return _explain(terms)


def pass_complete_probability(
    ratings: "Ratings",
    lane_risk: float,
    pressure: float,
    config: Optional[EngineConfig] = None,
) -> Explain:
    """Evaluate the chance that a pass reaches its target.

    Parameters
    ----------
    ratings : Ratings
        Passer ratings.
    lane_risk : float
        Risk of the passing lane in ``[0, 1]``.
    pressure : float
        Defensive pressure on the passer in ``[0, 1]``.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Explain
        Completion explanation.
    """
    engine_cfg = config or ENGINE_CONFIG
    cfg = engine_cfg.pass_model
    terms = [
        ("pass skill", cfg.skill * rating_z(ratings.pass_, engine_cfg)),
        ("iq", cfg.iq * rating_z(ratings.iq, engine_cfg)),
        ("risk", cfg.lane_risk * lane_risk),
        ("pressure", cfg.pressure * pressure),
    ]
    return _explain(terms)


def rebound_weight(
    ratings: "Ratings",
    positional_advantage: float,
    distance_ft: float,
    config: Optional[EngineConfig] = None,
) -> Tuple[float, Explain]:
    """Compute a player's unnormalised weight in a rebound contest.

    Parameters
    ----------
    ratings : Ratings
        Rebounder ratings.
    positional_advantage : float
        Box-out advantage; positive for the player holding position.
    distance_ft : float
        Distance to the ball in feet.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Tuple[float, Explain]
        ``exp(score)`` and the explanation, whose ``p`` is ``w / (1 + w)``.
    """
    engine_cfg = config or ENGINE_CONFIG
    cfg = engine_cfg.rebound_model
    terms = [
        ("rebound", cfg.rating * rating_z(ratings.rebound, engine_cfg)),
        ("height", cfg.height * ratings.height_in / 12),
        ("strength", cfg.strength * rating_z(ratings.strength, engine_cfg)),
        ("posAdv", cfg.position * positional_advantage),
        ("dist", cfg.distance * distance_ft),
    ]
    score = sum(value for _, value in terms)
    weight = math.exp(score)
    return weight, Explain(tuple(terms), score, weight / (1 + weight))


__all__ = [
    "EMPTY_EXPLAIN",
    "Explain",
    "clamp",
    "drive_blowby_probability",
    "logistic",
    "pass_complete_probability",
    "rating_z",
    "rebound_weight",
    "safe_probability",
    "shooting_foul_probability",
    "shot_make_probability",
    "softmax",
]
