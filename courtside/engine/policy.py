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
"""Action selection for the ball-handler.

The policy blends a model-based expected point value (EPV) per action with the
player's tendency bias, then samples from a temperature-scaled softmax. Smart,
disciplined players sample from a sharper distribution; tired players from a
flatter one. The module also carries the Dirichlet/Beta helpers used to turn
raw tendency weights into normalised distributions.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from .config import ENGINE_CONFIG, EngineConfig
from .probability import clamp, softmax

if TYPE_CHECKING:  # pragma: no cover
    from courtside.models.player import Player, Tendencies

Action = Literal["drive", "pullup", "catchShoot", "pnrAttack", "pnrPass", "post", "reset"]

ACTIONS: Tuple[Action, ...] = ("drive", "pullup", "catchShoot", "pnrAttack", "pnrPass", "post", "reset")
"""With-ball actions in the order used by tendency vectors."""

SHOT_ACTIONS: Tuple[Action, ...] = ("pullup", "catchShoot")


def calculate_epv(
    has_position: bool,
    shot_zone: Optional[str],
    open_lanes: float,
    ball_movement: float,
    shot_quality: float,
    shot_clock: float,
    score_diff: int,
    config: Optional[EngineConfig] = None,
) -> Dict[Action, float]:
    """Estimate the expected point value of every with-ball action.

    Parameters
    ----------
    has_position : bool
        Whether the ball-handler has a known court position.
    shot_zone : str | None
        Zone the handler currently stands in.
    open_lanes : float
        Open-lane fraction from the current spacing.
    ball_movement : float
        Ball movement accumulated this possession.
    shot_quality : float
        Shot quality from the current spacing.
    shot_clock : float
        Seconds left on the shot clock.
    score_diff : int
        Offence score minus defence score.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Dict[Action, float]
        EPV per action in :data:`ACTIONS` order.
    """
    cfg = (config or ENGINE_CONFIG).epv
    if not has_position:
        epv: Dict[Action, float] = {action: cfg.fallback[action] for action in ACTIONS}
    else:
        if shot_zone == "three":
            catch = cfg.catch_three_base + cfg.catch_three_quality * shot_quality
        else:
            catch = cfg.catch_base + cfg.catch_quality * shot_quality
        epv = {
            "drive": cfg.drive_base + cfg.drive_lane * open_lanes,
            "pullup": cfg.pullup_base + cfg.pullup_quality * shot_quality,
            "catchShoot": catch,
            "pnrAttack": cfg.pnr_attack_base + cfg.pnr_attack_lane * open_lanes,
            "pnrPass": cfg.pnr_pass_base + cfg.pnr_pass_movement * ball_movement,
            "post": cfg.post_rim if shot_zone == "rim" else cfg.post_other,
            "reset": cfg.reset,
        }

    if shot_clock < cfg.late_clock_threshold:
        _apply_multipliers(epv, cfg.late_clock_multipliers)
    if shot_clock < cfg.desperation_threshold:
        _apply_multipliers(epv, cfg.desperation_multipliers)
    if score_diff > cfg.blowout_margin:
        _apply_multipliers(epv, cfg.leading_multipliers)
    elif score_diff < -cfg.blowout_margin:
        _apply_multipliers(epv, cfg.trailing_multipliers)
    return epv


def _apply_multipliers(epv: Dict[Action, float], multipliers: Mapping[str, float]) -> None:
    """Scale ``epv`` in place by a table of per-action multipliers.

    Parameters
    ----------
    epv : Dict[Action, float]
        EPV table to adjust.
    multipliers : Mapping[str, float]
        Multiplier per action; absent actions are unchanged.
    """
    for action, factor in multipliers.items():
        if action in epv:
            epv[action] *= factor  # type: ignore[index]


def calculate_temperature(iq: float, discipline: float, fatigue: float, config: Optional[EngineConfig] = None) -> float:
    """Return the softmax temperature for a decision maker.

    Parameters
    ----------
    iq : float
        Basketball IQ rating.
    discipline : float
        Discipline rating.
    fatigue : float
        Fatigue accumulator on a 0-100 scale.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    float
        Temperature clamped to the configured band.
    """
    cfg = (config or ENGINE_CONFIG).policy
    numerator = cfg.base_temperature * (1 + cfg.fatigue_k * (fatigue / 100))
    denominator = 1 + cfg.iq_k * (iq - 50) + cfg.discipline_k * (discipline - 50)
    return clamp(numerator / denominator, cfg.min_temperature, cfg.max_temperature)


def normalize_values(values: Sequence[float]) -> List[float]:
    """Z-normalise values using the sample standard deviation.

    Parameters
    ----------
    values : Sequence[float]
        Values to normalise.

    Returns
    -------
    List[float]
        Z-scores; all zeros when the spread is degenerate.
    """
    if not values:
        return []
    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / max(1, len(values) - 1)
    sd = math.sqrt(variance)
    if sd <= 1e-6:
        return [0.0 for _ in values]
    return [(value - mean) / sd for value in values]


def action_probabilities(
    player: "Player",
    epv: Mapping[Action, float],
    fatigue: float,
    config: Optional[EngineConfig] = None,
) -> Dict[Action, float]:
    """Return the policy's sampling distribution over actions.

    Parameters
    ----------
    player : Player
        Decision maker.
    epv : Mapping[Action, float]
        Expected point value per action.
    fatigue : float
        Decision maker's fatigue accumulator.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Dict[Action, float]
        Probability per action, summing to one.
    """
    engine_cfg = config or ENGINE_CONFIG
    alpha = engine_cfg.policy.alpha
    keys = [action for action in ACTIONS if action in epv]
    bias = dict(zip(ACTIONS, player.tendency_bias()))
    z_scores = normalize_values([epv[action] for action in keys])
    scores = [alpha * z + (1 - alpha) * bias.get(action, 0.0) for action, z in zip(keys, z_scores)]
    temperature = calculate_temperature(player.ratings.iq, player.ratings.discipline, fatigue, engine_cfg)
    return dict(zip(keys, softmax(scores, temperature)))


def choose_action(
    player: "Player",
    epv: Mapping[Action, float],
    fatigue: float,
    rng: random.Random,
    config: Optional[EngineConfig] = None,
) -> Action:
    """Sample an action for ``player`` with a single draw from ``rng``.

    Parameters
    ----------
    player : Player
        Decision maker.
    epv : Mapping[Action, float]
        Expected point value per action.
    fatigue : float
        Decision maker's fatigue accumulator.
    rng : random.Random
        Possession random stream.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    Action
        Sampled action; the first action if rounding leaves the draw unmatched.
    """
    probs = action_probabilities(player, epv, fatigue, config)
    keys = list(probs)
    draw = rng.random()
    cumulative = 0.0
    for action in keys:
        cumulative += probs[action]
        if draw < cumulative:
            return action
    return keys[0]


# ---------------------------------------------------------------------------
# Tendency distributions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DirichletDistribution:
    """Dirichlet concentration parameters and their mean.

    Parameters
    ----------
    alphas : Tuple[float, ...]
        Concentration per outcome.
    mean : Tuple[float, ...]
        Normalised expected share per outcome.
    """

    alphas: Tuple[float, ...]
    mean: Tuple[float, ...]


@dataclass(frozen=True)
class BetaDistribution:
    """Beta shape parameters and their mean.

    Parameters
    ----------
    a : float
        Success pseudo-count.
    b : float
        Failure pseudo-count.
    mean : float
        Expected success rate.
    """

    a: float
    b: float
    mean: float


@dataclass(frozen=True)
class TendencyDistributions:
    """Distributions derived from a player's tendency weights.

    Parameters
    ----------
    with_ball : DirichletDistribution
        With-ball action mix.
    off_ball : DirichletDistribution
        Off-ball action mix.
    shot_zone : DirichletDistribution
        Shot-zone mix.
    three_style : DirichletDistribution
        Catch versus off-the-dribble three mix.
    pass_risk : BetaDistribution
        Risky-pass propensity.
    help : BetaDistribution
        Help-defence propensity.
    gamble_steal : BetaDistribution
        Steal-gamble propensity.
    crash_oreb : BetaDistribution
        Offensive-glass propensity.
    """

    with_ball: DirichletDistribution
    off_ball: DirichletDistribution
    shot_zone: DirichletDistribution
    three_style: DirichletDistribution
    pass_risk: BetaDistribution
    help: BetaDistribution
    gamble_steal: BetaDistribution
    crash_oreb: BetaDistribution


def dirichlet_mean(alphas: Sequence[float]) -> List[float]:
    """Return the mean of a Dirichlet distribution.

    Parameters
    ----------
    alphas : Sequence[float]
        Concentration parameters.

    Returns
    -------
    List[float]
        ``alpha_i / sum(alpha)``; uniform when every alpha is zero.
    """
    total = sum(alphas)
    if total <= 0:
        return [1.0 / len(alphas) for _ in alphas] if alphas else []
    return [alpha / total for alpha in alphas]


def beta_mean(a: float, b: float) -> float:
    """Return the mean of a Beta distribution.

    Parameters
    ----------
    a : float
        Success pseudo-count.
    b : float
        Failure pseudo-count.

    Returns
    -------
    float
        ``a / (a + b)``; ``0.5`` when both are zero.
    """
    total = a + b
    return a / total if total > 0 else 0.5


def update_dirichlet(alphas: Sequence[float], index: int, decay: float = 1.0) -> List[float]:
    """Decay the concentration and record one observation.

    Parameters
    ----------
    alphas : Sequence[float]
        Current concentration parameters.
    index : int
        Observed outcome.
    decay : float, default=1.0
        Multiplier applied to every alpha before the observation.

    Returns
    -------
    List[float]
        Updated concentration parameters.
    """
    updated = [alpha * decay for alpha in alphas]
    updated[index] += 1
    return updated


def update_beta(a: float, b: float, success: bool, decay: float = 1.0) -> Tuple[float, float]:
    """Decay the pseudo-counts and record one trial.

    Parameters
    ----------
    a : float
        Success pseudo-count.
    b : float
        Failure pseudo-count.
    success : bool
        Outcome of the trial.
    decay : float, default=1.0
        Multiplier applied before the observation.

    Returns
    -------
    Tuple[float, float]
        Updated ``(a, b)``.
    """
    a, b = a * decay, b * decay
    if success:
        return a + 1, b
    return a, b + 1


def _dirichlet_from_weights(weights: Sequence[float], config: EngineConfig) -> DirichletDistribution:
    """Build a Dirichlet distribution from raw tendency weights.

    Parameters
    ----------
    weights : Sequence[float]
        Non-negative tendency weights.
    config : EngineConfig
        Configuration supplying the base alpha and multiplier.

    Returns
    -------
    DirichletDistribution
        Distribution whose alphas are all strictly positive.
    """
    cfg = config.tendency
    total = sum(weights)
    shares = [weight / total for weight in weights] if total > 0 else [0.0 for _ in weights]
    alphas = tuple(cfg.dirichlet_base + share * cfg.beta_multiplier for share in shares)
    return DirichletDistribution(alphas, tuple(dirichlet_mean(alphas)))


def _beta_from_scalar(value: float, config: EngineConfig) -> BetaDistribution:
    """Build a Beta distribution from a 0-100 tendency scalar.

    Parameters
    ----------
    value : float
        Tendency scalar.
    config : EngineConfig
        Configuration supplying the base alpha and multiplier.

    Returns
    -------
    BetaDistribution
        Distribution with strictly positive shape parameters.
    """
    cfg = config.tendency
    share = clamp(value / 100, 0.0, 1.0)
    a = cfg.dirichlet_base + share * cfg.beta_multiplier
    b = cfg.dirichlet_base + (1 - share) * cfg.beta_multiplier
    return BetaDistribution(a, b, beta_mean(a, b))


def initialize_tendency_distributions(
    tendencies: "Tendencies", config: Optional[EngineConfig] = None
) -> TendencyDistributions:
    """Convert a player's tendencies into Dirichlet and Beta distributions.

    Parameters
    ----------
    tendencies : Tendencies
        Raw tendency weights and scalars.
    config : EngineConfig | None, optional
        Configuration override.

    Returns
    -------
    TendencyDistributions
        Distributions for every tendency group.
    """
    engine_cfg = config or ENGINE_CONFIG
    return TendencyDistributions(
        with_ball=_dirichlet_from_weights(tendencies.with_ball, engine_cfg),
        off_ball=_dirichlet_from_weights(tendencies.off_ball, engine_cfg),
        shot_zone=_dirichlet_from_weights(tendencies.shot_zone, engine_cfg),
        three_style=_dirichlet_from_weights(tendencies.three_style, engine_cfg),
        pass_risk=_beta_from_scalar(tendencies.pass_risk, engine_cfg),
        help=_beta_from_scalar(tendencies.help, engine_cfg),
        gamble_steal=_beta_from_scalar(tendencies.gamble_steal, engine_cfg),
        crash_oreb=_beta_from_scalar(tendencies.crash_oreb, engine_cfg),
    )


__all__ = [
    "ACTIONS",
    "Action",
    "BetaDistribution",
    "DirichletDistribution",
    "SHOT_ACTIONS",
    "TendencyDistributions",
    "action_probabilities",
    "beta_mean",
    "calculate_epv",
    "calculate_temperature",
    "choose_action",
    "dirichlet_mean",
    "initialize_tendency_distributions",
    "normalize_values",
    "update_beta",
    "update_dirichlet",
]
