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
"""Central configuration for engine tuning parameters.

Every coefficient the possession engine relies on lives here so that tuning
never requires touching resolution code. Court coordinates are measured in
feet with the origin at the left baseline/sideline corner. Positional layouts
are stored in the *attack-left* frame (the offense shoots at the basket near
``x = 0``) and mirrored by the formation manager for the opposite basket.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(slots=True)
class CourtConfig:
    """Regulation court geometry.

    Parameters
    ----------
    length : float, default=94.0
        Baseline-to-baseline length in feet.
    width : float, default=50.0
        Sideline-to-sideline width in feet.
    home_basket : Tuple[float, float], default=(5.25, 25.0)
        Centre of the left basket.
    away_basket : Tuple[float, float], default=(88.75, 25.0)
        Centre of the right basket.
    three_point_radius : float, default=23.75
        Arc distance from the basket centre.
    corner_three_distance : float, default=22.0
        Lateral distance from the basket that marks the straight corner line.
    corner_three_depth : float, default=14.0
        Depth from the baseline over which the straight corner line applies.
    paint_width : float, default=16.0
        Width of the painted lane.
    paint_depth : float, default=19.0
        Depth of the painted lane measured from the baseline.
    rim_distance : float, default=3.0
        Shots inside this distance count as rim attempts.
    close_distance : float, default=10.0
        Shots inside this distance (and outside the rim band) count as close attempts.
    """

    length: float = 94.0
    width: float = 50.0
    home_basket: Tuple[float, float] = (5.25, 25.0)
    away_basket: Tuple[float, float] = (88.75, 25.0)
    three_point_radius: float = 23.75
    corner_three_distance: float = 22.0
    corner_three_depth: float = 14.0
    paint_width: float = 16.0
    paint_depth: float = 19.0
    rim_distance: float = 3.0
    close_distance: float = 10.0


@dataclass(slots=True)
class ShotQualityConfig:
    """Zone baselines and contest penalties used for shot quality.

    Parameters
    ----------
    base_quality : Dict[str, float]
        Open-look quality keyed by shot zone.
    no_contest_distance : float, default=6.0
        Defender distance beyond which a shot is uncontested.
    max_contest_penalty : float, default=0.4
        Quality removed by a defender standing on the shooter.
    """

    base_quality: Dict[str, float] = field(
        default_factory=lambda: {"rim": 0.8, "close": 0.7, "mid": 0.6, "three": 0.4}
    )
    no_contest_distance: float = 6.0
    max_contest_penalty: float = 0.4


@dataclass(slots=True)
class SpacingConfig:
    """Spacing references and rebounding position modifiers.

    Parameters
    ----------
    ideal_player_distance : float, default=15.0
        Mean teammate separation treated as perfect spacing.
    driving_lane_width : float, default=pi / 4
        Full angular width of a lane; defenders inside half of it block the lane.
    boxing_out_advantage : float, default=1.0
        Positional advantage awarded to a defender who boxes out.
    being_boxed_out_penalty : float, default=-0.8
        Positional advantage applied to an offensive player who is boxed out.
    """

    ideal_player_distance: float = 15.0
    driving_lane_width: float = math.pi / 4
    boxing_out_advantage: float = 1.0
    being_boxed_out_penalty: float = -0.8


@dataclass(slots=True)
class RatingConfig:
    """Rating scale used for validation and z-score conversion.

    Parameters
    ----------
    mean : float, default=50.0
        Rating treated as league average.
    std_dev : float, default=12.0
        Rating points per standard deviation.
    min_rating : int, default=0
        Lowest legal skill rating.
    max_rating : int, default=99
        Highest legal skill rating.
    min_height_in : int, default=60
        Shortest legal height or wingspan in inches.
    max_height_in : int, default=100
        Tallest legal height or wingspan in inches.
    """

    mean: float = 50.0
    std_dev: float = 12.0
    min_rating: int = 0
    max_rating: int = 99
    min_height_in: int = 60
    max_height_in: int = 100


@dataclass(slots=True)
class ShotModelConfig:
    """Coefficients of the logistic shot-make model.

    Parameters
    ----------
    quality : float, default=0.15
        Weight on the shot-quality scalar.
    contest : float, default=-3.2
        Weight on defender contest.
    fatigue : float, default=-1.8
        Weight on fatigue expressed as a fraction.
    clutch : float, default=0.08
        Weight on the clutch context.
    release : float, default=0.02
        Weight on the release modifier (catch versus off the dribble).
    noise : float, default=2.2
        Inconsistency amplitude scaled by ``1 - consistency / 100``.
    noise_cap : float, default=0.4
        Upper bound on the inconsistency term.
    """

    quality: float = 0.15
    contest: float = -3.2
    fatigue: float = -1.8
    clutch: float = 0.08
    release: float = 0.02
    noise: float = 2.2
    noise_cap: float = 0.4


@dataclass(slots=True)
class PassModelConfig:
    """Coefficients of the pass-completion model.

    Parameters
    ----------
    skill : float, default=1.0
        Weight on the passer's pass rating z-score.
    lane_risk : float, default=-0.8
        Weight on the passing-lane risk.
    pressure : float, default=-0.5
        Weight on defensive pressure.
    iq : float, default=0.3
        Weight on the passer's basketball IQ z-score.
    """

    skill: float = 1.0
    lane_risk: float = -0.8
    pressure: float = -0.5
    iq: float = 0.3


@dataclass(slots=True)
class DriveModelConfig:
    """Coefficients of the drive blow-by model.

    Parameters
    ----------
    base : float, default=-0.2
        Intercept.
    speed : float, default=0.9
        Weight on speed versus lateral quickness.
    handle : float, default=0.6
        Weight on handle versus on-ball defence.
    lane : float, default=0.5
        Weight on the open-lane fraction.
    angle : float, default=0.4
        Weight on the absolute drive angle in radians.
    """

    base: float = -0.2
    speed: float = 0.9
    handle: float = 0.6
    lane: float = 0.5
    angle: float = 0.4


@dataclass(slots=True)
class ReboundModelConfig:
    """Coefficients of the exponential rebound weight model.

    Parameters
    ----------
    rating : float, default=0.9
        Weight on the rebound rating z-score.
    height : float, default=0.4
        Weight per foot of height.
    strength : float, default=0.4
        Weight on the strength z-score.
    position : float, default=0.6
        Weight on positional advantage.
    distance : float, default=-0.3
        Weight per foot of distance to the ball.
    """

    rating: float = 0.9
    height: float = 0.4
    strength: float = 0.4
    position: float = 0.6
    distance: float = -0.3


@dataclass(slots=True)
class FoulModelConfig:
    """Coefficients of the shooting-foul model.

    Parameters
    ----------
    base : float, default=-1.2
        Intercept.
    contact : float, default=0.8
        Weight on the contact level of the play.
    whistle : float, default=0.3
        Weight on the shooter's finishing z-score (ability to draw whistles).
    defense_discipline : float, default=-0.6
        Weight on the defender's discipline z-score.
    contest : float, default=0.3
        Weight on the contest level.
    """

    base: float = -1.2
    contact: float = 0.8
    whistle: float = 0.3
    defense_discipline: float = -0.6
    contest: float = 0.3


@dataclass(slots=True)
class PolicyConfig:
    """Softmax action-selection parameters.

    Parameters
    ----------
    alpha : float, default=0.7
        Blend between normalised EPV and tendency bias.
    base_temperature : float, default=1.0
        Temperature before fatigue and IQ adjustments.
    iq_k : float, default=0.009
        Temperature reduction per IQ point above average.
    discipline_k : float, default=0.008
        Temperature reduction per discipline point above average.
    fatigue_k : float, default=0.3
        Temperature increase per unit of fatigue fraction.
    min_temperature : float, default=0.55
        Lower temperature clamp.
    max_temperature : float, default=1.2
        Upper temperature clamp.
    tendency_center : float, default=0.2
        With-ball tendency weight mapped to zero bias.
    tendency_scale : float, default=2.0
        Multiplier applied to centred tendency weights.
    """

    alpha: float = 0.7
    base_temperature: float = 1.0
    iq_k: float = 0.009
    discipline_k: float = 0.008
    fatigue_k: float = 0.3
    min_temperature: float = 0.55
    max_temperature: float = 1.2
    tendency_center: float = 0.2
    tendency_scale: float = 2.0


@dataclass(slots=True)
class EPVConfig:
    """Expected point value baselines and situational multipliers.

    Parameters
    ----------
    fallback : Dict[str, float]
        EPV used when the ball-handler has no court position.
    drive_base : float, default=0.5
        Drive intercept.
    drive_lane : float, default=0.3
        Drive gain per unit of open lanes.
    pullup_base : float, default=0.3
        Pull-up intercept.
    pullup_quality : float, default=0.4
        Pull-up gain per unit of shot quality.
    catch_three_base : float, default=0.4
        Catch-and-shoot intercept beyond the arc.
    catch_three_quality : float, default=0.5
        Catch-and-shoot quality gain beyond the arc.
    catch_base : float, default=0.35
        Catch-and-shoot intercept inside the arc.
    catch_quality : float, default=0.4
        Catch-and-shoot quality gain inside the arc.
    pnr_attack_base : float, default=0.25
        Pick-and-roll attack intercept.
    pnr_attack_lane : float, default=0.2
        Pick-and-roll attack gain per unit of open lanes.
    pnr_pass_base : float, default=0.15
        Pick-and-roll pass intercept.
    pnr_pass_movement : float, default=0.1
        Pick-and-roll pass gain per unit of ball movement.
    post_rim : float, default=0.45
        Post-up value when the handler stands in the rim zone.
    post_other : float, default=0.08
        Post-up value elsewhere.
    reset : float, default=0.05
        Value of resetting the offence.
    late_clock_threshold : float, default=8.0
        Shot clock below which late-clock multipliers apply.
    late_clock_multipliers : Dict[str, float]
        Multipliers applied under the late-clock threshold.
    desperation_threshold : float, default=4.0
        Shot clock below which desperation multipliers also apply.
    desperation_multipliers : Dict[str, float]
        Multipliers applied under the desperation threshold.
    blowout_margin : int, default=10
        Score margin beyond which game-state multipliers apply.
    leading_multipliers : Dict[str, float]
        Multipliers for an offence leading by more than the margin.
    trailing_multipliers : Dict[str, float]
        Multipliers for an offence trailing by more than the margin.
    """

    fallback: Dict[str, float] = field(
        default_factory=lambda: {
            "drive": 0.5,
            "pullup": 0.2,
            "catchShoot": 0.3,
            "pnrAttack": 0.35,
            "pnrPass": 0.15,
            "post": 0.1,
            "reset": 0.05,
        }
    )
    drive_base: float = 0.5
    drive_lane: float = 0.3
    pullup_base: float = 0.3
    pullup_quality: float = 0.4
    catch_three_base: float = 0.4
    catch_three_quality: float = 0.5
    catch_base: float = 0.35
    catch_quality: float = 0.4
    pnr_attack_base: float = 0.25
    pnr_attack_lane: float = 0.2
    pnr_pass_base: float = 0.15
    pnr_pass_movement: float = 0.1
    post_rim: float = 0.45
    post_other: float = 0.08
    reset: float = 0.05
    late_clock_threshold: float = 8.0
    late_clock_multipliers: Dict[str, float] = field(
        default_factory=lambda: {
            "catchShoot": 1.5,
            "pullup": 1.4,
            "drive": 1.3,
            "pnrAttack": 0.7,
            "pnrPass": 0.5,
            "reset": 0.2,
        }
    )
    desperation_threshold: float = 4.0
    desperation_multipliers: Dict[str, float] = field(
        default_factory=lambda: {
            "catchShoot": 2.0,
            "pullup": 2.0,
            "drive": 1.8,
            "pnrAttack": 0.3,
            "pnrPass": 0.1,
            "reset": 0.1,
            "post": 0.5,
        }
    )
    blowout_margin: int = 10
    leading_multipliers: Dict[str, float] = field(default_factory=lambda: {"reset": 1.2, "drive": 0.9})
    trailing_multipliers: Dict[str, float] = field(default_factory=lambda: {"drive": 1.1, "catchShoot": 1.1})


@dataclass(slots=True)
class FatigueConfig:
    """Fatigue accrual and recovery.

    Parameters
    ----------
    per_action : float, default=0.7
        Fatigue added to the ball-handler for every action.
    per_shot : float, default=1.2
        Extra fatigue for a shot attempt.
    recover_per_break : float, default=6.0
        Fatigue recovered by every player at a quarter break.
    """

    per_action: float = 0.7
    per_shot: float = 1.2
    recover_per_break: float = 6.0


@dataclass(slots=True)
class ClockConfig:
    """Game and shot clock parameters.

    Parameters
    ----------
    shot_clock : float, default=24.0
        Full shot clock in seconds.
    offensive_rebound_floor : float, default=14.0
        Minimum shot clock after an offensive rebound.
    game_length : float, default=2880.0
        Regulation length in seconds.
    quarter_length : float, default=720.0
        Quarter length in seconds.
    quarters : int, default=4
        Number of regulation quarters.
    action_drain : Dict[str, float]
        Seconds drained by specific actions.
    default_drain : float, default=6.0
        Seconds drained by any other action.
    clutch_window : float, default=120.0
        Final-quarter seconds treated as clutch time.
    """

    shot_clock: float = 24.0
    offensive_rebound_floor: float = 14.0
    game_length: float = 2880.0
    quarter_length: float = 720.0
    quarters: int = 4
    action_drain: Dict[str, float] = field(default_factory=lambda: {"reset": 2.0, "pnrPass": 4.0})
    default_drain: float = 6.0
    clutch_window: float = 120.0


@dataclass(slots=True)
class ResolutionConfig:
    """Constants used while resolving actions inside a possession.

    Parameters
    ----------
    drive_high_contact : float, default=0.7
        Contact level of a drive that is likely to beat the defender.
    drive_low_contact : float, default=0.3
        Contact level of any other drive.
    drive_contact_threshold : float, default=0.6
        Blow-by probability above which a drive counts as high contact.
    drive_contest : float, default=0.2
        Contest level applied to drive fouls.
    default_shot_quality : float, default=0.6
        Shot quality used when the shooter has no court position.
    contest_radius : float, default=6.0
        Defender distance at which contest reaches zero.
    default_contest : float, default=0.2
        Contest used when the defender's position is unknown.
    catch_release : float, default=0.2
        Release modifier for catch-and-shoot attempts.
    pullup_release : float, default=0.1
        Release modifier for pull-up attempts.
    shot_contact : float, default=0.4
        Contact level of a jump shot.
    pass_lane_risk : float, default=0.4
        Base lane risk of a pick-and-roll pass.
    ball_movement_relief : float, default=0.3
        Fraction of lane risk removed by full ball movement.
    pressure_radius : float, default=8.0
        Defender distance at which passing pressure reaches zero.
    default_pressure : float, default=0.5
        Pressure used when the defender's position is unknown.
    post_conversion : float, default=0.6
        Chance a post-up at the rim becomes a shot.
    pnr_shot_chance : float, default=0.4
        Chance a pick-and-roll attack creates a shot.
    pnr_pullup_share : float, default=0.6
        Share of created pick-and-roll shots that are pull-ups.
    blowby_finish : float, default=0.7
        Make probability after a successful blow-by.
    drive_advance : float, default=3.0
        Feet gained toward the basket on a drive.
    ball_movement_step : float, default=0.2
        Ball-movement gain per swing or reset.
    defender_reaction_range : float, default=8.0
        Defenders farther than this from the ball step toward it.
    defender_step : float, default=1.0
        Feet a reacting defender moves per action.
    """

    drive_high_contact: float = 0.7
    drive_low_contact: float = 0.3
    drive_contact_threshold: float = 0.6
    drive_contest: float = 0.2
    default_shot_quality: float = 0.6
    contest_radius: float = 6.0
    default_contest: float = 0.2
    catch_release: float = 0.2
    pullup_release: float = 0.1
    shot_contact: float = 0.4
    pass_lane_risk: float = 0.4
    ball_movement_relief: float = 0.3
    pressure_radius: float = 8.0
    default_pressure: float = 0.5
    post_conversion: float = 0.6
    pnr_shot_chance: float = 0.4
    pnr_pullup_share: float = 0.6
    blowby_finish: float = 0.7
    drive_advance: float = 3.0
    ball_movement_step: float = 0.2
    defender_reaction_range: float = 8.0
    defender_step: float = 1.0


@dataclass(slots=True)
class MovementConfig:
    """Dribble and drive micro-action tuning.

    Parameters
    ----------
    base_success : Dict[str, Tuple[float, float]]
        ``(floor, skill_range)`` success pair per movement kind.
    dribbles : Dict[str, int]
        Dribbles consumed per movement kind.
    base_time : Dict[str, float]
        Seconds consumed per movement kind before speed scaling.
    separation : Dict[str, float]
        Feet of separation gained by a successful movement.
    close_guard_distance : float, default=3.0
        Defender distance under which the close-guard factor applies.
    close_guard_factor : float, default=0.7
        Success multiplier when closely guarded.
    tight_guard_distance : float, default=6.0
        Defender distance under which the tight-guard factor applies.
    tight_guard_factor : float, default=0.85
        Success multiplier when tightly guarded.
    lane_bonus : float, default=0.1
        Success gain per unit of open lanes.
    spacing_bonus : float, default=0.05
        Success gain per unit of spacing.
    fatigue_penalty : float, default=0.2
        Success loss per unit of fatigue fraction.
    min_success : float, default=0.1
        Lower success clamp.
    max_success : float, default=0.95
        Upper success clamp.
    turnover_per_dribble : float, default=0.02
        Turnover rate added per dribble.
    min_turnover : float, default=0.01
        Turnover rate floor before rating scaling.
    turnover_pressure : float, default=0.5
        Turnover growth per unit of pressure.
    turnover_fatigue : float, default=0.3
        Turnover growth per unit of fatigue fraction.
    pressure_distance : float, default=10.0
        Defender distance at which pressure reaches zero.
    step_distance : float, default=3.0
        Feet moved by a full-speed player per movement step.
    time_speed_relief : float, default=0.5
        Fraction of time saved by a maximum-speed player.
    """

    base_success: Dict[str, Tuple[float, float]] = field(
        default_factory=lambda: {
            "dribble": (0.85, 0.1),
            "drive": (0.65, 0.25),
            "crossover": (0.7, 0.2),
            "hesitation": (0.75, 0.15),
            "stepback": (0.6, 0.3),
            "jab": (0.8, 0.15),
            "pivot": (0.9, 0.05),
        }
    )
    dribbles: Dict[str, int] = field(
        default_factory=lambda: {
            "dribble": 1,
            "drive": 3,
            "crossover": 2,
            "hesitation": 2,
            "stepback": 2,
            "jab": 0,
            "pivot": 0,
        }
    )
    base_time: Dict[str, float] = field(
        default_factory=lambda: {
            "dribble": 0.8,
            "drive": 1.5,
            "crossover": 1.0,
            "hesitation": 1.2,
            "stepback": 1.0,
            "jab": 0.5,
            "pivot": 0.3,
        }
    )
    separation: Dict[str, float] = field(
        default_factory=lambda: {
            "dribble": 0.5,
            "drive": 2.0,
            "crossover": 1.5,
            "hesitation": 1.0,
            "stepback": 2.0,
            "jab": 0.8,
            "pivot": 0.3,
        }
    )
    close_guard_distance: float = 3.0
    close_guard_factor: float = 0.7
    tight_guard_distance: float = 6.0
    tight_guard_factor: float = 0.85
    lane_bonus: float = 0.1
    spacing_bonus: float = 0.05
    fatigue_penalty: float = 0.2
    min_success: float = 0.1
    max_success: float = 0.95
    turnover_per_dribble: float = 0.02
    min_turnover: float = 0.01
    turnover_pressure: float = 0.5
    turnover_fatigue: float = 0.3
    pressure_distance: float = 10.0
    step_distance: float = 3.0
    time_speed_relief: float = 0.5


@dataclass(slots=True)
class ReboundConfig:
    """Rebound trajectory, landing and contest tuning.

    Parameters
    ----------
    high_quality : float, default=0.8
        Shot quality above which misses come off soft.
    low_quality : float, default=0.3
        Shot quality below which misses come off hard.
    trajectory_odds : Dict[str, Tuple[str, float, str]]
        ``(likely, probability, otherwise)`` trajectory triples keyed by
        ``"high"``, ``"low"`` or a shot zone.
    carom_distance : Dict[str, float]
        Feet from the basket at which each trajectory lands.
    box_out_range : float, default=8.0
        Maximum distance between a defender and the offender being boxed out.
    contested_radius : float, default=5.0
        Radius around the landing spot used to classify a contested board.
    tip_out_weight : float, default=0.3
        Winner weight under which a contested board may be tipped out.
    tip_out_chance : float, default=0.2
        Chance that a qualifying board is tipped out.
    fallback_offense : Tuple[float, float], default=(0.4, 1.0)
        ``(positional advantage, distance)`` for offence on the fallback path.
    fallback_defense : Tuple[float, float], default=(0.6, 0.8)
        ``(positional advantage, distance)`` for defence on the fallback path.
    """

    high_quality: float = 0.8
    low_quality: float = 0.3
    trajectory_odds: Dict[str, Tuple[str, float, str]] = field(
        default_factory=lambda: {
            "high": ("soft", 0.7, "short"),
            "low": ("hard", 0.6, "long"),
            "rim": ("short", 0.6, "soft"),
            "close": ("soft", 0.5, "long"),
            "mid": ("soft", 0.5, "long"),
            "three": ("long", 0.4, "hard"),
        }
    )
    carom_distance: Dict[str, float] = field(
        default_factory=lambda: {"short": 4.0, "soft": 6.0, "hard": 9.0, "long": 12.0}
    )
    box_out_range: float = 8.0
    contested_radius: float = 5.0
    tip_out_weight: float = 0.3
    tip_out_chance: float = 0.2
    fallback_offense: Tuple[float, float] = (0.4, 1.0)
    fallback_defense: Tuple[float, float] = (0.6, 0.8)


@dataclass(slots=True)
class FormationConfig:
    """Set plays, zone layouts and press geometry in the attack-left frame.

    Parameters
    ----------
    set_plays : Dict[str, Tuple[Tuple[float, float], ...]]
        Five offensive slots per named set play.
    default_set_play : str, default="1-out-4"
        Set play used when none is requested.
    man_nudge : float, default=2.5
        Feet a man defender sits between the offender and the basket.
    zone_depth : float, default=15.0
        Baseline depth of the back line of every zone.
    zone_layouts : Dict[str, Tuple[Tuple[float, float], ...]]
        ``(depth offset, y)`` slots per zone scheme.
    zone_regions : Dict[str, Tuple[Tuple[str, float, float, float, float], ...]]
        ``(name, min_x, max_x, min_y, max_y)`` responsibilities per zone scheme.
    press_on_ball_gap : float, default=3.0
        Feet between the ball and the on-ball press defender.
    press_trap_offset : float, default=5.0
        Lateral offset of the trapping defender.
    press_deny_gap : float, default=2.0
        Feet a denying defender plays toward the basket.
    press_deny_lateral : float, default=2.0
        Alternating lateral offset of denying defenders.
    """

    set_plays: Dict[str, Tuple[Tuple[float, float], ...]] = field(
        default_factory=lambda: {
            "1-out-4": ((25.0, 25.0), (20.0, 15.0), (15.0, 35.0), (10.0, 10.0), (10.0, 40.0)),
            "4-out-1-in": ((26.0, 18.0), (26.0, 32.0), (10.0, 4.0), (10.0, 46.0), (8.0, 25.0)),
            "5-out": ((28.0, 25.0), (24.0, 10.0), (24.0, 40.0), (4.0, 3.0), (4.0, 47.0)),
            "dribble-drive": ((32.0, 25.0), (20.0, 6.0), (20.0, 44.0), (3.0, 3.0), (3.0, 47.0)),
        }
    )
    default_set_play: str = "1-out-4"
    man_nudge: float = 2.5
    zone_depth: float = 15.0
    zone_layouts: Dict[str, Tuple[Tuple[float, float], ...]] = field(
        default_factory=lambda: {
            "zone2-3": ((10.0, 15.0), (10.0, 35.0), (0.0, 20.0), (0.0, 25.0), (0.0, 30.0)),
            "zone3-2": ((15.0, 12.0), (15.0, 25.0), (15.0, 38.0), (0.0, 20.0), (0.0, 30.0)),
            "zone1-3-1": ((20.0, 25.0), (10.0, 15.0), (10.0, 25.0), (10.0, 35.0), (0.0, 25.0)),
        }
    )
    zone_regions: Dict[str, Tuple[Tuple[str, float, float, float, float], ...]] = field(
        default_factory=lambda: {
            "zone2-3": (
                ("left_wing", 20.0, 35.0, 0.0, 20.0),
                ("right_wing", 20.0, 35.0, 30.0, 50.0),
                ("left_block", 0.0, 15.0, 15.0, 25.0),
                ("center", 0.0, 15.0, 20.0, 30.0),
                ("right_block", 0.0, 15.0, 25.0, 35.0),
            ),
            "zone3-2": (
                ("left_guard", 20.0, 35.0, 0.0, 17.0),
                ("top", 20.0, 35.0, 17.0, 33.0),
                ("right_guard", 20.0, 35.0, 33.0, 50.0),
                ("left_big", 0.0, 20.0, 0.0, 25.0),
                ("right_big", 0.0, 20.0, 25.0, 50.0),
            ),
            "zone1-3-1": (
                ("point", 30.0, 50.0, 20.0, 30.0),
                ("left_wing", 15.0, 30.0, 0.0, 20.0),
                ("center", 15.0, 30.0, 20.0, 30.0),
                ("right_wing", 15.0, 30.0, 30.0, 50.0),
                ("back", 0.0, 15.0, 15.0, 35.0),
            ),
        }
    )
    press_on_ball_gap: float = 3.0
    press_trap_offset: float = 5.0
    press_deny_gap: float = 2.0
    press_deny_lateral: float = 2.0


@dataclass(slots=True)
class OfficiatingConfig:
    """Foul limits and free-throw awards.

    Parameters
    ----------
    foul_out_limit : int, default=6
        Personal fouls that disqualify a player.
    free_throws : Dict[str, int]
        Free throws awarded per foul type.
    """

    foul_out_limit: int = 6
    free_throws: Dict[str, int] = field(
        default_factory=lambda: {"shooting": 2, "shooting_three": 3, "flagrant": 2, "technical": 1}
    )


@dataclass(slots=True)
class FreeThrowConfig:
    """Coefficients of the free-throw simulation.

    Parameters
    ----------
    rating : float, default=0.8
        Weight on the free-throw rating z-score.
    consistency : float, default=0.1
        Weight on the consistency z-score.
    clutch : float, default=0.15
        Weight on the clutch z-score in clutch time.
    noise : float, default=0.2
        Per-attempt noise amplitude scaled by ``1 - consistency / 100``.
    """

    rating: float = 0.8
    consistency: float = 0.1
    clutch: float = 0.15
    noise: float = 0.2


@dataclass(slots=True)
class AssistConfig:
    """Assist attribution parameters.

    Parameters
    ----------
    base : float, default=0.5
        Intercept of the assist logistic.
    passing : float, default=0.4
        Weight on the passer's pass rating z-score.
    dribble_penalty : float, default=-0.3
        Weight per dribble taken by the scorer after the catch.
    dribble_limit : int, default=2
        Dribbles after the catch beyond which no assist is possible.
    """

    base: float = 0.5
    passing: float = 0.4
    dribble_penalty: float = -0.3
    dribble_limit: int = 2


@dataclass(slots=True)
class TendencyConfig:
    """Dirichlet and Beta parameters for tendency distributions.

    Parameters
    ----------
    dirichlet_base : float, default=0.1
        Minimum alpha so that no outcome has zero mass.
    beta_multiplier : float, default=10.0
        Pseudo-count scale applied to tendency weights.
    decay_rate : float, default=0.999
        Default decay applied before each observation.
    """

    dirichlet_base: float = 0.1
    beta_multiplier: float = 10.0
    decay_rate: float = 0.999


@dataclass(slots=True)
class EngineConfig:
    """Top-level container for all engine tuning structures.

    Parameters
    ----------
    court : CourtConfig, default=CourtConfig()
        Court geometry.
    shot_quality : ShotQualityConfig, default=ShotQualityConfig()
        Shot-quality baselines.
    spacing : SpacingConfig, default=SpacingConfig()
        Spacing and rebounding position references.
    rating : RatingConfig, default=RatingConfig()
        Rating scale.
    shot_model : ShotModelConfig, default=ShotModelConfig()
        Shot-make coefficients.
    pass_model : PassModelConfig, default=PassModelConfig()
        Pass-completion coefficients.
    drive_model : DriveModelConfig, default=DriveModelConfig()
        Drive blow-by coefficients.
    rebound_model : ReboundModelConfig, default=ReboundModelConfig()
        Rebound weight coefficients.
    foul_model : FoulModelConfig, default=FoulModelConfig()
        Shooting-foul coefficients.
    policy : PolicyConfig, default=PolicyConfig()
        Action-selection parameters.
    epv : EPVConfig, default=EPVConfig()
        Expected point value tables.
    fatigue : FatigueConfig, default=FatigueConfig()
        Fatigue accrual.
    clock : ClockConfig, default=ClockConfig()
        Clock handling.
    resolution : ResolutionConfig, default=ResolutionConfig()
        Action resolution constants.
    movement : MovementConfig, default=MovementConfig()
        Movement resolver tuning.
    rebound : ReboundConfig, default=ReboundConfig()
        Rebound resolver tuning.
    formation : FormationConfig, default=FormationConfig()
        Formation layouts.
    officiating : OfficiatingConfig, default=OfficiatingConfig()
        Foul and free-throw rules.
    free_throw : FreeThrowConfig, default=FreeThrowConfig()
        Free-throw simulation.
    assist : AssistConfig, default=AssistConfig()
        Assist attribution.
    tendency : TendencyConfig, default=TendencyConfig()
        Tendency distribution parameters.
    """

    court: CourtConfig = field(default_factory=CourtConfig)
    shot_quality: ShotQualityConfig = field(default_factory=ShotQualityConfig)
    spacing: SpacingConfig = field(default_factory=SpacingConfig)
    rating: RatingConfig = field(default_factory=RatingConfig)
    shot_model: ShotModelConfig = field(default_factory=ShotModelConfig)
    pass_model: PassModelConfig = field(default_factory=PassModelConfig)
    drive_model: DriveModelConfig = field(default_factory=DriveModelConfig)
    rebound_model: ReboundModelConfig = field(default_factory=ReboundModelConfig)
    foul_model: FoulModelConfig = field(default_factory=FoulModelConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    epv: EPVConfig = field(default_factory=EPVConfig)
    fatigue: FatigueConfig = field(default_factory=FatigueConfig)
    clock: ClockConfig = field(default_factory=ClockConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    movement: MovementConfig = field(default_factory=MovementConfig)
    rebound: ReboundConfig = field(default_factory=ReboundConfig)
    formation: FormationConfig = field(default_factory=FormationConfig)
    officiating: OfficiatingConfig = field(default_factory=OfficiatingConfig)
    free_throw: FreeThrowConfig = field(default_factory=FreeThrowConfig)
    assist: AssistConfig = field(default_factory=AssistConfig)
    tendency: TendencyConfig = field(default_factory=TendencyConfig)


ENGINE_CONFIG = EngineConfig()
"""Singleton-style access to the engine configuration."""
