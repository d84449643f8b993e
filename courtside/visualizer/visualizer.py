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
"""Optional pygame court view that steps through a game possession by possession."""
import math
from typing import List, Optional, Tuple

try:
    import pygame
except ImportError:  # pragma: no cover
    pygame = None

from courtside.engine.config import ENGINE_CONFIG
from courtside.engine.game import GameSimulator
from courtside.engine.spatial import Position


def _court_to_screen(pos: Position, rect: Tuple[int, int, int, int]) -> Tuple[int, int]:
    """Map a court position in feet to screen pixels.

    Parameters
    ----------
    pos : Position
        Court coordinates with the origin at the top-left corner.
    rect : Tuple[int, int, int, int]
        ``(left, top, width, height)`` of the on-screen court.

    Returns
    -------
    Tuple[int, int]
        Pixel coordinates inside ``rect``.
    """
    court = ENGINE_CONFIG.court
    left, top, width, height = rect
    sx = int(pos.x / court.length * width) + left
    sy = int(pos.y / court.width * height) + top
    return sx, sy


def start_visualizer(
    simulator: GameSimulator,
    screen_size: Tuple[int, int] = (940, 620),
    fps: int = 30,
) -> None:
    """Open a window showing the court and step possessions on key press.

    Space or the right arrow plays the next possession, ``a`` plays the rest
    of the game and ``q`` closes the window. If ``pygame`` is not installed
    the function returns immediately.

    Parameters
    ----------
    simulator : GameSimulator
        Game to display and advance.
    screen_size : Tuple[int, int]
        Initial window size in pixels.
    fps : int
        Redraw rate.
    """
    if pygame is None:
        return

    pygame.init()
    screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
    pygame.display.set_caption("Courtside")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 18)

    FLOOR = (214, 170, 110)
    LINE = (250, 250, 250)
    HOME = (200, 30, 30)
    AWAY = (30, 90, 200)
    BALL = (240, 120, 20)
    TEXT = (20, 20, 20)
    PANEL = (235, 235, 235)

    court = ENGINE_CONFIG.court
    recent: List[str] = []
    running = True

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen_size = (event.w, event.h)
                screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_q:
                    running = False
                elif event.key in (pygame.K_SPACE, pygame.K_RIGHT):
                    recent.extend(play.description for play in simulator.step())
                elif event.key == pygame.K_a:
                    while not simulator.finished:
                        simulator.step()
                    recent.append("Final")

        screen.fill(PANEL)
        panel_height = 140
        margin = 20
        avail_w = screen_size[0] - 2 * margin
        avail_h = screen_size[1] - panel_height - 2 * margin
        scale = min(avail_w / court.length, avail_h / court.width)
        rect = (margin, margin, int(court.length * scale), int(court.width * scale))

        pygame.draw.rect(screen, FLOOR, rect)
        pygame.draw.rect(screen, LINE, rect, 3)
        mid_top = _court_to_screen(Position(court.length / 2, 0), rect)
        mid_bottom = _court_to_screen(Position(court.length / 2, court.width), rect)
        pygame.draw.line(screen, LINE, mid_top, mid_bottom, 2)
        pygame.draw.circle(
            screen, LINE, _court_to_screen(Position(court.length / 2, court.width / 2), rect), int(6 * scale), 2
        )

        for basket, direction in ((court.home_basket, 1), (court.away_basket, -1)):
            hoop = Position(*basket)
            edge = 0.0 if direction == 1 else court.length
            lane_x = min(edge, edge + direction * court.paint_depth)
            lane_top = _court_to_screen(Position(lane_x, (court.width - court.paint_width) / 2), rect)
            pygame.draw.rect(
                screen, LINE, (*lane_top, int(court.paint_depth * scale), int(court.paint_width * scale)), 2
            )
            arc_points = []
            for step in range(-60, 61, 4):
                angle = math.radians(step)
                x = hoop.x + direction * court.three_point_radius * math.cos(angle)
                y = hoop.y + court.three_point_radius * math.sin(angle)
                arc_points.append(_court_to_screen(Position(x, y), rect))
            pygame.draw.lines(screen, LINE, False, arc_points, 2)
            pygame.draw.circle(screen, BALL, _court_to_screen(hoop, rect), max(3, int(0.75 * scale)), 2)

        state = simulator.state
        for formation in (state.offense_formation, state.defense_formation):
            if formation is None:
                continue
            for player_id, pos in formation.positions.items():
                color = HOME if simulator.home.has_player(player_id) else AWAY
                sx, sy = _court_to_screen(pos, rect)
                if player_id == state.ball_handler and formation is state.offense_formation:
                    pygame.draw.circle(screen, (255, 215, 0), (sx, sy), 13)
                pygame.draw.circle(screen, color, (sx, sy), 10)
                label = font.render(player_id.split("-")[-1], True, (255, 255, 255))
                screen.blit(label, (sx - label.get_width() // 2, sy - label.get_height() // 2))
        if state.offense_formation is not None:
            pygame.draw.circle(screen, BALL, _court_to_screen(state.offense_formation.ball_position, rect), 5)

        home_score, away_score = simulator.score()
        minutes, seconds = divmod(int(state.clock.seconds_in_quarter), 60)
        header = (
            f"{simulator.home.name} {home_score} - {away_score} {simulator.away.name}   "
            f"Q{state.clock.quarter} {minutes:02d}:{seconds:02d}   Shot {state.shot_clock:.0f}"
        )
        base_y = screen_size[1] - panel_height
        screen.blit(font.render(header, True, TEXT), (margin, base_y))
        line_height = font.get_linesize()
        for index, entry in enumerate(recent[-6:]):
            screen.blit(font.render(entry, True, TEXT), (margin, base_y + (index + 1) * line_height + 4))

        pygame.display.flip()
        clock.tick(fps)

    pygame.quit()
