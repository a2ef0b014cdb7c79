"""Window, drawing and main loop for the block game."""

from __future__ import annotations

import argparse
import math
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from blockheat.font import (
    ADVANCE,
    FIRST_CHAR,
    GLYPH_HEIGHT,
    GLYPH_WIDTH,
    LAST_CHAR,
    BitmapFont,
    default_font,
    number_text,
)
from blockheat.game import (
    DEAD_LIFE,
    STAGE_BOTTOM,
    STAGE_LEFT,
    STAGE_RIGHT,
    STAGE_TOP,
    Game,
    GameMode,
    HitText,
)
from blockheat.stage import StageFormatError

WINDOW_SIZE = 800
FPS = 30
FIELD_OF_VIEW = 120.0

EYE = (9.5, -5.0, 10.0)
TARGET = (9.5, 0.0, 0.0)

Color = Tuple[int, int, int]
_WHITE: Color = (255, 255, 255)
_BLACK: Color = (0, 0, 0)
_LINE_HEIGHT = 16


def _rgb(color: Sequence[float]) -> Color:
    def channel(value: float) -> int:
        return round(255 * min(max(value, 0.0), 1.0))

    return channel(color[0]), channel(color[1]), channel(color[2])


def _normalize(v: Tuple[float, float, float]) -> Tuple[float, float, float]:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    return v[0] / length, v[1] / length, v[2] / length


def _cross(a, b) -> Tuple[float, float, float]:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _dot(a, b) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


@dataclass
class Renderer:
    """Draws a game onto a surface through a perspective camera.

    The camera looks at the middle of the playing field; while a stage zooms
    in or out it is pulled back by ``demo_time`` units.
    """

    width: int = WINDOW_SIZE
    height: int = WINDOW_SIZE
    demo_time: int = 0
    font: BitmapFont = field(default_factory=default_font)
    _glyph_cache: Dict[Tuple[str, Color], "pygame.Surface"] = field(
        default_factory=dict, repr=False
    )

    def _project(self, x: float, y: float, z: float = 0.0) -> Tuple[float, float]:
        eye = (EYE[0], EYE[1], EYE[2] + self.demo_time)
        forward = _normalize((TARGET[0] - eye[0], TARGET[1] - eye[1], TARGET[2] - eye[2]))
        side = _normalize(_cross(forward, (0.0, 1.0, 0.0)))
        up = _cross(side, forward)
        rel = (x - eye[0], y - eye[1], z - eye[2])
        depth = max(_dot(forward, rel), 1e-6)
        focal = 1.0 / math.tan(math.radians(FIELD_OF_VIEW / 2.0))
        aspect = self.width / self.height
        ndc_x = focal / aspect * _dot(side, rel) / depth
        ndc_y = focal * _dot(up, rel) / depth
        return (ndc_x + 1.0) * self.width / 2.0, (1.0 - ndc_y) * self.height / 2.0

    def world_to_screen(self, x: float, y: float) -> Tuple[int, int]:
        """Return the window pixel at which the field point ``(x, y)`` appears."""
        sx, sy = self._project(x, y)
        return round(sx), round(sy)

    # -- primitives ---------------------------------------------------------

    def _glyph(self, char: str, color: Color) -> "pygame.Surface":
        key = (char, color)
        cached = self._glyph_cache.get(key)
        if cached is not None:
            return cached
        glyph = pygame.Surface((GLYPH_WIDTH, GLYPH_HEIGHT))
        glyph.fill(_BLACK)
        glyph.set_colorkey(_BLACK)
        for from_bottom, value in enumerate(self.font.glyph(char)):
            for bit in range(GLYPH_WIDTH):
                if value & (0x80 >> bit):
                    glyph.set_at((bit, GLYPH_HEIGHT - 1 - from_bottom), color)
        self._glyph_cache[key] = glyph
        return glyph

    def _text(self, surface, text: str, pos: Tuple[int, int], color: Color = _WHITE) -> None:
        left, top = pos
        drawable = [c for c in text if FIRST_CHAR <= ord(c) <= LAST_CHAR]
        for position, char in enumerate(drawable):
            surface.blit(self._glyph(char, color), (left + position * ADVANCE, top))

    def _world_text(self, surface, text: str, x: float, y: float) -> None:
        self._text(surface, text, self.world_to_screen(x, y))

    def _quad(self, x: float, y: float, w: float, h: float) -> List[Tuple[int, int]]:
        hw, hh = w / 2.0, h / 2.0
        return [
            self.world_to_screen(x - hw, y - hh),
            self.world_to_screen(x + hw, y - hh),
            self.world_to_screen(x + hw, y + hh),
            self.world_to_screen(x - hw, y + hh),
        ]

    def _box(self, surface, color: Color, x: float, y: float, w: float, h: float,
             solid: bool = True) -> None:
        pygame.draw.polygon(surface, color, self._quad(x, y, w, h), 0 if solid else 1)

    def _radius(self, x: float, y: float, r: float) -> int:
        cx, _ = self.world_to_screen(x, y)
        ex, _ = self.world_to_screen(x + r, y)
        return max(2, abs(ex - cx))

    # -- scene --------------------------------------------------------------

    def _block(self, surface, x: float, y: float, kind: int, roll: float) -> None:
        color = _rgb((x / 10.0, y / 10.0, 1.0))
        angle = math.radians(roll)
        if kind <= 10:
            self._box(surface, color, x, y, 1.8, 0.8)
        elif kind == 11:
            width = max(abs(math.cos(angle)) * 1.3, 0.1)
            self._box(surface, color, x, y, width, 1.3)
        elif kind == 12:
            points = [
                self.world_to_screen(
                    x + 0.6 * math.cos(angle + math.pi / 2 + k * 2 * math.pi / 3),
                    y + 0.6 * math.sin(angle + math.pi / 2 + k * 2 * math.pi / 3),
                )
                for k in range(3)
            ]
            pygame.draw.polygon(surface, color, points)
        elif kind == 13:
            pygame.draw.circle(surface, color, self.world_to_screen(x, y),
                               self._radius(x, y, 1.0))
        elif kind <= 20:
            tilt = math.radians(51.4 * (kind - 13) + roll)
            height = max(abs(math.cos(tilt)) * 0.8, 0.1)
            self._box(surface, color, x, y, 1.8, height, solid=False)
            if self.demo_time == 0:
                self._world_text(surface, number_text((kind - 13) * 10), x - 0.8, y + 0.3)

    def _paddle(self, surface, game: Game) -> None:
        ship = game.ship
        self._box(surface, _rgb(ship.color), ship.x, ship.y, ship.hit_width, ship.hit_height)
        if game.mode is GameMode.DODGE:
            self._box(surface, _WHITE, STAGE_RIGHT / 2.0, STAGE_BOTTOM - 1.5,
                      STAGE_RIGHT + 3.0, 1.0)

    def _walls(self, surface) -> None:
        self._box(surface, _WHITE, STAGE_LEFT - 1.0, 0.0, 1.0, 30.0)
        self._box(surface, _WHITE, STAGE_RIGHT + 1.0, 0.0, 1.0, 30.0)
        self._box(surface, _WHITE, STAGE_RIGHT / 2.0, STAGE_TOP, STAGE_RIGHT + 3.0, 1.0)

    def _balls(self, surface, game: Game) -> None:
        for ball in game.balls:
            if ball.active:
                pygame.draw.circle(surface, _rgb(ball.color),
                                   self.world_to_screen(ball.x, ball.y),
                                   self._radius(ball.x, ball.y, 0.5))

    def _texts(self, surface, game: Game) -> None:
        ship = game.ship
        self._world_text(surface, number_text(ship.balls), 0.0, 0.0)
        self._text(surface, f"Score {ship.score:7d}", (20, 20))
        self._text(surface, f"High Score {ship.highscore:7d}", (20, 20 + _LINE_HEIGHT))
        self._text(surface, f"Life {ship.life:2d}", (400, 20))

        if game.demo_time == 0:
            offset = 0.0
            collision_row = 0
            for ball in game.balls:
                if ball.hit_text is HitText.HIT:
                    hx, hy = ball.hit_text_pos
                    self._world_text(surface, f"{ball.hit_count:6d} HIT", hx - 2.0, hy - 0.5)
                elif ball.hit_text is HitText.POINTS and ball.point:
                    offset += 0.5
                    self._world_text(surface, f"{ball.point:6d} Pts.",
                                     ship.x - 1.0, ship.y + 0.75 + offset)
                if ball.collision:
                    top = 20 + _LINE_HEIGHT * (3 + collision_row)
                    self._text(surface, f"Collision! {ball.point:6d} Pts.", (20, top))
                    collision_row += 1
            self._text(surface, f"Block {game.blocks:4d}", (600, 20))
            self._text(surface, f"Dead Count {ship.dead_count}", (600, 20 + _LINE_HEIGHT))

        if game.blocks == 0 and game.stage_index < len(game.stage_names):
            name = game.stage_names[game.stage_index]
            self._text(surface, f'"{name}" Crear!', (self.width // 2 - 100, self.height // 2))

    def draw(self, surface, game: Game) -> None:
        """Draw the whole frame of ``game`` onto ``surface``."""
        self.demo_time = game.demo_time
        surface.fill(_BLACK)
        for row, (kinds, rolls) in enumerate(zip(game.stage.grid, game.block_roll)):
            for col, (kind, roll) in enumerate(zip(kinds, rolls)):
                if kind > 0:
                    self._block(surface, col * 2.0 + 1.0, float(row), kind, roll)
        if game.ship.life > DEAD_LIFE:
            self._paddle(surface, game)
        self._balls(surface, game)
        self._walls(surface)
        self._texts(surface, game)


def _ask_mode(given: Optional[str]) -> GameMode:
    text = given
    while True:
        if text is not None:
            try:
                value = int(text)
            except ValueError:
                value = -1
            if value in (0, 1):
                return GameMode(value)
        text = input("Select Game Mode\n0.Normal Game\n1.Tameyoke Game\n").strip()


def _run(game: Game) -> int:
    renderer = Renderer()
    pygame.init()
    try:
        screen = pygame.display.set_mode((renderer.width, renderer.height))
        pygame.display.set_caption("Block")
        clock = pygame.time.Clock()
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return 0
                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if game.finished:
                        game.finish()
                        return 0
                    game.click()
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    game.left_down = False
            game.step(*pygame.mouse.get_pos())
            if game.finished:
                game.finish()
                return 0
            renderer.draw(screen, game)
            pygame.display.flip()
            clock.tick(FPS)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Choose a game mode, load the stage data and play."""
    parser = argparse.ArgumentParser(prog="blockheat", description="Play the block game.")
    parser.add_argument("mode", nargs="?", help="0 for the normal game, 1 for the dodge game")
    parser.add_argument("-d", "--directory", default=".",
                        help="directory holding the stage and score files")
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    mode = _ask_mode(args.mode)
    try:
        game = Game.from_directory(mode, args.directory)
    except (OSError, StageFormatError) as exc:
        print(f"cannot load game data: {exc}", file=sys.stderr)
        return 1
    return _run(game)


if __name__ == "__main__":
    sys.exit(main())