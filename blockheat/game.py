"""Game state and rules: paddle, balls, block collisions, scoring and stage flow."""

from __future__ import annotations

import enum
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from blockheat.stage import (
    GRID_SIZE,
    ROLL_SPEED_COUNT,
    ROLL_SPEED_FILE,
    STAGE_LIST_FILE,
    Stage,
    highscore_path,
    load_highscore,
    load_roll_speeds,
    load_stage_list,
    save_highscore,
)

PathLike = Union[str, "os.PathLike[str]"]

BALL_COUNT = 10
START_LIFE = 10
START_BALLS = 10
DEMO_TIME = 200

STAGE_LEFT = 0.0
STAGE_RIGHT = 20.0
STAGE_TOP = 15.0
STAGE_BOTTOM = -10.0

WALL_MIN_X = 0.5
WALL_MAX_X = 19.5
CEILING_Y = 14.0
FLOOR_Y = -17.0
FALL_ACCEL = 0.02
GRAVITY_CONSTANT = 0.1
RING_BALLS = 9
DEAD_LIFE = -10
RESET_LIFE = -20
MOUSE_SCALE = 40.0
MOUSE_OFFSET_Y = 200.0


class GameMode(enum.IntEnum):
    """Normal paddle game, or the dodge game with a floor and a small ship."""

    NORMAL = 0
    DODGE = 1

    @property
    def max_speed(self) -> float:
        """Largest speed a ball may have along either axis."""
        return _MAX_SPEED[self]


_MAX_SPEED = {GameMode.NORMAL: 0.9, GameMode.DODGE: 0.5}


class HitText(enum.IntEnum):
    """What the floating text beside a ball shows."""

    NONE = 0
    HIT = 1
    POINTS = 2


def _ball_color(index: int) -> Tuple[float, float, float, float]:
    return (0.1 * index, math.sin(0.314 * index), (10 - index) * 0.1, 1.0)


@dataclass
class Ball:
    """One ball with its motion, scoring counters and text markers."""

    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    ax: float = 0.0
    ay: float = 0.0
    color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    active: bool = False
    hit_count: int = 0
    point: int = 0
    time: int = 0
    contact: List[bool] = field(default_factory=lambda: [False] * BALL_COUNT)
    hit_text: HitText = HitText.NONE
    hit_text_pos: Tuple[float, float] = (0.0, 0.0)
    collision: bool = False
    collision_count: int = 0
    collision_pos: Tuple[float, float] = (0.0, 0.0)

    def clamp_speed(self, limit: float) -> None:
        """Limit both speed components to ``[-limit, limit]``."""
        self.vx = min(max(self.vx, -limit), limit)
        self.vy = min(max(self.vy, -limit), limit)


@dataclass
class Ship:
    """The player's paddle, lives, spare balls and score."""

    x: float = 10.0
    y: float = -10.0
    life: int = START_LIFE
    balls: int = START_BALLS
    hit_width: float = 5.0
    hit_width_options: Tuple[float, float] = (5.0, 1.0)
    hit_height: float = 1.0
    hit_depth: float = 0.5
    color: Tuple[float, float, float, float] = (0.7, 1.0, 0.7, 1.0)
    score: int = 0
    highscore: int = 0
    dead_count: int = 0
    new_record: bool = False


def _empty_rolls() -> List[List[float]]:
    return [[0.0] * GRID_SIZE for _ in range(GRID_SIZE)]


@dataclass
class Game:
    """The whole game: stages in order, the ship, ten balls and the demo zoom.

    ``demo_time`` counts down from 200 while a stage zooms in, and back up
    after it is cleared; play happens only while it is 0.
    """

    mode: GameMode = GameMode.NORMAL
    stage_names: List[str] = field(default_factory=list)
    roll_speeds: Tuple[float, ...] = (0.0,) * ROLL_SPEED_COUNT
    stage_dir: PathLike = "."
    highscore_file: Optional[PathLike] = None
    ship: Ship = field(default_factory=Ship)
    balls: List[Ball] = field(default_factory=lambda: [Ball() for _ in range(BALL_COUNT)])
    stage: Stage = field(default_factory=Stage)
    block_roll: List[List[float]] = field(default_factory=_empty_rolls)
    blocks: int = 0
    stage_index: int = 0
    demo_time: int = DEMO_TIME
    left_down: bool = False

    def __post_init__(self) -> None:
        self.mode = GameMode(self.mode)
        self.stage_names = list(self.stage_names)
        self.roll_speeds = tuple(self.roll_speeds)
        self.reset_character()
        self.ship.hit_width = self.ship.hit_width_options[self.mode]
        self.start_stage()

    @classmethod
    def from_directory(cls, mode: int, directory: PathLike = ".") -> "Game":
        """Build a game from the stage list, roll speeds and high score in ``directory``."""
        base = Path(directory)
        game_mode = GameMode(mode)
        score_file = base / highscore_path(game_mode)
        game = cls(
            mode=game_mode,
            stage_names=load_stage_list(base / STAGE_LIST_FILE),
            roll_speeds=load_roll_speeds(base / ROLL_SPEED_FILE),
            stage_dir=base,
            highscore_file=score_file,
        )
        game.ship.highscore = load_highscore(score_file)
        return game

    @property
    def max_speed(self) -> float:
        return self.mode.max_speed

    @property
    def finished(self) -> bool:
        """True once the last stage is cleared and no stage is left."""
        return self.blocks == 0 and self.stage_index == len(self.stage_names)

    def finish(self) -> None:
        """Store the high score when the game ends on a new record."""
        if self.ship.new_record and self.ship.dead_count:
            self._save_highscore()

    def _save_highscore(self) -> None:
        if self.highscore_file is not None:
            save_highscore(self.highscore_file, self.ship.highscore)

    def reset_character(self) -> None:
        """Put the ship, the balls and the demo zoom back to their start state."""
        ship = self.ship
        ship.x = 10.0
        ship.y = -10.0
        ship.life = START_LIFE
        ship.balls = START_BALLS
        ship.hit_width_options = (5.0, 1.0)
        ship.hit_height = 1.0
        ship.hit_depth = 0.5
        ship.color = (0.7, 1.0, 0.7, 1.0)
        for index, ball in enumerate(self.balls):
            ball.color = _ball_color(index)
            ball.active = False
            ball.hit_text = HitText.NONE
            ball.collision = False
            ball.contact = [False] * BALL_COUNT
        self.demo_time = DEMO_TIME

    def start_stage(self) -> None:
        """Load the current stage file; a missing file leaves no blocks to clear."""
        self.blocks = 0
        self.stage.gravity = 0
        self.stage.enemy = 0
        if not 0 <= self.stage_index < len(self.stage_names):
            return
        try:
            stage = Stage.load(Path(self.stage_dir) / self.stage_names[self.stage_index])
        except OSError:
            return
        self.stage = stage
        self.block_roll = _empty_rolls()
        self.blocks = stage.count_blocks()

    def shoot_ball(self, position: Sequence[float], speed: Sequence[float]) -> bool:
        """Launch the first idle ball; return whether one was free."""
        for ball in self.balls:
            if not ball.active:
                ball.contact = [True] * BALL_COUNT
                ball.time = 0
                ball.active = True
                ball.x, ball.y = float(position[0]), float(position[1])
                ball.vx, ball.vy = float(speed[0]), float(speed[1])
                return True
        return False

    def click(self) -> None:
        """Handle a mouse press: shoot a ball in play, speed up the demo otherwise."""
        ship = self.ship
        self.left_down = True
        if self.blocks and self.demo_time == 0:
            blocked = any(
                (ship.x - ball.x) ** 2 + (ship.y + 1.0 - ball.y) ** 2 <= 1.0
                for ball in self.balls
                if ball.active
            )
            if ship.balls > 0 and not blocked:
                ship.balls -= 1
                limit = self.max_speed
                self.shoot_ball((ship.x, ship.y + 1.0), (limit, limit))

    # -- block collisions -------------------------------------------------

    def _cell(self, col: int, row: int) -> int:
        if 0 <= col < GRID_SIZE and 0 <= row < GRID_SIZE:
            return self.stage.grid[row][col]
        return 0

    def _delete_block(self, col: int, row: int) -> None:
        self.blocks -= 1
        self.stage.grid[row][col] = 0

    def _score_hit(self, index: int, points: int) -> None:
        ball = self.balls[index]
        ball.hit_count += 1
        ball.point = (ball.hit_count + index) * points
        self.ship.score += ball.point
        ball.hit_text = HitText.HIT
        ball.hit_text_pos = (ball.x, ball.y)

    @staticmethod
    def _bounces(kind: int) -> bool:
        return kind <= 11 or 14 <= kind <= 20

    def _damage(self, index: int, col: int, row: int, kind: int) -> None:
        grid = self.stage.grid
        if kind <= 10:
            grid[row][col] -= index // 2 + 1
            if grid[row][col] <= 0:
                self._delete_block(col, row)
            self._score_hit(index, 10)
        elif 14 <= kind <= 20:
            self._score_hit(index, (kind - 13) * 10)
            grid[row][col] += 1
            if grid[row][col] == 21:
                grid[row][col] = 17

    def _gain_life(self, launched: bool) -> None:
        ship = self.ship
        ship.life += int(launched)
        ship.life = min(ship.life, START_LIFE + ship.balls)

    def _release(self, index: int, col: int, row: int, kind: int) -> None:
        if kind not in (12, 13):
            return
        ball = self.balls[index]
        if self.ship.life > 0:
            if kind == 12:
                self._gain_life(self.shoot_ball((ball.x, ball.y), (ball.vx, ball.vy)))
            else:
                for step in range(RING_BALLS):
                    angle = step * 6.28 / RING_BALLS
                    self._gain_life(
                        self.shoot_ball((ball.x, ball.y), (math.cos(angle), math.sin(angle)))
                    )
        self._delete_block(col, row)
        self._score_hit(index, 10)

    def _strike(self, index: int, col: int, row: int, kind: int) -> None:
        if self._bounces(kind):
            self._damage(index, col, row, kind)
        else:
            self._release(index, col, row, kind)

    def block_hit(self, nx: float, ny: float, bx: float, by: float, index: int) -> None:
        """Resolve ball ``index`` moving from ``(bx, by)`` to ``(nx, ny)`` against blocks."""
        col, row = int(nx / 2.0), int(ny)
        prev_col, prev_row = int(bx / 2.0), int(by)
        if not (0 <= col < GRID_SIZE and 0 <= row < GRID_SIZE):
            return
        ball = self.balls[index]
        vx, vy = ball.vx, ball.vy
        if ball.hit_text is HitText.POINTS:
            ball.hit_count = 0

        kind = self.stage.grid[row][col]
        if prev_row != row and prev_col != col and kind > 0:
            if self._bounces(kind):
                self._diagonal_bounce(ball, col, row, prev_col, prev_row, nx, ny, bx, by, vx, vy)
            self._strike(index, col, row, kind)
        else:
            kind_y = self._cell(prev_col, row)
            if prev_row != row and kind_y > 0 and 0 <= prev_col < GRID_SIZE:
                if self._bounces(kind_y):
                    ball.vy = -vy
                self._strike(index, prev_col, row, kind_y)
                ball.y = by
            kind_x = self._cell(col, prev_row)
            if prev_col != col and kind_x > 0 and 0 <= prev_row < GRID_SIZE:
                if self._bounces(kind_x):
                    ball.vx = -vx
                    ball.hit_count += 1
                self._strike(index, col, prev_row, kind_x)
                ball.x = bx
        ball.clamp_speed(self.max_speed)

    def _diagonal_bounce(self, ball: Ball, col: int, row: int, prev_col: int,
                         prev_row: int, nx: float, ny: float, bx: float, by: float,
                         vx: float, vy: float) -> None:
        def around(dc: int, dr: int) -> int:
            c, r = col + dc, row + dr
            if 0 <= c < GRID_SIZE and 0 <= r < GRID_SIZE:
                return self.stage.grid[r][c]
            if not 0 <= c < GRID_SIZE:
                return 11
            return 0

        below, above = around(0, -1), around(0, 1)
        left, right = around(-1, 0), around(1, 0)
        from_right, from_left = prev_col > col, prev_col < col
        from_below, from_above = prev_row < row, prev_row > row

        corner = (
            (below > 0 and right > 0 and from_right and from_below)
            or (above > 0 and left > 0 and from_left and from_above)
            or (above > 0 and right > 0 and from_right and from_above)
            or (below > 0 and left > 0 and from_left and from_below)
        )
        swap = (
            (below == 0 and right == 0 and from_right and from_below)
            or (above == 0 and left == 0 and from_left and from_above)
        )
        swap_negated = (
            (above == 0 and right == 0 and from_right and from_above)
            or (below == 0 and left == 0 and from_left and from_below)
        )
        side = ((left > 0 and from_left) or (right > 0 and from_right)) and (
            below == 0 or above == 0
        )
        end = ((below > 0 and from_below) or (above > 0 and from_above)) and (
            left == 0 or right == 0
        )

        if corner:
            ball.vx, ball.vy = -vx, -vy
            ball.x, ball.y = bx, by
        elif swap:
            ball.vx, ball.vy = vy, vx
            ball.x, ball.y = bx, by
        elif swap_negated:
            ball.vx, ball.vy = -vy, -vx
            ball.x, ball.y = bx, by
        elif side:
            ball.vy = -vy
            ball.y = by
        elif end:
            ball.vx = -vx
            ball.x = bx

    # -- ball physics -----------------------------------------------------

    def apply_gravity(self) -> None:
        """Compute the mutual pull between active balls into their accelerations."""
        for ball in self.balls:
            ball.ax = 0.0
            ball.ay = 0.0
        for i, first in enumerate(self.balls):
            for second in self.balls[i + 1:]:
                if not (first.active and second.active):
                    continue
                dx = first.x - second.x
                dy = first.y - second.y
                rr = dx * dx + dy * dy
                if rr > 0.5:
                    g = GRAVITY_CONSTANT / (rr + 1.0)
                    gx = g * ((dx < 0) - (dx > 0))
                    gy = g * ((dy < 0) - (dy > 0))
                    first.ax += gx
                    first.ay += gy
                    second.ax -= gx
                    second.ay -= gy

    def ball_collisions(self) -> None:
        """Bounce touching balls off each other and score the collision."""
        limit = self.max_speed
        for i, first in enumerate(self.balls):
            for j in range(i + 1, BALL_COUNT):
                second = self.balls[j]
                dx = first.x - second.x
                dy = first.y - second.y
                rr = dx * dx + dy * dy
                if (rr <= 1.0 and rr != 0 and not first.contact[j]
                        and first.active and second.active):
                    for ball in (first, second):
                        ball.collision = True
                        ball.collision_pos = (ball.x, ball.y)
                        ball.collision_count += 5
                    first.point = (first.collision_count + second.collision_count) * (i + 1)
                    self.ship.score += first.point
                    first.contact[j] = True

                    r = math.sqrt(rr)
                    si, co = dy / r, dx / r
                    p1, l1 = _split(first, si, co)
                    p2, l2 = _split(second, si, co)
                    first.vx, first.vy = l1[0] + p2[0], l1[1] + p2[1]
                    second.vx, second.vy = l2[0] + p1[0], l2[1] + p1[1]
                    first.clamp_speed(limit)
                elif rr > 1.0:
                    first.contact[j] = False

    def move_balls(self) -> None:
        """Advance every active ball by one frame."""
        ship = self.ship
        normal = self.mode is GameMode.NORMAL
        dodge = self.mode is GameMode.DODGE
        if ship.life > 0:
            self.ball_collisions()
            self.apply_gravity()

        for index, ball in enumerate(self.balls):
            if not ball.active:
                continue
            ball.time += 1
            if ball.time == 500:
                ball.vx /= 2.0
                ball.vy *= 2.0
            elif ball.time == 1000:
                ball.vx *= 2.0
                ball.vy /= 2.0
                ball.time = 0
            prev_x, prev_y = ball.x, ball.y
            if self.stage.gravity != 0:
                ball.vx += ball.ax * self.stage.gravity
                ball.vy += ball.ay * self.stage.gravity
            if normal and (ship.life <= DEAD_LIFE or ship.life > 0):
                ball.vy -= FALL_ACCEL

            x = ball.x + ball.vx
            if x < WALL_MIN_X or x > WALL_MAX_X:
                ball.vx = -ball.vx
                x = ball.x
            else:
                ball.x = x

            y = ball.y + ball.vy
            dx = x - ship.x
            if y > CEILING_Y:
                ball.vy = -ball.vy
                y = ball.y
            elif (normal and ship.life > 0 and abs(dx) < ship.hit_width / 1.7
                  and ship.y - 2.0 < y < ship.y + 1.0):
                ball.vy = 1.0
                ball.vx = 2.0 * dx / ship.hit_width
                ball.y = ship.y + 1.0
                ball.point = ball.hit_count * ball.hit_count * (10 + index)
                ship.score += ball.point
                self._paid(ball)
            elif dodge and ship.life > 0 and y < STAGE_BOTTOM - 1.0:
                ball.vy = 0.5
                ball.y = STAGE_BOTTOM - 1.0
                ball.point = ball.hit_count * (ball.hit_count + 10) * (index + 1)
                ship.score += ball.point
                self._paid(ball)
            elif (dodge and ship.life > 0 and abs(dx) < 0.5
                  and ship.y - 0.25 < y < ship.y + 0.25):
                ship.life = 0
            elif y < FLOOR_Y:
                ball.active = False
                ship.life -= 1
                ball.hit_count = 0
                ball.hit_text = HitText.NONE
                ball.collision = False
                ball.collision_count = 0
            else:
                ball.y = y
            self.block_hit(x, y, prev_x, prev_y, index)

    @staticmethod
    def _paid(ball: Ball) -> None:
        ball.hit_text = HitText.POINTS
        ball.collision = False
        ball.collision_count = 0

    def explode(self) -> None:
        """Scatter all ten balls out of the ship as its explosion."""
        for index, ball in enumerate(self.balls):
            ball.vx = math.cos(index * 0.62) * (math.sin(index * 1.5) + 0.5)
            ball.vy = math.sin(index * 0.62) * (math.cos(index * 1.5) + 0.5) + 0.4
            ball.x, ball.y = self.ship.x, self.ship.y
            ball.color = (1.0, 0.3, 0.0, 1.0)
            ball.active = True

    # -- frame ------------------------------------------------------------

    def _follow_mouse(self, mouse_x: float, mouse_y: float) -> None:
        ship = self.ship
        ship.x = mouse_x / MOUSE_SCALE
        if self.mode is GameMode.DODGE:
            ship.y = -(mouse_y - MOUSE_OFFSET_Y) / MOUSE_SCALE
        low_x = ship.hit_width / 2.0 - 0.5
        high_x = 20.5 - ship.hit_width / 2.0
        if ship.x < low_x:
            ship.x = low_x
        elif ship.x > high_x:
            ship.x = high_x
        if ship.y < STAGE_BOTTOM - 0.5:
            ship.y = STAGE_BOTTOM - 0.5
        elif ship.y > -1.0:
            ship.y = -1.0

    def _play(self) -> None:
        ship = self.ship
        self.move_balls()
        if DEAD_LIFE < ship.life <= 0:
            r, g, b, a = ship.color
            ship.color = (float(-ship.life), g, b, a)
            ship.life -= 1
            if ship.life == DEAD_LIFE:
                self.explode()
                ship.dead_count += 1
                if ship.new_record:
                    self._save_highscore()
        if ship.life == RESET_LIFE or (ship.life <= DEAD_LIFE and self.mode is GameMode.DODGE):
            ship.score = 0
            ship.new_record = False
            self.reset_character()
            self.start_stage()
        if ship.new_record:
            ship.highscore = ship.score
        elif ship.score > ship.highscore:
            ship.new_record = True
            ship.highscore = ship.score

    def _roll_blocks(self) -> None:
        for grid_row, roll_row in zip(self.stage.grid, self.block_roll):
            for col, kind in enumerate(grid_row):
                if kind > 0 and kind < len(self.roll_speeds):
                    roll = roll_row[col] + self.roll_speeds[kind]
                    if roll > 360.0:
                        roll -= 360.0
                    elif roll < -360.0:
                        roll += 360.0
                    roll_row[col] = roll

    def step(self, mouse_x: float, mouse_y: float) -> None:
        """Run one frame with the mouse at window pixel ``(mouse_x, mouse_y)``."""
        self._follow_mouse(mouse_x, mouse_y)
        speed = 1 + int(self.left_down) * 3
        if self.blocks and self.demo_time == 0:
            self._play()
        elif self.blocks > 0 and self.demo_time > 0:
            self.demo_time = max(self.demo_time - speed, 0)
        elif self.blocks == 0 and self.demo_time < DEMO_TIME:
            self.demo_time += speed
            if self.demo_time >= DEMO_TIME:
                self.demo_time = DEMO_TIME
                self.stage_index += 1
                self.reset_character()
                self.start_stage()
        self._roll_blocks()


def _split(ball: Ball, si: float, co: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Split a ball's speed into the parts along and across the line of centres."""
    along = ball.vx * co + ball.vy * si
    across = ball.vx * si - ball.vy * co
    return (co * along, si * along), (si * across, -co * across)