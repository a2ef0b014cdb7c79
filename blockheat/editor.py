"""Mouse-driven editor for stage files."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence, Set, Tuple

from blockheat.font import BitmapFont, default_font, number_text
from blockheat.stage import GRID_SIZE, Stage, StageFormatError

DEFAULT_FILENAME = "UnTitled"
WINDOW_SIZE = 800
FPS = 10

PALETTE_HEIGHT = 70
PALETTE_CELL_WIDTH = 40
PALETTE_PARTS = 20

COMMAND_LEFT = 680
COMMAND_RIGHT = 780
COMMAND_TOP = 128
COMMAND_BOTTOM = 223
COMMAND_ROW_HEIGHT = 35
COMMAND_LABELS = ("File Name", "Load", "Save", "Gravity", "Enemy", "Display")

ORIGIN_X = 200.0
ORIGIN_Y = 420.0
PIXELS_PER_UNIT = 15.0
CURSOR_MIN_X = 0.0
CURSOR_MAX_X = 18.5

STAGE_LEFT = 0.0
STAGE_RIGHT = 20.0
STAGE_TOP = 15.0


class MouseButton(enum.IntEnum):
    """Mouse buttons the editor reacts to."""

    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


class Command(enum.IntEnum):
    """Clickable commands in the command column."""

    FILE_NAME = 0
    LOAD = 1
    SAVE = 2


@dataclass
class Editor:
    """Editing state: the stage, the selected part, held buttons and the cursor.

    The left button paints the selected part into the cell under the cursor,
    the right button clears it, and the middle button switches how blocks are
    shown. Clicking the palette strip at the top selects a part; clicking the
    command column loads or saves the stage file.
    """

    filename: str = DEFAULT_FILENAME
    stage: Stage = field(default_factory=Stage)
    parts: int = 0
    command: Optional[Command] = None
    cursor: Tuple[float, float] = (10.0, -10.0)
    held: Set[MouseButton] = field(default_factory=set)

    def is_held(self, button: int) -> bool:
        """Return whether ``button`` is currently held down."""
        return MouseButton(button) in self.held

    def press(self, button: int, x: int, y: int) -> Optional[Command]:
        """Handle a button press at window pixel ``(x, y)``.

        Returns the command that was run, if the click hit the command column.
        """
        button = MouseButton(button)
        if button is MouseButton.LEFT:
            x, y = int(x), int(y)
            if y < PALETTE_HEIGHT:
                self.parts = x // PALETTE_CELL_WIDTH + 1
                return None
            if COMMAND_LEFT <= x <= COMMAND_RIGHT and COMMAND_TOP <= y <= COMMAND_BOTTOM:
                command = Command((y - COMMAND_TOP) // COMMAND_ROW_HEIGHT)
                self.command = command
                if command is Command.LOAD:
                    self.stage = Stage.load(self.filename)
                elif command is Command.SAVE:
                    self.stage.save(self.filename)
                return command
        self.held.add(button)
        return None

    def release(self, button: int) -> None:
        """Handle a button release."""
        self.held.discard(MouseButton(button))

    def update(self, x: float, y: float) -> None:
        """Move the cursor to window pixel ``(x, y)`` and paint or erase."""
        world_x = (x - ORIGIN_X) / PIXELS_PER_UNIT
        world_y = (ORIGIN_Y - y) / PIXELS_PER_UNIT
        world_x = min(max(world_x, CURSOR_MIN_X), CURSOR_MAX_X)
        self.cursor = (world_x, world_y)

        if MouseButton.LEFT in self.held:
            value = self.parts
        elif MouseButton.RIGHT in self.held:
            value = 0
        else:
            return
        col = int(world_x / 2.0)
        row = int(world_y) - 1
        if 0 <= col < GRID_SIZE and 0 <= row < GRID_SIZE:
            self.stage.grid[row][col] = value

    def cursor_cell(self) -> Optional[Tuple[int, int]]:
        """Return ``(row, col)`` of the grid cell under the cursor, or None."""
        col = int(self.cursor[0] / 2.0)
        level = int(self.cursor[1])
        if 0 <= col < GRID_SIZE and 1 <= level <= GRID_SIZE:
            return level - 1, col
        return None


_PYGAME_BUTTONS = {1: MouseButton.LEFT, 2: MouseButton.MIDDLE, 3: MouseButton.RIGHT}
_WHITE = (255, 255, 255)
_BLACK = (0, 0, 0)


def _to_screen(world_x: float, world_y: float) -> Tuple[int, int]:
    return (
        round(ORIGIN_X + PIXELS_PER_UNIT * world_x),
        round(ORIGIN_Y - PIXELS_PER_UNIT * world_y),
    )


def _draw_text(surface, font: BitmapFont, text: str, pos: Tuple[int, int],
               color=_WHITE) -> None:
    left, top = pos
    width, height = surface.get_size()
    for dy, row in enumerate(font.render(text)):
        for dx, on in enumerate(row):
            px, py = left + dx, top + dy
            if on and 0 <= px < width and 0 <= py < height:
                surface.set_at((px, py), color)


def _is_solid(kind: int, is_cursor: bool, middle: bool) -> bool:
    if kind <= 10:
        return is_cursor or (kind != 0 and middle)
    if kind <= 13:
        return not middle if is_cursor else middle
    return False


def _block_color(world_x: float, world_y: float) -> Tuple[int, int, int]:
    def channel(value: float) -> int:
        return round(255 * min(max(value, 0.0), 1.0))

    return channel(world_x / 10.0), channel(world_y / 10.0), 255


def _draw_shape(pygame, surface, font: BitmapFont, kind: int,
                center: Tuple[int, int], solid: bool, color) -> None:
    cx, cy = center
    width = 0 if solid else 1
    unit = PIXELS_PER_UNIT
    if kind <= 10:
        w, h = round(1.8 * unit), round(0.8 * unit)
        pygame.draw.rect(surface, color, (cx - w // 2, cy - h // 2, w, h), width)
    elif kind == 11:
        r = round(0.75 * unit * 1.4)
        points = [(cx, cy - r), (cx + r, cy), (cx, cy + r), (cx - r, cy)]
        pygame.draw.polygon(surface, color, points, width)
    elif kind == 12:
        r = round(0.6 * unit)
        points = [(cx, cy - r), (cx + r, cy + r), (cx - r, cy + r)]
        pygame.draw.polygon(surface, color, points, width)
    elif kind == 13:
        pygame.draw.circle(surface, color, (cx, cy), round(unit), width)
    elif kind <= 20:
        w, h = round(1.8 * unit), round(0.8 * unit)
        pygame.draw.rect(surface, color, (cx - w // 2, cy - h // 2, w, h), 1)
        _draw_text(surface, font, number_text((kind - 13) * 10), (cx - 10, cy - 6))


def _draw(pygame, surface, editor: Editor, font: BitmapFont,
          mouse: Tuple[int, int]) -> None:
    surface.fill(_BLACK)
    middle = editor.is_held(MouseButton.MIDDLE)
    cell = editor.cursor_cell()

    for row, line in enumerate(editor.stage.grid):
        for col, kind in enumerate(line):
            if kind > 20 or (row, col) == cell:
                continue
            world = (col * 2.0 + 1.0, float(row))
            _draw_shape(pygame, surface, font, kind, _to_screen(*world),
                        _is_solid(kind, False, middle), _block_color(*world))

    col = int(editor.cursor[0] / 2.0)
    level = int(editor.cursor[1])
    kind = editor.stage.grid[cell[0]][cell[1]] if cell is not None else 0
    world = (col * 2.0 + 1.0, level - 1.0)
    _draw_shape(pygame, surface, font, kind, _to_screen(*world),
                _is_solid(kind, True, middle), _block_color(*world))

    unit = PIXELS_PER_UNIT
    walls = (
        (STAGE_LEFT - 1.0, 0.0, 1.0, 30.0),
        (STAGE_RIGHT + 1.0, 0.0, 1.0, 30.0),
        (STAGE_RIGHT / 2.0, STAGE_TOP, STAGE_RIGHT + 3.0, 1.0),
    )
    for wx, wy, ww, wh in walls:
        sx, sy = _to_screen(wx, wy)
        pw, ph = round(ww * unit), round(wh * unit)
        pygame.draw.rect(surface, _WHITE, (sx - pw // 2, sy - ph // 2, pw, ph), 1)

    for part in range(PALETTE_PARTS + 1):
        center = (PALETTE_CELL_WIDTH * part - PALETTE_CELL_WIDTH // 2, PALETTE_HEIGHT // 2)
        color = (255, 255, 0) if part == editor.parts else _WHITE
        _draw_shape(pygame, surface, font, part, center, False, color)

    _draw_text(surface, font, f"x = {mouse[0]}", (10, 700))
    _draw_text(surface, font, f"y = {mouse[1]}", (10, 716))
    left_down = int(editor.is_held(MouseButton.LEFT))
    _draw_text(surface, font, f"Parts={editor.parts} Button={left_down}", (10, 200))

    for index, label in enumerate(COMMAND_LABELS):
        top = COMMAND_TOP + COMMAND_ROW_HEIGHT * index + 10
        _draw_text(surface, font, label, (COMMAND_LEFT, top))
    _draw_text(surface, font, editor.filename, (COMMAND_LEFT, COMMAND_TOP - 20))
    gravity_top = COMMAND_TOP + COMMAND_ROW_HEIGHT * 3 + 26
    _draw_text(surface, font, str(editor.stage.gravity), (COMMAND_LEFT, gravity_top))
    display_top = COMMAND_TOP + COMMAND_ROW_HEIGHT * 5 + 26
    _draw_text(surface, font, str(int(middle)), (COMMAND_LEFT, display_top))


def _run(editor: Editor) -> int:
    import pygame

    font = default_font()
    pygame.init()
    try:
        screen = pygame.display.set_mode((WINDOW_SIZE, WINDOW_SIZE))
        pygame.display.set_caption("Block")
        clock = pygame.time.Clock()
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return 0
                if event.type == pygame.MOUSEBUTTONDOWN and event.button in _PYGAME_BUTTONS:
                    command = editor.press(_PYGAME_BUTTONS[event.button], *event.pos)
                    if command is Command.LOAD:
                        print("load stage OK")
                    elif command is Command.SAVE:
                        print("save stage OK")
                elif event.type == pygame.MOUSEBUTTONUP and event.button in _PYGAME_BUTTONS:
                    editor.release(_PYGAME_BUTTONS[event.button])
            mouse = pygame.mouse.get_pos()
            editor.update(*mouse)
            _draw(pygame, screen, editor, font, mouse)
            pygame.display.flip()
            clock.tick(FPS)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the editor on the stage file named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    filename = args[0] if args else ""
    while not filename:
        words = input("Input FileName ? ").split()
        filename = words[0] if words else ""
    editor = Editor(filename=filename)
    try:
        return _run(editor)
    except (OSError, StageFormatError) as exc:
        print(f"stage file error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())