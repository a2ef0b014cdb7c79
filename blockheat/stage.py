"""Stage files, the stage list, block roll speeds and high-score files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Tuple, Union

PathLike = Union[str, "os.PathLike[str]"]

GRID_SIZE = 10
ROLL_SPEED_COUNT = 21
STAGE_LIST_FILE = "block_stage_filename.dat"
ROLL_SPEED_FILE = "block_rollspeed.dat"
MAX_STAGE_NAME = 15

_HIGHSCORE_FILES = (
    "block_normal_highscore.dat",
    "block_tamayoke_highscore.dat",
)


class StageFormatError(ValueError):
    """Raised when a stage, stage list or roll speed file is malformed."""


def _read_tokens(path: PathLike) -> List[str]:
    with open(path, "r", encoding="ascii") as handle:
        return handle.read().split()


def _parse_ints(tokens: List[str], what: str) -> List[int]:
    try:
        return [int(token) for token in tokens]
    except ValueError as exc:
        raise StageFormatError(f"invalid integer in {what}") from exc


def _empty_grid() -> List[List[int]]:
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]


@dataclass
class Stage:
    """A 10x10 block layout with its gravity setting and enemy value.

    ``grid[row][col]`` holds the block kind: 0 is empty, 1..10 are breakable
    blocks whose value is their strength, 11 is a solid cube, 12 releases one
    extra ball, 13 releases a ring of balls and 14..20 are scoring blocks.
    ``gravity`` is -1 (pulling down), 0 (none) or 1 (pulling up).
    """

    grid: List[List[int]] = field(default_factory=_empty_grid)
    gravity: int = 0
    enemy: int = 0

    def __post_init__(self) -> None:
        grid = [list(row) for row in self.grid]
        if len(grid) != GRID_SIZE or any(len(row) != GRID_SIZE for row in grid):
            raise StageFormatError(f"stage grid must be {GRID_SIZE}x{GRID_SIZE}")
        self.grid = grid

    @classmethod
    def load(cls, path: PathLike) -> "Stage":
        """Read a stage: 100 block values row by row, then gravity and enemy.

        Gravity and enemy default to 0 when the file ends before them.
        """
        values = _parse_ints(_read_tokens(path), "stage file")
        cells = GRID_SIZE * GRID_SIZE
        if len(values) < cells:
            raise StageFormatError(
                f"stage file holds {len(values)} block values, expected {cells}"
            )
        grid = [values[start:start + GRID_SIZE] for start in range(0, cells, GRID_SIZE)]
        extra = values[cells:cells + 2] + [0, 0]
        return cls(grid=grid, gravity=extra[0], enemy=extra[1])

    def save(self, path: PathLike) -> None:
        """Write the stage as one integer per line."""
        with open(path, "w", encoding="ascii", newline="\n") as handle:
            handle.writelines(f"{value}\n" for row in self.grid for value in row)
            handle.write(f"{self.gravity}\n")
            handle.write(f"{self.enemy}\n")

    def count_blocks(self) -> int:
        """Count the blocks that must be cleared: kinds 1..10, 12 and 13."""
        return sum(
            1
            for row in self.grid
            for block in row
            if 1 <= block <= 10 or block in (12, 13)
        )


def load_stage_list(path: PathLike) -> List[str]:
    """Read the stage list: a count followed by that many stage file names."""
    tokens = _read_tokens(path)
    if not tokens:
        raise StageFormatError("stage list is empty")
    try:
        count = int(tokens[0])
    except ValueError as exc:
        raise StageFormatError("stage list does not start with a count") from exc
    if count < 0:
        raise StageFormatError("stage count is negative")
    names = tokens[1:1 + count]
    if len(names) < count:
        raise StageFormatError(
            f"stage list names {len(names)} stages, expected {count}"
        )
    for name in names:
        if len(name) > MAX_STAGE_NAME:
            raise StageFormatError(f"stage file name {name!r} is too long")
    return names


def load_roll_speeds(path: PathLike) -> Tuple[float, ...]:
    """Read the 21 rotation speeds, one per block kind 0..20."""
    tokens = _read_tokens(path)
    if len(tokens) < ROLL_SPEED_COUNT:
        raise StageFormatError(
            f"roll speed file holds {len(tokens)} values, expected {ROLL_SPEED_COUNT}"
        )
    try:
        return tuple(float(token) for token in tokens[:ROLL_SPEED_COUNT])
    except ValueError as exc:
        raise StageFormatError("invalid number in roll speed file") from exc


def highscore_path(mode: int) -> str:
    """Return the high-score file name for game mode 0 (normal) or 1 (dodge)."""
    index = int(mode)
    if not 0 <= index < len(_HIGHSCORE_FILES):
        raise ValueError(f"unknown game mode {mode!r}")
    return _HIGHSCORE_FILES[index]


def load_highscore(path: PathLike) -> int:
    """Read the high score stored in ``path``."""
    tokens = _read_tokens(path)
    if not tokens:
        raise StageFormatError("high-score file is empty")
    try:
        return int(tokens[0])
    except ValueError as exc:
        raise StageFormatError("invalid high score") from exc


def save_highscore(path: PathLike, score: int) -> None:
    """Write ``score`` to ``path`` as a bare decimal number."""
    with open(path, "w", encoding="ascii", newline="\n") as handle:
        handle.write(f"{int(score)}")