# blockheat

A block-breaking arcade game with a companion stage editor and a small
8 × 12 bitmap font.

You fire balls from a paddle into a 10 × 10 grid of blocks.

* Ordinary blocks (kinds 1–10) lose strength with every hit and vanish when it
  reaches zero.
* Bonus blocks (kinds 14–20) spin, score more on every hit and are never
  destroyed.
* A tetrahedron block (kind 12) releases one extra ball.
* A cone block (kind 13) releases a ring of nine balls.
* Kind 11 is a solid cube that only bounces balls.

Balls bounce off one another and score for each collision. When a stage's
gravity setting is non-zero, balls also pull on each other. A ball that hits
several blocks in a row scores more when it comes back to the paddle.

## Installing

```
pip install .
```

This installs `pygame`, which draws the window.

## Playing

```
blockheat [MODE] [-d DIRECTORY]
```

`MODE` is `0` for the normal game or `1` for the dodge game. If you leave it
out, or give anything else, the game asks for it.

* **Normal**: a wide paddle along the bottom. Balls fall and must be kept in
  play.
* **Dodge**: a small paddle that also moves up and down under a floor that
  sends the balls back up. A ball that hits the paddle ends the life.

Move the paddle with the mouse and left-click to launch a ball. Each stage
starts with the camera flying in and ends with it flying out. Holding the left
button speeds this up. The game ends when the last stage is cleared.

The game reads these files from `DIRECTORY` (the current directory by default):

| File | Contents |
| --- | --- |
| `block_stage_filename.dat` | the number of stages, then one stage file name per stage (at most 15 characters each) |
| `block_rollspeed.dat` | 21 rotation speeds, one for each block kind 0–20 |
| `block_normal_highscore.dat` | the high score for the normal game |
| `block_tamayoke_highscore.dat` | the high score for the dodge game |

The stage files named in the list are read from the same directory. If a stage
file is missing, that stage counts as already cleared. When a game ends on a
new record, the high score is written back.

## Editing stages

```
blockheat-edit mystage.dat
```

If you leave out the file name, the editor asks for one. Click the palette
strip along the top to choose a block kind. Hold the left button to paint it
into the cells under the cursor, and hold the right button to clear cells.
Holding the middle button changes how blocks are drawn. The *Load* and *Save*
commands in the column on the right read and write the stage file.

A stage file is plain text: 100 integers for the grid, row by row starting
from the bottom row, then the gravity flag (`-1`, `0` or `1`), then the enemy
value.

## As a library

```python
from blockheat.stage import Stage
from blockheat.font import default_font, number_text

stage = Stage.load("mystage.dat")
print(stage.count_blocks())

font = default_font()
rows = font.render(number_text(120))   # rows of booleans, top row first
```

* `blockheat.stage` reads and writes stage files, the stage list, the roll
  speeds and high-score files (`load_stage_list`, `load_roll_speeds`,
  `highscore_path`, `load_highscore`, `save_highscore`).
* `blockheat.font.BitmapFont` holds the 95 glyphs for ASCII 32–126.
  `BitmapFont.load` and `BitmapFont.save` read and write them as whitespace-
  separated hex bytes.
* `blockheat.game.Game` holds all the game rules and no drawing code, so
  `Game.step(mouse_x, mouse_y)` and `Game.click()` can be driven without a
  window. `Game.from_directory(mode, directory)` loads the data files listed
  above.
* `blockheat.editor.Editor` holds the editor state, and
  `blockheat.app.Renderer` draws a `Game` onto a pygame surface.

## What it does not do

* The game always draws text with the built-in font. It does not read a font
  file from disk.
* In the editor, only *Load* and *Save* do anything. The *File Name*,
  *Gravity*, *Enemy* and *Display* entries are labels only. The file name is
  fixed when the editor starts, and the gravity flag and enemy value can only
  be changed by editing the stage file by hand.
* The enemy value is stored in stage files, but the game does not use it.