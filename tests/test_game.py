import pytest

from blockheat.game import (
    DEMO_TIME,
    START_LIFE,
    STAGE_BOTTOM,
    Game,
    GameMode,
    HitText,
)
from blockheat.stage import Stage, load_highscore


def grid_with(*cells):
    grid = [[0] * 10 for _ in range(10)]
    for row, col, value in cells:
        grid[row][col] = value
    return grid


def make_game(tmp_path, grids, mode=GameMode.NORMAL, speeds=None):
    names = []
    for number, grid in enumerate(grids):
        name = f"stage{number}.dat"
        Stage(grid=grid).save(tmp_path / name)
        names.append(name)
    return Game(
        mode=mode,
        stage_names=names,
        roll_speeds=speeds if speeds is not None else (0.0,) * 21,
        stage_dir=tmp_path,
        highscore_file=tmp_path / "hs.dat",
    )


def playing(tmp_path, grid, mode=GameMode.NORMAL):
    game = make_game(tmp_path, [grid], mode=mode)
    game.demo_time = 0
    return game


def activate(ball, x, y, vx, vy):
    ball.active = True
    ball.x, ball.y, ball.vx, ball.vy = x, y, vx, vy


def test_game_without_stages_is_finished():
    game = Game(stage_names=[])
    assert game.finished
    assert game.blocks == 0


def test_start_stage_counts_blocks(tmp_path):
    grid = grid_with((0, 0, 3), (1, 1, 11), (2, 2, 12), (3, 3, 15))
    game = make_game(tmp_path, [grid])
    assert game.blocks == Stage(grid=grid).count_blocks()
    assert game.demo_time == DEMO_TIME
    assert not game.finished


def test_missing_stage_file_leaves_no_blocks(tmp_path):
    game = Game(stage_names=["absent.dat"], stage_dir=tmp_path)
    assert game.blocks == 0
    assert not game.finished


def test_shoot_ball_until_exhausted():
    game = Game()
    results = [game.shoot_ball((1.0, 2.0), (0.1, 0.2)) for _ in range(11)]
    assert results[:10] == [True] * 10
    assert results[10] is False
    assert all(ball.active for ball in game.balls)
    assert game.balls[0].contact == [True] * 10


def test_click_during_demo_does_not_shoot(tmp_path):
    game = make_game(tmp_path, [grid_with((5, 5, 1))])
    game.click()
    assert game.left_down
    assert not any(ball.active for ball in game.balls)


@pytest.mark.parametrize(
    "mode, expected_speed", [(GameMode.NORMAL, 0.9), (GameMode.DODGE, 0.5)]
)
def test_click_in_play_shoots_from_ship(tmp_path, mode, expected_speed):
    game = playing(tmp_path, grid_with((5, 5, 1)), mode=mode)
    before = game.ship.balls
    game.click()
    ball = game.balls[0]
    assert ball.active
    assert (ball.x, ball.y) == (game.ship.x, game.ship.y + 1.0)
    assert ball.vx == pytest.approx(expected_speed)
    assert ball.vy == pytest.approx(expected_speed)
    assert game.ship.balls == before - 1
    game.click()
    assert not game.balls[1].active
    assert game.ship.balls == before - 1


def test_demo_counts_down_faster_with_button(tmp_path):
    game = make_game(tmp_path, [grid_with((5, 5, 1))])
    before = game.demo_time
    game.step(400, 0)
    assert before - game.demo_time == 1
    game.left_down = True
    before = game.demo_time
    game.step(400, 0)
    assert before - game.demo_time == 4


def test_ship_stays_within_walls(tmp_path):
    game = make_game(tmp_path, [grid_with((5, 5, 1))])
    width = game.ship.hit_width
    for mouse_x in (-500, 0, 200, 400, 790, 5000):
        game.step(mouse_x, 300)
        assert width / 2.0 - 0.5 <= game.ship.x <= 20.5 - width / 2.0
        assert game.ship.y == -10.0


def test_apply_gravity_pulls_balls_together():
    game = Game()
    activate(game.balls[0], 2.0, 5.0, 0.0, 0.0)
    activate(game.balls[1], 6.0, 5.0, 0.0, 0.0)
    game.apply_gravity()
    first, second = game.balls[0], game.balls[1]
    assert first.ax > 0
    assert second.ax < 0
    assert first.ax + second.ax == pytest.approx(0.0)
    assert first.ay == 0.0 and second.ay == 0.0


def test_apply_gravity_ignores_close_and_idle_balls():
    game = Game()
    activate(game.balls[0], 2.0, 5.0, 0.0, 0.0)
    activate(game.balls[1], 2.3, 5.0, 0.0, 0.0)
    game.balls[2].x = 8.0
    game.apply_gravity()
    assert [ball.ax for ball in game.balls[:3]] == [0.0, 0.0, 0.0]


def test_head_on_collision_swaps_speeds():
    game = Game()
    activate(game.balls[0], 5.0, 5.0, 0.3, 0.0)
    activate(game.balls[1], 5.5, 5.0, -0.3, 0.0)
    game.ball_collisions()
    first, second = game.balls[0], game.balls[1]
    assert first.vx == pytest.approx(-0.3)
    assert second.vx == pytest.approx(0.3)
    assert first.vy == pytest.approx(0.0)
    assert first.collision and second.collision
    assert first.contact[1]
    assert game.ship.score == first.point > 0
    score = game.ship.score
    game.ball_collisions()
    assert game.ship.score == score


def test_breakable_block_is_destroyed(tmp_path):
    game = playing(tmp_path, grid_with((3, 2, 1), (9, 9, 1)))
    blocks = game.blocks
    ball = game.balls[0]
    activate(ball, 4.5, 3.5, 0.0, 0.5)
    game.block_hit(4.5, 3.5, 4.5, 2.5, 0)
    assert game.stage.grid[3][2] == 0
    assert game.blocks == blocks - 1
    assert ball.vy == -0.5
    assert ball.y == 2.5
    assert ball.hit_count == 1
    assert ball.point == 10
    assert game.ship.score == ball.point
    assert ball.hit_text is HitText.HIT


def test_solid_cube_bounces_and_stays(tmp_path):
    game = playing(tmp_path, grid_with((3, 2, 11), (9, 9, 1)))
    blocks = game.blocks
    ball = game.balls[0]
    activate(ball, 4.5, 3.5, 0.0, 0.5)
    game.block_hit(4.5, 3.5, 4.5, 2.5, 0)
    assert game.stage.grid[3][2] == 11
    assert game.blocks == blocks
    assert ball.vy == -0.5


def test_scoring_block_wraps_back(tmp_path):
    game = playing(tmp_path, grid_with((3, 2, 20), (9, 9, 1)))
    ball = game.balls[0]
    activate(ball, 4.5, 3.5, 0.0, 0.5)
    game.block_hit(4.5, 3.5, 4.5, 2.5, 0)
    assert game.stage.grid[3][2] == 17
    assert game.ship.score == ball.point > 0


def test_extra_ball_block_releases_one_ball(tmp_path):
    game = playing(tmp_path, grid_with((3, 2, 12), (9, 9, 1)))
    life = game.ship.life
    activate(game.balls[0], 4.5, 3.5, 0.0, 0.5)
    game.block_hit(4.5, 3.5, 4.5, 2.5, 0)
    assert sum(ball.active for ball in game.balls) == 2
    assert game.stage.grid[3][2] == 0
    assert game.ship.life == life + 1
    assert game.ship.life <= START_LIFE + game.ship.balls


def test_ring_block_fills_every_slot(tmp_path):
    game = playing(tmp_path, grid_with((3, 2, 13), (9, 9, 1)))
    activate(game.balls[0], 4.5, 3.5, 0.0, 0.5)
    game.block_hit(4.5, 3.5, 4.5, 2.5, 0)
    assert all(ball.active for ball in game.balls)
    assert game.stage.grid[3][2] == 0
    assert game.ship.life <= START_LIFE + game.ship.balls


def test_diagonal_hit_on_lone_block(tmp_path):
    game = playing(tmp_path, grid_with((3, 2, 1), (9, 9, 1)))
    ball = game.balls[0]
    activate(ball, 4.5, 3.5, 0.5, 0.5)
    game.block_hit(4.5, 3.5, 2.5, 2.5, 0)
    assert (ball.vx, ball.vy) == (-0.5, -0.5)
    assert (ball.x, ball.y) == (2.5, 2.5)
    assert game.stage.grid[3][2] == 0


def test_ball_falling_off_costs_a_life(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)))
    life = game.ship.life
    ball = game.balls[0]
    activate(ball, 5.0, -16.9, 0.0, -0.5)
    game.move_balls()
    assert not ball.active
    assert game.ship.life == life - 1


def test_paddle_returns_ball(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)))
    ball = game.balls[0]
    activate(ball, 10.0, -8.5, 0.0, -0.5)
    game.move_balls()
    assert ball.vy == 1.0
    assert ball.y == game.ship.y + 1.0
    assert ball.hit_text is HitText.POINTS


def test_side_wall_reflects(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)))
    ball = game.balls[0]
    activate(ball, 19.4, 5.0, 0.3, 0.0)
    game.move_balls()
    assert ball.vx == pytest.approx(-0.3)
    assert ball.x == 19.4


def test_ball_timer_wraps(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)))
    ball = game.balls[0]
    activate(ball, 5.0, 5.0, 0.1, 0.1)
    ball.time = 999
    game.move_balls()
    assert ball.time == 0


def test_dodge_floor_returns_ball(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)), mode=GameMode.DODGE)
    ball = game.balls[0]
    activate(ball, 3.0, -10.9, 0.0, -0.3)
    game.move_balls()
    assert ball.vy == 0.5
    assert ball.y == STAGE_BOTTOM - 1.0


def test_dodge_direct_hit_kills_ship(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)), mode=GameMode.DODGE)
    activate(game.balls[0], game.ship.x, game.ship.y + 0.1, 0.0, -0.1)
    game.move_balls()
    assert game.ship.life == 0


def test_explode_releases_all_balls():
    game = Game()
    game.explode()
    assert all(ball.active for ball in game.balls)
    assert all((ball.x, ball.y) == (game.ship.x, game.ship.y) for ball in game.balls)


def test_death_saves_new_record(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)))
    game.ship.life = 0
    game.ship.score = 50
    for _ in range(10):
        game.step(400, 0)
    assert game.ship.life == -10
    assert game.ship.dead_count == 1
    assert all(ball.active for ball in game.balls)
    assert load_highscore(tmp_path / "hs.dat") == 50
    assert game.ship.highscore == 50


def test_dodge_death_restarts(tmp_path):
    game = playing(tmp_path, grid_with((9, 9, 1)), mode=GameMode.DODGE)
    game.ship.life = 0
    game.ship.score = 50
    for _ in range(10):
        game.step(400, 0)
    assert game.ship.life == START_LIFE
    assert game.ship.score == 0
    assert game.ship.dead_count == 1
    assert game.demo_time == DEMO_TIME
    assert game.ship.hit_width == 1.0


def test_cleared_stage_moves_to_next(tmp_path):
    second = grid_with((1, 1, 2), (2, 2, 3), (4, 4, 11))
    game = make_game(tmp_path, [grid_with((9, 9, 1)), second])
    game.blocks = 0
    game.demo_time = DEMO_TIME - 1
    game.step(400, 0)
    assert game.stage_index == 1
    assert game.blocks == Stage(grid=second).count_blocks()
    assert game.demo_time == DEMO_TIME


def test_last_stage_cleared_finishes(tmp_path):
    game = make_game(tmp_path, [grid_with((9, 9, 1))])
    game.blocks = 0
    game.demo_time = DEMO_TIME - 1
    game.step(400, 0)
    assert game.finished


def test_blocks_roll_each_frame(tmp_path):
    speeds = (0.0, 2.5) + (0.0,) * 19
    game = make_game(tmp_path, [grid_with((4, 4, 1))], speeds=speeds)
    game.step(400, 0)
    assert game.block_roll[4][4] == 2.5
    assert game.block_roll[0][0] == 0.0