import pygame
import pytest

from blockheat.app import Renderer, main
from blockheat.game import Game


def _pixel(surface, pos):
    return tuple(surface.get_at(pos))[:3]


def _playing_game():
    game = Game()
    game.demo_time = 0
    return game


def test_camera_target_is_window_centre():
    renderer = Renderer()
    assert renderer.world_to_screen(9.5, 0.0) == (400, 400)


def test_projection_is_symmetric_about_target():
    renderer = Renderer()
    left = renderer.world_to_screen(5.5, 3.0)
    right = renderer.world_to_screen(13.5, 3.0)
    assert left[1] == right[1]
    assert left[0] - 400 == pytest.approx(400 - right[0], abs=1)


def test_projection_orientation():
    renderer = Renderer()
    assert renderer.world_to_screen(12.0, 0.0)[0] > renderer.world_to_screen(7.0, 0.0)[0]
    assert renderer.world_to_screen(9.5, 5.0)[1] < renderer.world_to_screen(9.5, -5.0)[1]


def test_demo_zoom_pulls_points_towards_centre():
    near = Renderer(demo_time=0).world_to_screen(19.5, 0.0)
    far = Renderer(demo_time=200).world_to_screen(19.5, 0.0)
    assert abs(far[0] - 400) < abs(near[0] - 400)


def test_draw_paints_active_ball():
    game = _playing_game()
    ball = game.balls[0]
    ball.active = True
    ball.x, ball.y = 10.0, 5.0
    renderer = Renderer()
    surface = pygame.Surface((renderer.width, renderer.height))
    renderer.draw(surface, game)
    red, _, blue = _pixel(surface, renderer.world_to_screen(10.0, 5.0))
    assert blue == 255
    assert red == 0


def test_draw_shows_paddle_while_alive():
    game = _playing_game()
    renderer = Renderer()
    surface = pygame.Surface((renderer.width, renderer.height))
    renderer.draw(surface, game)
    _, green, _ = _pixel(surface, renderer.world_to_screen(game.ship.x, game.ship.y))
    assert green == 255


def test_draw_hides_paddle_after_death():
    game = _playing_game()
    game.ship.life = -10
    renderer = Renderer()
    surface = pygame.Surface((renderer.width, renderer.height))
    renderer.draw(surface, game)
    assert _pixel(surface, renderer.world_to_screen(game.ship.x, game.ship.y)) == (0, 0, 0)


def test_draw_paints_block_and_walls():
    game = _playing_game()
    game.stage.grid[2][3] = 5
    renderer = Renderer()
    surface = pygame.Surface((renderer.width, renderer.height))
    renderer.draw(surface, game)
    block = _pixel(surface, renderer.world_to_screen(7.0, 2.0))
    assert block[2] == 255
    assert block != (0, 0, 0)
    assert _pixel(surface, renderer.world_to_screen(-1.0, 0.0)) == (255, 255, 255)


def test_draw_follows_game_demo_time():
    game = Game()
    game.demo_time = 150
    renderer = Renderer()
    surface = pygame.Surface((renderer.width, renderer.height))
    renderer.draw(surface, game)
    assert renderer.demo_time == 150


def test_main_reports_missing_data(tmp_path, capsys):
    assert main(["0", "--directory", str(tmp_path)]) == 1
    assert "cannot load game data" in capsys.readouterr().err


def test_main_asks_again_for_invalid_mode(tmp_path, monkeypatch):
    answers = iter(["5", "x", "1"])
    prompts = []

    def fake_input(prompt=""):
        prompts.append(prompt)
        return next(answers)

    monkeypatch.setattr("builtins.input", fake_input)
    assert main(["--directory", str(tmp_path)]) == 1
    assert len(prompts) == 3