import random

from honeybear.confetti import (
    CHARACTERS,
    NUM_PARTICLES,
    BurstMsg,
    ConfettiModel,
    FrameMsg,
    burst,
    spawn,
)
from honeybear.messages import KeyMsg, WindowSizeMsg


def test_spawn_count_and_start_row():
    random.seed(1)
    particles = spawn(80, 24)
    assert len(particles) == NUM_PARTICLES
    assert all(p.physics.position().y == 0 for p in particles)


def test_spawn_x_near_middle():
    random.seed(2)
    for particle in spawn(80, 24):
        x = particle.physics.position().x
        assert 40 - 10 <= x <= 40 + 10


def test_spawn_chars_are_confetti():
    random.seed(3)
    for particle in spawn(20, 10):
        assert any(char in particle.char for char in CHARACTERS)


def test_burst_message_times_increase():
    first = burst()
    second = burst()
    assert isinstance(first, BurstMsg)
    assert isinstance(second, BurstMsg)
    assert first.time <= second.time


def test_first_window_size_spawns_once():
    random.seed(4)
    model = ConfettiModel()
    model, command = model.update(WindowSizeMsg(80, 24))
    assert command is None
    assert len(model.system.particles) == NUM_PARTICLES
    model.update(WindowSizeMsg(100, 30))
    assert len(model.system.particles) == NUM_PARTICLES
    assert (model.system.frame.width, model.system.frame.height) == (100, 30)


def test_key_adds_particles():
    random.seed(5)
    model = ConfettiModel()
    model.update(WindowSizeMsg(80, 24))
    _, command = model.update(KeyMsg("a"))
    assert command is None
    assert len(model.system.particles) == 2 * NUM_PARTICLES


def test_burst_spawns_and_animates():
    random.seed(6)
    model = ConfettiModel()
    _, command = model.update(BurstMsg(burst().time))
    assert len(model.system.particles) == NUM_PARTICLES
    assert isinstance(command(), FrameMsg)


def test_frame_moves_particles_down():
    random.seed(7)
    model = ConfettiModel()
    model.update(WindowSizeMsg(80, 24))
    model.update(FrameMsg(burst().time))
    model.update(FrameMsg(burst().time))
    assert any(p.physics.position().y > 0 for p in model.system.particles)


def test_empty_view_is_blank_frame():
    model = ConfettiModel()
    model.system.frame.width = 10
    model.system.frame.height = 5
    assert model.view() == (" " * 10 + "\n") * 5


def test_unknown_message_ignored():
    model = ConfettiModel()
    result, command = model.update("other")
    assert result is model
    assert command is None
    assert model.system.particles == []