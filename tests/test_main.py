import io
import logging
import os
import signal

import pytest

import main
from constants import CLOSING_BANNER, HIDE_CURSOR, SHOW_CURSOR
from main import Show, ShowState, build_show
from simulation import Simulation
from visualization import Visualizer


class FakeClock:
    """Manual clock; sleeping advances it."""
    def __init__(self):
        self.now = 0.0
        self.sleeps = []
        self.on_sleep = None

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_sleep is not None:
            self.on_sleep(len(self.sleeps))


def make_show(duration, tick_interval=0.25, **sim_params):
    sim_params.setdefault('seed', 42)
    clock = FakeClock()
    visualizer = Visualizer(30, 12, stream=io.StringIO())
    simulation = Simulation(sim_params, 30, 12, on_explode=visualizer.bell)
    show = Show(
        simulation, visualizer, duration,
        run_params={'tick_interval': tick_interval, 'log_throttle_steps': 2},
        clock=clock, sleep=clock.sleep,
    )
    return show, clock


def test_show_already_due_renders_exactly_once():
    show, clock = make_show(duration=0)

    show.run()

    assert show.visualizer.frames_drawn == 1
    assert show.step_num == 0
    assert show.state is ShowState.STOPPED
    assert clock.sleeps == []
    output = show.visualizer.stream.getvalue()
    assert output.startswith(HIDE_CURSOR)
    assert SHOW_CURSOR in output
    assert CLOSING_BANNER in output


def test_show_ticks_until_duration_elapses():
    show, clock = make_show(duration=1, tick_interval=0.25)

    show.run()

    assert show.step_num == 3
    assert show.visualizer.frames_drawn == 4
    assert clock.now == 1.0
    assert show.state is ShowState.STOPPED


def test_request_stop_ends_the_show_at_the_next_check():
    show, clock = make_show(duration=60)
    clock.on_sleep = lambda n: show.request_stop() if n == 3 else None

    show.run()

    assert show.step_num == 2
    assert show.state is ShowState.STOPPED


def test_ctrl_c_stops_gracefully_and_restores_handler():
    show, clock = make_show(duration=60)
    clock.on_sleep = lambda n: signal.raise_signal(signal.SIGINT) if n == 5 else None
    before = signal.getsignal(signal.SIGINT)

    show.run()

    assert show.stop_requested
    assert show.step_num == 4
    assert show.state is ShowState.STOPPED
    assert signal.getsignal(signal.SIGINT) is before
    assert SHOW_CURSOR in show.visualizer.stream.getvalue()


def test_teardown_runs_when_a_step_fails():
    show, clock = make_show(duration=60)

    def broken_step():
        raise RuntimeError("boom")
    show.step = broken_step

    with pytest.raises(RuntimeError):
        show.run()

    assert show.state is ShowState.STOPPED
    assert SHOW_CURSOR in show.visualizer.stream.getvalue()


def test_step_advances_simulation_then_draws():
    show, _ = make_show(duration=60, spawn_probability=1.0)
    show.start()

    show.step()

    assert show.simulation.active_count == 1
    assert show.visualizer.frames_drawn == 2
    assert '1 active fireworks' in show.visualizer.stream.getvalue()


def test_stop_is_idempotent():
    show, _ = make_show(duration=60)
    show.start()
    show.stop()
    show.stop()
    assert show.visualizer.stream.getvalue().count(CLOSING_BANNER) == 1


def test_show_cannot_start_twice():
    show, _ = make_show(duration=60)
    show.start()
    with pytest.raises(RuntimeError):
        show.start()


def test_explosions_ring_the_bell():
    show, _ = make_show(duration=60, spawn_probability=0.0)
    show.start()
    show.simulation.explode(show.simulation.create_firework())
    assert '\x07' in show.visualizer.stream.getvalue()


def test_build_show_fits_field_to_terminal(monkeypatch):
    monkeypatch.setattr(main, 'get_terminal_dimensions', lambda: (100, 30))

    show = build_show(12, main.DEFAULT_CONFIG)

    assert (show.width, show.height) == (98, 25)
    assert show.duration == 12
    assert show.tick_interval == 0.05
    assert show.simulation.on_explode == show.visualizer.bell


def test_main_runs_a_show_and_exits_zero(monkeypatch):
    built = {}

    def fake_build_show(duration, config):
        show, _ = make_show(duration=0)
        show.duration = duration
        built['show'] = show
        return show

    monkeypatch.setattr(main, 'setup_logging', lambda config: None)
    monkeypatch.setattr(main, 'build_show', fake_build_show)

    assert main.main(['7']) == 0

    show = built['show']
    assert show.duration == 7
    assert show.state is ShowState.STOPPED
    assert 'Duration: 7 seconds' in show.visualizer.stream.getvalue()


def test_main_defaults_duration(monkeypatch):
    durations = []

    def fake_build_show(duration, config):
        durations.append(duration)
        show, _ = make_show(duration=0)
        return show

    monkeypatch.setattr(main, 'setup_logging', lambda config: None)
    monkeypatch.setattr(main, 'build_show', fake_build_show)

    assert main.main(['soon']) == 0
    assert durations == [30]


@pytest.fixture
def restore_root_logger():
    logger = logging.getLogger()
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


def test_main_leaves_working_directory_untouched(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(main, 'build_show', lambda duration, config: make_show(duration=0)[0])

    assert main.main(['1']) == 0
    assert os.listdir(tmp_path) == []


def test_ctrl_c_during_intro_exits_zero(monkeypatch):
    built = {}

    def interrupted_sleep(seconds):
        raise KeyboardInterrupt

    def fake_build_show(duration, config):
        show, _ = make_show(duration=duration)
        show.sleep = interrupted_sleep
        built['show'] = show
        return show

    monkeypatch.setattr(main, 'setup_logging', lambda config: None)
    monkeypatch.setattr(main, 'build_show', fake_build_show)

    assert main.main([]) == 0

    show = built['show']
    assert show.state is ShowState.IDLE
    assert show.visualizer.frames_drawn == 0
