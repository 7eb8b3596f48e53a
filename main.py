# main.py
"""
Main entry point for the terminal fireworks show.

This script orchestrates the entire show lifecycle:
1. Parses the optional duration argument.
2. Initializes the logging system.
3. Captures the terminal size and sets up the simulation and renderer.
4. Runs the fixed-interval show loop.
5. Handles clean shutdown, on timeout or on Ctrl+C.
"""
import enum
import logging
import signal
import sys
import time
from typing import Any, Callable, Dict, List, Optional

from constants import DEFAULT_CONFIG
from simulation import Simulation
from utils import field_dimensions, get_terminal_dimensions, parse_duration, setup_logging
from visualization import Visualizer


class ShowState(enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    STOPPED = 'stopped'


class Show:
    """
    Holds everything one show needs and drives it from start to stop.

    The interrupt handler only ever calls request_stop(); all simulation
    and terminal work happens inside step() and stop().
    """
    def __init__(
        self,
        simulation: Simulation,
        visualizer: Visualizer,
        duration: float,
        run_params: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        run_params = run_params if run_params is not None else DEFAULT_CONFIG['run_control']

        self.simulation = simulation
        self.visualizer = visualizer
        self.width = simulation.width
        self.height = simulation.height
        self.duration = duration
        self.tick_interval = run_params.get('tick_interval', 0.05)
        self.log_throttle = run_params.get('log_throttle_steps', 200)
        self.clock = clock
        self.sleep = sleep

        self.state = ShowState.IDLE
        self.stop_requested = False
        self.start_time: Optional[float] = None
        self.step_num = 0

    def request_stop(self) -> None:
        self.stop_requested = True

    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return self.clock() - self.start_time

    def should_stop(self) -> bool:
        return self.stop_requested or self.elapsed() >= self.duration

    def start(self) -> None:
        """
        Moves the show from IDLE to RUNNING and paints the first frame.
        """
        if self.state is not ShowState.IDLE:
            raise RuntimeError(f"Cannot start a show that is {self.state.value}.")

        self.visualizer.hide_cursor()
        self.start_time = self.clock()
        self.state = ShowState.RUNNING
        self.visualizer.draw(self.simulation.fireworks)
        logging.info(f"Show started for {self.duration} seconds on a {self.width}x{self.height} field.")

    def step(self) -> None:
        """
        Executes one tick of the show: simulation first, then the frame.
        """
        self.simulation.step()
        self.visualizer.draw(self.simulation.fireworks)
        self.step_num += 1

        # Hot loop: throttle logs
        if self.step_num % self.log_throttle == 0:
            logging.info(
                f"Tick {self.step_num} | {self.simulation.active_count} active fireworks | "
                f"{self.simulation.explosion_count} explosions so far"
            )

    def stop(self) -> None:
        """
        Moves the show to STOPPED and restores the terminal. Safe to call twice.
        """
        if self.state is ShowState.STOPPED:
            return
        self.state = ShowState.STOPPED
        self.visualizer.close()
        logging.info(
            f"Show stopped after {self.step_num} ticks and "
            f"{self.simulation.explosion_count} explosions."
        )

    def run(self) -> None:
        """
        Runs the show loop until the duration elapses or Ctrl+C is pressed.
        """
        def _handle_interrupt(signum, frame):
            logging.info("Interrupt received. Stopping show.")
            self.request_stop()

        previous_handler = signal.signal(signal.SIGINT, _handle_interrupt)
        try:
            self.start()
            while not self.should_stop():
                self.sleep(self.tick_interval)
                if self.should_stop():
                    break
                self.step()
        finally:
            self.stop()
            signal.signal(signal.SIGINT, previous_handler)


def build_show(duration: int, config: Dict[str, Any]) -> Show:
    """
    Wires the simulation and renderer together for the current terminal.
    """
    columns, rows = get_terminal_dimensions()
    width, height = field_dimensions(columns, rows)

    visualizer = Visualizer(width, height)
    simulation = Simulation(
        config.get('simulation_parameters', {}), width, height,
        on_explode=visualizer.bell
    )
    return Show(simulation, visualizer, duration, config.get('run_control', {}))


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main function to run the show.
    """
    if argv is None:
        argv = sys.argv[1:]

    config = DEFAULT_CONFIG
    setup_logging(config)

    logging.info("--- Terminal Fireworks Starting ---")
    duration = parse_duration(argv)

    show = build_show(duration, config)
    show.visualizer.show_intro(duration)
    try:
        show.sleep(config['run_control'].get('intro_delay', 1.0))
    except KeyboardInterrupt:
        logging.info("Interrupted before the show started.")
        return 0
    show.visualizer.show_starting()
    show.run()

    logging.info("--- Terminal Fireworks Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
