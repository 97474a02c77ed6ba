# main.py
"""
Main entry point for the coffee steam animation.

This script orchestrates the entire animation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the steam particle system and the terminal visualizer.
4. Runs the tick loop until stopped (Ctrl+C, SIGTERM or max_ticks).
5. Handles clean shutdown.
"""
import logging
import signal
import sys
import threading
from typing import Optional
from utils import setup_logging, load_config
import numpy as np
import cProfile
import pstats
import io

from constants import DEFAULT_LOG_THROTTLE_TICKS, DEFAULT_TICK_INTERVAL_MS


def run(
    system,
    visualizer,
    stop_event: threading.Event,
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
    max_ticks: Optional[int] = None,
    log_throttle: int = DEFAULT_LOG_THROTTLE_TICKS,
) -> int:
    """
    Starts the system and drives update/display at a fixed interval.

    The loop checks `stop_event` every tick and also sleeps on it, so
    setting the event ends the loop within one interval.

    Returns:
        int: The number of ticks executed.
    """
    system.start()

    interval = tick_interval_ms / 1000.0
    tick = 0
    while not stop_event.is_set():
        if max_ticks is not None and tick >= max_ticks:
            logging.info(f"Reached max_ticks ({max_ticks}). Stopping animation.")
            break

        system.update()
        visualizer.draw(system.display())
        tick += 1

        # Hot loops must throttle logs
        if tick % log_throttle == 0:
            logging.info(f"Animation tick {tick}")
            stats = system.get_stats()
            logging.debug(
                f"Tick {tick} | Avg remaining life: {stats['avg_remaining_life_ms']}ms "
                f"| Respawned so far: {stats['total_respawned']}"
            )

        stop_event.wait(interval)

    return tick


def main() -> int:
    """
    The main function to run the animation.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config)

    logging.info("--- Steam Animation Starting ---")

    steam_params = config.get('steam', {})
    run_params = config.get('run_control', {})

    from simulation import ConfigurationError
    from steam import make_steam_system
    from visualization import TerminalVisualizer

    # --- Component Initialization ---
    try:
        system = make_steam_system(**steam_params)
    except ConfigurationError as e:
        logging.critical(f"Aborting before simulation start: {e}")
        return 1

    visualizer = TerminalVisualizer()

    # --- Shutdown signal ---
    stop_event = threading.Event()

    def request_stop(signum, frame):
        logging.info(f"Signal {signum} received. Stopping animation.")
        stop_event.set()

    signal.signal(signal.SIGINT, request_stop)
    signal.signal(signal.SIGTERM, request_stop)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    if profiler:
        profiler.enable()
    try:
        ticks = run(
            system,
            visualizer,
            stop_event,
            tick_interval_ms=run_params.get('tick_interval_ms', DEFAULT_TICK_INTERVAL_MS),
            max_ticks=run_params.get('max_ticks'),
            log_throttle=run_params.get('log_throttle_ticks', DEFAULT_LOG_THROTTLE_TICKS),
        )
    finally:
        if profiler:
            profiler.disable()
        visualizer.close()

    logging.info(f"Animation loop finished after {ticks} ticks.")
    logging.debug(f"Final stats: {system.get_stats()}")
    logging.debug(f"Final mean speed: {np.mean(system.pool.speeds):.4f}")

    # --- Performance Profile Output ---
    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Steam Animation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
