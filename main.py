# main.py
"""
Main entry point for the Rainfall animation.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the raindrops, the simulation field and the control panel.
4. Runs the frame loop: step the simulation, then draw it.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import numpy as np
import cProfile
import pstats
import io


def main():
    """
    The main function to run the animation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Rainfall Starting ---")

    sim_params = config['simulation_parameters']
    run_params = config['run_control']
    vis_params = config['visualization']

    from particle import ParticleSystem
    from simulation import Simulation, canvas_bounds
    from controller import ParameterController
    from visualization import Visualizer
    from constants import WINDOW_WIDTH, WINDOW_HEIGHT

    # --- Component Initialization ---
    particles = ParticleSystem(sim_params, WINDOW_WIDTH)
    sim = Simulation(particles, sim_params)
    controller = ParameterController(sim.inbox)
    visualizer = Visualizer(
        controller,
        hue=sim.hue,
        min_velocity=sim.min_velocity,
        max_velocity=sim.max_velocity,
        vis_params=vis_params
    )
    bounds = canvas_bounds(WINDOW_WIDTH, WINDOW_HEIGHT)

    profiler = cProfile.Profile() if run_params.get('profile') else None

    log_throttle = run_params.get('log_throttle_steps', 600)
    max_steps = run_params.get('max_steps')
    max_frame_time = run_params.get('max_frame_time', 0.1)

    running = True
    step_num = 0

    if profiler:
        profiler.enable()
    while running:
        # dt is capped at max_frame_time.
        dt = min(visualizer.tick(), max_frame_time)
        sim.step(dt, visualizer.pointer_position(), bounds)
        step_num += 1

        # Drawing reads the settled state and collects slider input for the
        # next step. It returns False when the user quits.
        if not visualizer.draw(particles):
            running = False

        if step_num % log_throttle == 0:
            logging.info(f"Frame {step_num}")
            avg_speed = np.mean(np.linalg.norm(particles.velocities, axis=1))
            logging.debug(f"Frame {step_num} | Average Speed: {avg_speed:.2f} | dt: {dt:.4f}")

        if max_steps is not None and step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping.")
            running = False

    visualizer.close()
    logging.info("Frame loop finished.")

    if profiler:
        profiler.disable()
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Rainfall Shutting Down ---")


if __name__ == "__main__":
    main()
