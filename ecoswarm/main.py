"""
EcoSwarm Main Simulation Runner
===============================
Entry point for running EcoSwarm simulations.

Provides:
- CLI interface
- Benchmark scenarios
- JSON export of run metrics
- Population / pheromone plots
"""

import argparse
import logging
from typing import Any, Dict, Optional

from tqdm import tqdm

from .config import SimulationConfig, create_default_config, create_small_test_config
from .metrics import MetricsCollector
from .simulation import Simulation

logger = logging.getLogger(__name__)

SCENARIOS = ["small", "standard", "predators", "birds"]


def create_benchmark_config(scenario: str = "standard") -> SimulationConfig:
    """
    Create configuration for benchmark scenarios.

    Args:
        scenario: One of "small", "standard", "predators", "birds"

    Returns:
        SimulationConfig for the scenario
    """
    if scenario == "small":
        # Small quick test
        return create_small_test_config()

    config = create_default_config()
    config.scenario_name = scenario

    if scenario == "standard":
        # Foraging colony with a few birds
        config.initial_population = {"ant": 20, "bird": 10}

    elif scenario == "predators":
        # Full food web
        config.initial_population = {"ant": 30, "bird": 15, "anteater": 2, "snake": 2}

    elif scenario == "birds":
        # Flocking and perching only
        config.initial_population = {"bird": 30}
        config.world.food_spawn_rate = 0.8

    else:
        raise ValueError(f"Unknown scenario: {scenario}")

    return config


def run_simulation(
    config: Optional[SimulationConfig] = None,
    n_steps: int = 1000,
    seed: Optional[int] = None,
    progress: bool = True,
) -> Dict[str, Any]:
    """
    Run a simulation and collect per-step metrics.

    Args:
        config: Simulation configuration
        n_steps: Number of steps to run
        seed: Random seed
        progress: Show a progress bar

    Returns:
        Dictionary with the simulation, the metrics collector and the
        final statistics
    """
    if config is None:
        config = create_default_config()

    sim = Simulation(config, seed=seed)
    collector = MetricsCollector(config.scenario_name, seed)
    collector.collect_step(sim)

    logger.info(f"Running {n_steps} steps ({config.scenario_name})")

    steps = range(n_steps)
    if progress:
        steps = tqdm(steps, desc="Simulation")

    for _ in steps:
        sim.step()
        collector.collect_step(sim)

    collector.finalize()
    final = sim.get_statistics()
    logger.info(f"Simulation finished at tick {final['tick']}: {final['population']}")

    return {
        "simulation": sim,
        "metrics": collector,
        "final": final,
    }


def print_config_summary(config: SimulationConfig):
    """Print a summary of the configuration"""
    print("\n" + "=" * 60)
    print("EcoSwarm Configuration Summary")
    print("=" * 60)
    print(f"Scenario: {config.scenario_name}")
    print(f"World: {config.world.width:.0f}x{config.world.height:.0f}")
    print(f"Max food: {config.world.max_food} (spawn rate {config.world.food_spawn_rate})")
    print()
    print("Initial population:")
    for name, count in config.initial_population.items():
        print(f"  - {name}: {count}")
    print()
    print("Pheromone:")
    print(f"  - Cell size: {config.pheromone.cell_size}")
    print(f"  - Evaporation: {config.pheromone.evaporation_rate}")
    print(f"  - Deposit: {config.pheromone.deposit_amount}")
    print("=" * 60 + "\n")


def main():
    """CLI entry point"""
    parser = argparse.ArgumentParser(
        description="EcoSwarm Multi-Species Ecosystem Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run quick test simulation
  python -m ecoswarm.main --scenario small --steps 500

  # Full food web with results and plots
  python -m ecoswarm.main --scenario predators --steps 5000 --seed 7 \\
      --output results.json --plot run.png
        """
    )

    parser.add_argument(
        "--scenario",
        choices=SCENARIOS,
        default="standard",
        help="Benchmark scenario"
    )
    parser.add_argument("--steps", type=int, default=1000, help="Simulation steps")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--output", type=str, help="Output path for JSON results")
    parser.add_argument("--include-steps", action="store_true",
                        help="Include per-step metrics in the JSON output")
    parser.add_argument("--plot", type=str, help="Output path for the summary figure")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--quiet", action="store_true", help="Disable the progress bar")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    config = create_benchmark_config(args.scenario)
    print_config_summary(config)

    results = run_simulation(config, n_steps=args.steps, seed=args.seed,
                             progress=not args.quiet)

    summary = results["metrics"].summary()
    print("\nSimulation complete!")
    print(f"Final population: {summary['final_population']}")
    print(f"Max generation: {summary['max_generation']}")
    print(f"Births: {summary['births']}  Deaths: {summary['deaths']}  "
          f"Kills: {summary['kills']}  Nest spawns: {summary['nest_spawns']}")

    if args.output:
        results["metrics"].save(args.output, include_steps=args.include_steps)
        print(f"Saved results to {args.output}")

    if args.plot:
        from .visualize import plot_run_summary
        plot_run_summary(results["metrics"].population_history(),
                         results["simulation"].ctx.pheromone,
                         output_path=args.plot)


if __name__ == "__main__":
    main()
