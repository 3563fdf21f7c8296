# main.py
import sys
import json
import logging
import argparse

from benchmark import SimulationRunner
from visualize import plot_cost_per_access, plot_hit_miss_by_level, format_memories

SMALL_RAM = 10


def load_config(path="config.json"):
    with open(path, "r") as f:
        return json.load(f)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Simulate an L1/L2/L3 write-back cache hierarchy")
    parser.add_argument("--config", default="config.json", help="JSON configuration file")
    parser.add_argument("--policy", choices=["direct", "lru", "lfu", "fifo"])
    parser.add_argument("--source", choices=["random", "file"])
    parser.add_argument("--file", help="instruction trace (implies --source file)")
    parser.add_argument("--ram", type=int, help="RAM size in blocks")
    parser.add_argument("--l1", type=int, help="L1 size in lines")
    parser.add_argument("--l2", type=int, help="L2 size in lines")
    parser.add_argument("--l3", type=int, help="L3 size in lines")
    parser.add_argument("--count", type=int, help="number of random instructions")
    parser.add_argument("--seed", type=int, help="random seed")
    parser.add_argument("--no-plots", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every relocation")
    return parser.parse_args(argv)


def apply_overrides(cfg, args):
    machine = cfg.setdefault("machine", {})
    inst = cfg.setdefault("instructions", {})
    for key, value in (("policy", args.policy), ("ram_size", args.ram),
                       ("l1_size", args.l1), ("l2_size", args.l2), ("l3_size", args.l3)):
        if value is not None:
            machine[key] = value
    if args.file:
        inst["source"] = "file"
        inst["file"] = args.file
    elif args.source:
        inst["source"] = args.source
    if args.count is not None:
        inst["count"] = args.count
    if args.seed is not None:
        inst["random_seed"] = args.seed
    cfg.setdefault("output", {})
    return cfg


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(message)s')
    cfg = apply_overrides(load_config(args.config), args)

    try:
        runner = SimulationRunner(cfg)
    except (ValueError, OSError) as e:
        print(f"Invalid configuration: {e}")
        return 2

    machine = runner.machine
    print("Starting machine with config:", cfg["machine"])
    if machine.ram.size <= SMALL_RAM:
        print(format_memories(machine))

    summary, costs = runner.run()

    if machine.ram.size <= SMALL_RAM:
        print(format_memories(machine))
    results_path = runner.save_results(summary, cfg["output"])
    print("Simulation Summary:", summary)
    print("Results saved to:", results_path)

    if not args.no_plots:
        plot_cost_per_access(costs, summary["total_cost"], cfg["output"].get("cost_plot", "results/cumulative_cost.png"))
        plot_hit_miss_by_level(machine.stats, cfg["output"].get("hitmiss_plot", "results/hit_miss_by_level.png"))
        print("Plots saved in results/")

    machine.stop()
    print("Stopping machine...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
