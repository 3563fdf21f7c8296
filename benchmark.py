# benchmark.py
import os
import json
import time
import logging
import numpy as np

from cpu import run
from instructions import generate_random_instructions, read_instructions
from machine import Machine

logger = logging.getLogger(__name__)

SOURCES = ("random", "file")


class SimulationRunner:
    def __init__(self, cfg, rng=None):
        self.cfg = cfg
        inst_cfg = cfg.get("instructions", {})
        machine_cfg = dict(cfg.get("machine", {}))
        self.source = inst_cfg.get("source", "random")
        if self.source not in SOURCES:
            raise ValueError(f"instruction source must be one of {', '.join(SOURCES)}; "
                             f"got {self.source!r}")

        if self.source == "file":
            path = inst_cfg.get("file")
            if not path:
                raise ValueError("instruction source 'file' needs instructions.file")
            # the trace decides the RAM size
            ram_size, self.instructions = read_instructions(path)
            machine_cfg["ram_size"] = ram_size
            self.machine = Machine.from_config(machine_cfg, cfg.get("costs"))
        else:
            self.rng = rng if rng is not None else np.random.default_rng(inst_cfg.get("random_seed", None))
            self.machine = Machine.from_config(machine_cfg, cfg.get("costs"))
            self.instructions = generate_random_instructions(
                self.rng,
                ram_size=self.machine.ram.size,
                count=inst_cfg.get("count", 1000),
                words_size=self.machine.words_size,
                read_ratio=inst_cfg.get("read_ratio", 0.8),
                access_pattern=inst_cfg.get("access_pattern", "mixed"),
            )
        self.records = []

    def run(self):
        logger.info("running %d instructions (%s, policy %s)",
                    len(self.instructions), self.source, self.machine.policy.__name__)
        start = time.time()
        self.records = run(self.machine, self.instructions)
        end = time.time()

        costs = [r.cost for r in self.records]
        summary = self.machine.stats.summary()
        summary["policy"] = self.machine.policy.__name__
        summary["duration_s"] = end - start
        summary["throughput_ops_per_sec"] = len(costs) / (end - start) if (end - start) > 0 else 0
        logger.info("done: total cost %d over %d accesses", summary["total_cost"], summary["accesses"])
        return summary, costs

    def save_results(self, summary, out_cfg):
        path = out_cfg.get("results_file", os.path.join("results", "summary.json"))
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w") as f:
            json.dump(summary, f, indent=2)
        return path
