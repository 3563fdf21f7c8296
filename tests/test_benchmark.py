import json
import os

import numpy as np
import pytest

from benchmark import SimulationRunner
from main import main
from mmu import Address
from visualize import format_memories, plot_cost_per_access, plot_hit_miss_by_level

TRACE = os.path.join(os.path.dirname(__file__), os.pardir, "traces", "example.txt")


def _cfg(tmp_path, **instructions):
    inst = {"source": "random", "count": 300, "random_seed": 11}
    inst.update(instructions)
    return {
        "machine": {"ram_size": 16, "l1_size": 2, "l2_size": 4, "l3_size": 8, "policy": "lru"},
        "costs": {"l1": 1, "l2": 2, "l3": 3, "ram": 4},
        "instructions": inst,
        "output": {
            "results_file": str(tmp_path / "out" / "summary.json"),
            "cost_plot": str(tmp_path / "out" / "cost.png"),
            "hitmiss_plot": str(tmp_path / "out" / "hitmiss.png"),
        },
    }


def test_random_run(tmp_path):
    runner = SimulationRunner(_cfg(tmp_path))
    summary, costs = runner.run()
    assert summary["accesses"] == 300
    assert len(costs) == 300
    assert sum(costs) == summary["total_cost"]
    assert summary["policy"] == "lru"
    assert set(costs) <= {1, 3, 6, 10}


def test_same_seed_same_result(tmp_path):
    a, _ = SimulationRunner(_cfg(tmp_path)).run()
    b, _ = SimulationRunner(_cfg(tmp_path)).run()
    assert a["total_cost"] == b["total_cost"]
    assert a["hit_l1"] == b["hit_l1"]


def test_explicit_rng(tmp_path):
    runner = SimulationRunner(_cfg(tmp_path), rng=np.random.default_rng(5))
    assert len(runner.instructions) == 300


def test_file_run_takes_ram_size_from_trace(tmp_path):
    runner = SimulationRunner(_cfg(tmp_path, source="file", file=TRACE))
    assert runner.machine.ram.size == 10
    summary, costs = runner.run()
    assert summary["accesses"] == len(runner.instructions) == 12


def test_bad_source(tmp_path):
    with pytest.raises(ValueError):
        SimulationRunner(_cfg(tmp_path, source="socket"))
    with pytest.raises(ValueError):
        SimulationRunner(_cfg(tmp_path, source="file"))


def test_save_results(tmp_path):
    cfg = _cfg(tmp_path)
    runner = SimulationRunner(cfg)
    summary, _ = runner.run()
    path = runner.save_results(summary, cfg["output"])
    with open(path) as f:
        assert json.load(f)["accesses"] == 300


def test_plots(tmp_path):
    runner = SimulationRunner(_cfg(tmp_path))
    summary, costs = runner.run()
    cost_png = tmp_path / "plots" / "cost.png"
    hitmiss_png = tmp_path / "plots" / "hitmiss.png"
    plot_cost_per_access(costs, summary["total_cost"], str(cost_png))
    plot_hit_miss_by_level(runner.machine.stats, str(hitmiss_png))
    assert cost_png.stat().st_size > 0
    assert hitmiss_png.stat().st_size > 0


def test_format_memories(small_machine):
    handle, _ = small_machine.access(Address(0, 0))
    handle.write(1, 8)
    text = format_memories(small_machine)
    assert text.splitlines()[0] == "L1:"
    assert "0* [0 8 0 0]" in text
    # one empty L1 line plus every L2 and L3 line
    assert text.count("--") == 1 + 4 + 6


def test_main(tmp_path, capsys):
    cfg = _cfg(tmp_path)
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(json.dumps(cfg))
    assert main(["--config", str(cfg_path), "--policy", "fifo", "--count", "50"]) == 0
    with open(cfg["output"]["results_file"]) as f:
        summary = json.load(f)
    assert summary["accesses"] == 50
    assert summary["policy"] == "fifo"
    assert os.path.exists(cfg["output"]["cost_plot"])
    assert "Stopping machine" in capsys.readouterr().out


def test_main_rejects_bad_sizes(tmp_path, capsys):
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(json.dumps(_cfg(tmp_path)))
    assert main(["--config", str(cfg_path), "--l2", "0", "--no-plots"]) == 2
    assert "Invalid configuration" in capsys.readouterr().out
