# visualize.py
import os
import numpy as np
import matplotlib.pyplot as plt

from cache import INVALID_ADD


def _ensure_dir(outpath):
    directory = os.path.dirname(outpath)
    if directory:
        os.makedirs(directory, exist_ok=True)


def plot_cost_per_access(costs, total_cost, outpath):
    _ensure_dir(outpath)
    # cumulative cost plus the cost of each access underneath
    plt.figure(figsize=(8,4))
    plt.plot(np.cumsum(costs), linewidth=1.0, label="cumulative")
    plt.plot(costs, marker='.', linestyle='none', markersize=2, label="per access")
    plt.title(f"Access Cost (Total: {total_cost})")
    plt.xlabel("Access Index")
    plt.ylabel("Cost")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()


def plot_hit_miss_by_level(stats, outpath):
    _ensure_dir(outpath)
    levels = ['L1', 'L2', 'L3', 'RAM']
    hits = [stats.hit_l1, stats.hit_l2, stats.hit_l3, stats.hit_ram]
    misses = [stats.miss_l1, stats.miss_l2, stats.miss_l3, 0]
    x = np.arange(len(levels))
    plt.figure(figsize=(6,4))
    plt.bar(x - 0.2, hits, width=0.4, label='Hit')
    plt.bar(x + 0.2, misses, width=0.4, label='Miss')
    plt.xticks(x, levels)
    plt.ylabel("Accesses")
    plt.title("Hits/Misses by Level")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()


def _format_line(line):
    tag = "--" if line.tag == INVALID_ADD else str(line.tag)
    words = " ".join(str(int(w)) for w in line.block)
    flag = "*" if line.updated else " "
    return f"{tag:>4}{flag} [{words}] used={line.times_used} age={line.time_in_cache}"


def format_memories(machine):
    """Text dump of every level; only readable for small machines."""
    out = []
    for name, cache in zip(("L1", "L2", "L3"), machine.caches):
        out.append(f"{name}:")
        for i, line in enumerate(cache.lines):
            out.append(f"  {i:>3} {_format_line(line)}")
    out.append("RAM:")
    for i, block in enumerate(machine.ram.blocks):
        out.append(f"  {i:>3} [{' '.join(str(int(w)) for w in block)}]")
    return "\n".join(out)
