# machine.py
from cache import Cache, RAM, WORDS_SIZE, check_size
from mmu import search
from policies import get_policy
from stats import Costs, Statistics


class Machine:
    """
    RAM, three cache levels and the counters for one simulation run.
    Sizes are validated before anything is allocated and never change.
    """

    def __init__(self, ram_size, l1_size, l2_size, l3_size,
                 policy="direct", costs: Costs = None, words_size=WORDS_SIZE):
        check_size("RAM size", ram_size)
        check_size("L1 size", l1_size)
        check_size("L2 size", l2_size)
        check_size("L3 size", l3_size)
        check_size("words size", words_size)
        self.policy = get_policy(policy)
        self.costs = costs if costs is not None else Costs()

        self.words_size = int(words_size)
        self.ram = RAM(ram_size, words_size)
        self.l1 = Cache(l1_size, words_size)
        self.l2 = Cache(l2_size, words_size)
        self.l3 = Cache(l3_size, words_size)
        self.stats = Statistics()
        # bumped by every access; handles from older accesses are stale
        self.generation = 0

    @classmethod
    def from_config(cls, machine_cfg, costs_cfg=None):
        costs_cfg = costs_cfg or {}
        costs = Costs(
            l1=costs_cfg.get("l1", 1),
            l2=costs_cfg.get("l2", 2),
            l3=costs_cfg.get("l3", 3),
            ram=costs_cfg.get("ram", 4),
        )
        return cls(
            ram_size=machine_cfg.get("ram_size", 10),
            l1_size=machine_cfg.get("l1_size", 2),
            l2_size=machine_cfg.get("l2_size", 4),
            l3_size=machine_cfg.get("l3_size", 6),
            policy=machine_cfg.get("policy", "direct"),
            costs=costs,
            words_size=machine_cfg.get("words_size", WORDS_SIZE),
        )

    @property
    def caches(self):
        return (self.l1, self.l2, self.l3)

    def access(self, address):
        return search(address, self)

    def stop(self):
        self.generation += 1
        for cache in self.caches:
            cache.stop()
        self.ram.stop()
