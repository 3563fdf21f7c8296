# stats.py
from dataclasses import dataclass, asdict
from enum import Enum

from cache import check_size


class HitLevel(Enum):
    """Component that serviced an access."""
    L1 = 1
    L2 = 2
    L3 = 3
    RAM = 4

    @property
    def label(self):
        return "RAM" if self is HitLevel.RAM else f"CL{self.value}"

    def __str__(self):
        return self.label


@dataclass(frozen=True)
class Costs:
    """Per-level access costs; an access pays every level it goes through."""
    l1: int = 1
    l2: int = 2
    l3: int = 3
    ram: int = 4

    def __post_init__(self):
        for name in ("l1", "l2", "l3", "ram"):
            check_size(f"{name} cost", getattr(self, name))

    def for_level(self, level: HitLevel) -> int:
        steps = (self.l1, self.l2, self.l3, self.ram)
        return sum(steps[:level.value])


@dataclass
class Statistics:
    hit_l1: int = 0
    hit_l2: int = 0
    hit_l3: int = 0
    hit_ram: int = 0
    miss_l1: int = 0
    miss_l2: int = 0
    miss_l3: int = 0
    total_cost: int = 0

    def record(self, level: HitLevel, cost: int):
        """
        Count one access: a hit where it was serviced and a miss at every
        faster level it went through.
        """
        if level is HitLevel.L1:
            self.hit_l1 += 1
        elif level is HitLevel.L2:
            self.hit_l2 += 1
            self.miss_l1 += 1
        elif level is HitLevel.L3:
            self.hit_l3 += 1
            self.miss_l1 += 1
            self.miss_l2 += 1
        elif level is HitLevel.RAM:
            self.hit_ram += 1
            self.miss_l1 += 1
            self.miss_l2 += 1
            self.miss_l3 += 1
        else:
            raise ValueError(f"Unknown hit level: {level!r}")
        self.total_cost += cost

    @property
    def accesses(self):
        return self.hit_l1 + self.hit_l2 + self.hit_l3 + self.hit_ram

    def hit_rate(self, level: HitLevel) -> float:
        """Hits at level over accesses that reached it."""
        hits = {
            HitLevel.L1: (self.hit_l1, self.miss_l1),
            HitLevel.L2: (self.hit_l2, self.miss_l2),
            HitLevel.L3: (self.hit_l3, self.miss_l3),
        }
        if level is HitLevel.RAM:
            return 1.0 if self.hit_ram else 0.0
        hit, miss = hits[level]
        return hit / (hit + miss) if (hit + miss) else 0.0

    def summary(self):
        out = asdict(self)
        out["accesses"] = self.accesses
        out["avg_cost"] = self.total_cost / self.accesses if self.accesses else 0
        for level in (HitLevel.L1, HitLevel.L2, HitLevel.L3):
            out[f"hit_rate_{level.name.lower()}"] = self.hit_rate(level)
        return out
