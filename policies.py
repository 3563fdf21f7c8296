# policies.py
"""
Address-to-slot mapping policies.

Every policy has the signature policy(block_address, cache) -> slot index.
The scanning policies return the slot already holding block_address when
there is one; otherwise they pick a victim.
"""
from cache import INVALID_ADD


def direct_mapping(address, cache):
    return address % cache.size


def lru(address, cache):
    """Victim is the line with the largest time_in_cache."""
    lines = cache.lines
    victim = 0
    for i, line in enumerate(lines):
        if line.tag == address:
            return i
        if line.time_in_cache > lines[victim].time_in_cache:
            victim = i
    return victim


def lfu(address, cache):
    """Victim is the line with the smallest times_used."""
    lines = cache.lines
    victim = 0
    for i, line in enumerate(lines):
        if line.tag == address:
            return i
        if line.times_used < lines[victim].times_used:
            victim = i
    return victim


def fifo(address, cache):
    """
    First empty slot, else the line with the smallest time_in_cache.

    time_in_cache is reset on every service, so once the cache is full this
    evicts the most recently serviced line rather than the oldest insertion.
    """
    lines = cache.lines
    victim = 0
    empty = None
    for i, line in enumerate(lines):
        if line.tag == address:
            return i
        if line.tag == INVALID_ADD:
            # a match further on still wins
            if empty is None:
                empty = i
            continue
        if line.time_in_cache < lines[victim].time_in_cache:
            victim = i
    return victim if empty is None else empty


POLICIES = {
    "direct": direct_mapping,
    "lru": lru,
    "lfu": lfu,
    "fifo": fifo,
}


def get_policy(name):
    if callable(name):
        return name
    key = str(name).lower()
    if key not in POLICIES:
        raise ValueError(f"Policy must be one of {', '.join(POLICIES)}; got {name!r}")
    return POLICIES[key]
