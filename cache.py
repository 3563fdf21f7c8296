# cache.py
import numpy as np

INVALID_ADD = -1
WORDS_SIZE = 4


class MemoryConfigError(ValueError):
    pass


def check_size(name, size):
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size <= 0:
        raise MemoryConfigError(f"{name} must be a positive integer, got {size!r}")
    return int(size)


class Line:
    """
    One cache slot.
    Holds a private copy of a block, the block address it represents (tag)
    and the bookkeeping used by the replacement policies.
    """

    def __init__(self, words_size=WORDS_SIZE):
        self.block = np.zeros(words_size, dtype=np.int64)
        self.tag = INVALID_ADD
        self.updated = False  # dirty: differs from RAM's copy
        self.cache_hit = 0    # last level that serviced this line (1..4)
        self.times_used = 0
        self.time_in_cache = 0

    @property
    def replaceable(self):
        return self.tag == INVALID_ADD or not self.updated

    def move_from(self, other):
        """
        Move other's content into this slot and leave other empty.
        """
        self.block[:] = other.block
        self.tag = other.tag
        self.updated = other.updated
        self.cache_hit = other.cache_hit
        self.times_used = other.times_used
        self.time_in_cache = other.time_in_cache
        other.tag = INVALID_ADD
        other.updated = False

    def __repr__(self):
        return (f"Line(tag={self.tag}, updated={self.updated}, "
                f"times_used={self.times_used}, time_in_cache={self.time_in_cache})")


class Cache:
    """Fixed-size sequence of lines, all INVALID at start."""

    def __init__(self, size, words_size=WORDS_SIZE):
        self.size = check_size("cache size", size)
        self.words_size = check_size("words size", words_size)
        self.lines = [Line(self.words_size) for _ in range(self.size)]

    def __len__(self):
        return self.size

    def tick(self):
        for line in self.lines:
            line.time_in_cache += 1

    def stop(self):
        self.lines = []
        self.size = 0


class RAM:
    """Backing store: size blocks of words_size zeroed words."""

    def __init__(self, size, words_size=WORDS_SIZE):
        self.size = check_size("RAM size", size)
        self.words_size = check_size("words size", words_size)
        self.blocks = np.zeros((self.size, self.words_size), dtype=np.int64)

    def __len__(self):
        return self.size

    def stop(self):
        self.blocks = np.zeros((0, self.words_size), dtype=np.int64)
        self.size = 0
