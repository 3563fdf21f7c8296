# mmu.py
"""
Access engine for the L1 -> L2 -> L3 -> RAM hierarchy.

Write-back: a dirty line is only written to RAM when the eviction cascade
has to push it out of L3. Lines found in L2 or L3 are serviced in place and
never promoted to a faster level.
"""
import logging
from collections import namedtuple

from stats import HitLevel

logger = logging.getLogger(__name__)

Address = namedtuple("Address", ["block", "offset"])
Address.__new__.__defaults__ = (0,)


class AddressOutOfRangeError(IndexError):
    pass


class StaleHandleError(RuntimeError):
    pass


class LineHandle:
    """
    Checked-out access to the line that serviced an access.

    The handle stores (level, slot) rather than the line itself and is only
    valid until the next access on the same machine.
    """

    def __init__(self, machine, level, slot):
        self._machine = machine
        self._generation = machine.generation
        self.level = level  # 0, 1, 2 for L1, L2, L3
        self.slot = slot

    @property
    def valid(self):
        return self._machine.generation == self._generation

    @property
    def line(self):
        if not self.valid:
            raise StaleHandleError(
                f"handle for L{self.level + 1}[{self.slot}] used after a later access")
        return self._machine.caches[self.level].lines[self.slot]

    @property
    def block(self):
        return self.line.block

    @property
    def tag(self):
        return self.line.tag

    @property
    def dirty(self):
        return self.line.updated

    def _check_offset(self, offset):
        words = self._machine.words_size
        if not 0 <= offset < words:
            raise AddressOutOfRangeError(f"offset {offset} out of range [0, {words})")

    def read(self, offset):
        self._check_offset(offset)
        return int(self.line.block[offset])

    def write(self, offset, value):
        self._check_offset(offset)
        line = self.line
        line.block[offset] = value
        line.updated = True

    def __repr__(self):
        state = "" if self.valid else ", stale"
        return f"LineHandle(L{self.level + 1}[{self.slot}]{state})"


def check_address(address, machine):
    if not 0 <= address.block < machine.ram.size:
        raise AddressOutOfRangeError(
            f"block {address.block} out of range [0, {machine.ram.size})")


def _cascade(machine, l1pos):
    """
    Make L1's slot safe to overwrite by pushing dirty lines one level down.
    Each destination slot is chosen by the policy for the moving line's tag.
    """
    policy = machine.policy
    l1, l2, l3 = machine.caches
    victim = l1.lines[l1pos]
    if victim.replaceable:
        return

    l2pos = policy(victim.tag, l2)
    l2line = l2.lines[l2pos]
    if not l2line.replaceable:
        l3pos = policy(l2line.tag, l3)
        l3line = l3.lines[l3pos]
        if not l3line.replaceable:
            logger.debug("flush L3[%d] block %d to RAM", l3pos, l3line.tag)
            machine.ram.blocks[l3line.tag] = l3line.block
        logger.debug("move L2[%d] block %d to L3[%d]", l2pos, l2line.tag, l3pos)
        l3line.move_from(l2line)
        l3line.time_in_cache = 0

    logger.debug("move L1[%d] block %d to L2[%d]", l1pos, victim.tag, l2pos)
    l2line.move_from(victim)
    l2line.time_in_cache = 0


def _clean(line, machine):
    # written back first so no dirty data is dropped by clearing the flag
    if line.updated:
        machine.ram.blocks[line.tag] = line.block
    line.updated = False


def _finalize(machine, level, slot, where):
    line = machine.caches[level].lines[slot]
    cost = machine.costs.for_level(where)
    line.time_in_cache = 0
    line.times_used += 1
    line.cache_hit = where.value
    machine.stats.record(where, cost)
    return LineHandle(machine, level, slot), where


def search(address, machine):
    """
    Service one access and return (handle, hit level).

    Raises AddressOutOfRangeError if the block is outside RAM.
    """
    check_address(address, machine)
    block = address.block
    policy = machine.policy
    l1, l2, l3 = machine.caches
    machine.generation += 1

    l1pos = policy(block, l1)
    l2pos = policy(block, l2)
    l3pos = policy(block, l3)

    for cache in machine.caches:
        cache.tick()

    if l1.lines[l1pos].tag == block:
        return _finalize(machine, 0, l1pos, HitLevel.L1)

    if l2.lines[l2pos].tag == block:
        _clean(l2.lines[l2pos], machine)
        return _finalize(machine, 1, l2pos, HitLevel.L2)

    if l3.lines[l3pos].tag == block:
        _clean(l3.lines[l3pos], machine)
        return _finalize(machine, 2, l3pos, HitLevel.L3)

    _cascade(machine, l1pos)
    line = l1.lines[l1pos]
    assert line.replaceable, f"L1[{l1pos}] still holds dirty block {line.tag} after eviction"
    line.block[:] = machine.ram.blocks[block]
    line.tag = block
    line.updated = False
    return _finalize(machine, 0, l1pos, HitLevel.RAM)
