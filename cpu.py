# cpu.py
from collections import namedtuple

from instructions import Opcode

AccessRecord = namedtuple("AccessRecord", ["level", "cost", "value"])


def execute(machine, instruction):
    """
    Run one instruction: a READ returns the addressed word, a WRITE stores
    instruction.value there and marks the line dirty.
    """
    handle, level = machine.access(instruction.address)
    offset = instruction.address.offset
    if instruction.opcode is Opcode.WRITE:
        handle.write(offset, instruction.value)
        value = instruction.value
    else:
        value = handle.read(offset)
    return AccessRecord(level, machine.costs.for_level(level), value)


def run(machine, instructions):
    return [execute(machine, instruction) for instruction in instructions]
