# instructions.py
from dataclasses import dataclass
from enum import Enum

from cache import WORDS_SIZE, check_size
from mmu import Address

ACCESS_PATTERNS = ("sequential", "random", "mixed")
MAX_WRITE_VALUE = 1_000_000


class InstructionFormatError(ValueError):
    pass


class Opcode(Enum):
    READ = "R"
    WRITE = "W"


@dataclass
class Instruction:
    opcode: Opcode
    address: Address
    value: int = 0


class AddressStream:
    """
    Block addresses over [0, num_blocks) following an access pattern.
    sequential wraps around, random is uniform, mixed is mostly sequential
    with a random jump 20% of the time.
    """

    def __init__(self, rng, num_blocks, access_pattern="mixed"):
        if access_pattern not in ACCESS_PATTERNS:
            raise ValueError(f"access pattern must be one of {', '.join(ACCESS_PATTERNS)}; "
                             f"got {access_pattern!r}")
        self.rng = rng
        self.num_blocks = num_blocks
        self.access_pattern = access_pattern
        self._seq_ptr = 0

    def _next_sequential(self):
        addr = self._seq_ptr
        self._seq_ptr = (addr + 1) % self.num_blocks
        return addr

    def next(self):
        if self.access_pattern == "sequential":
            return self._next_sequential()
        elif self.access_pattern == "random":
            return int(self.rng.integers(0, self.num_blocks))
        else:
            if self.rng.random() < 0.8:
                return self._next_sequential()
            return int(self.rng.integers(0, self.num_blocks))


def generate_random_instructions(rng, ram_size, count, words_size=WORDS_SIZE,
                                 read_ratio=0.8, access_pattern="mixed"):
    """
    Build count instructions using the given numpy Generator.
    The same seed always gives the same stream.
    """
    ram_size = check_size("RAM size", ram_size)
    words_size = check_size("words size", words_size)
    if count < 0:
        raise ValueError(f"instruction count must not be negative, got {count}")
    if not 0.0 <= read_ratio <= 1.0:
        raise ValueError(f"read ratio must be within [0, 1], got {read_ratio}")

    stream = AddressStream(rng, ram_size, access_pattern)
    instructions = []
    for _ in range(count):
        address = Address(stream.next(), int(rng.integers(0, words_size)))
        if rng.random() < read_ratio:
            instructions.append(Instruction(Opcode.READ, address))
        else:
            value = int(rng.integers(0, MAX_WRITE_VALUE))
            instructions.append(Instruction(Opcode.WRITE, address, value))
    return instructions


def _parse_int(token, lineno):
    try:
        return int(token)
    except ValueError:
        raise InstructionFormatError(f"line {lineno}: expected an integer, got {token!r}") from None


def read_instructions(path):
    """
    Read a trace file and return (ram_size, instructions).

    The first non-comment line is the RAM size. Every following line is
    "R <block> <offset>" or "W <block> <offset> [value]".
    """
    ram_size = None
    instructions = []
    with open(path, "r") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            parts = line.split()

            if ram_size is None:
                if len(parts) != 1:
                    raise InstructionFormatError(f"line {lineno}: expected the RAM size")
                ram_size = _parse_int(parts[0], lineno)
                if ram_size <= 0:
                    raise InstructionFormatError(f"line {lineno}: RAM size must be positive")
                continue

            op = parts[0].lower()
            if op in ("r", "read"):
                opcode = Opcode.READ
                if len(parts) != 3:
                    raise InstructionFormatError(f"line {lineno}: usage is R <block> <offset>")
                value = 0
            elif op in ("w", "write"):
                opcode = Opcode.WRITE
                if len(parts) not in (3, 4):
                    raise InstructionFormatError(f"line {lineno}: usage is W <block> <offset> [value]")
                value = _parse_int(parts[3], lineno) if len(parts) == 4 else 1
            else:
                raise InstructionFormatError(f"line {lineno}: unknown operation {parts[0]!r}")

            block = _parse_int(parts[1], lineno)
            offset = _parse_int(parts[2], lineno)
            if not 0 <= block < ram_size:
                raise InstructionFormatError(
                    f"line {lineno}: block {block} out of range [0, {ram_size})")
            instructions.append(Instruction(opcode, Address(block, offset), value))

    if ram_size is None:
        raise InstructionFormatError(f"{path}: empty instruction file")
    return ram_size, instructions
