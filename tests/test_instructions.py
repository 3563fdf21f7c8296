import numpy as np
import pytest

from instructions import (
    AddressStream, Instruction, InstructionFormatError, Opcode,
    generate_random_instructions, read_instructions,
)
from mmu import Address


def test_generation_is_reproducible():
    a = generate_random_instructions(np.random.default_rng(1507), 10, 200)
    b = generate_random_instructions(np.random.default_rng(1507), 10, 200)
    assert a == b
    assert len(a) == 200


@pytest.mark.parametrize("pattern", ["sequential", "random", "mixed"])
def test_generated_addresses_are_in_range(pattern):
    insts = generate_random_instructions(np.random.default_rng(3), 7, 300,
                                         words_size=2, access_pattern=pattern)
    assert all(0 <= i.address.block < 7 for i in insts)
    assert all(0 <= i.address.offset < 2 for i in insts)


def test_read_ratio_bounds():
    rng = np.random.default_rng(0)
    reads = generate_random_instructions(rng, 5, 50, read_ratio=1.0)
    writes = generate_random_instructions(rng, 5, 50, read_ratio=0.0)
    assert all(i.opcode is Opcode.READ for i in reads)
    assert all(i.opcode is Opcode.WRITE for i in writes)
    with pytest.raises(ValueError):
        generate_random_instructions(rng, 5, 5, read_ratio=1.5)


def test_sequential_stream_wraps():
    stream = AddressStream(np.random.default_rng(0), 3, "sequential")
    assert [stream.next() for _ in range(7)] == [0, 1, 2, 0, 1, 2, 0]


def test_unknown_access_pattern():
    with pytest.raises(ValueError):
        AddressStream(np.random.default_rng(0), 3, "strided")


def test_read_instructions(tmp_path):
    path = tmp_path / "trace.txt"
    path.write_text(
        "# header comment\n"
        "12\n"
        "\n"
        "R 3 1\n"
        "w 4 0 99  # store\n"
        "WRITE 5 2\n"
        "read 0 0\n"
    )
    ram_size, insts = read_instructions(path)
    assert ram_size == 12
    assert insts == [
        Instruction(Opcode.READ, Address(3, 1)),
        Instruction(Opcode.WRITE, Address(4, 0), 99),
        Instruction(Opcode.WRITE, Address(5, 2), 1),
        Instruction(Opcode.READ, Address(0, 0)),
    ]


@pytest.mark.parametrize("body,lineno", [
    ("10\nX 1 0\n", 2),
    ("10\nR 1\n", 2),
    ("10\nR 1 0\nW a 0\n", 3),
    ("10\nR 10 0\n", 2),
    ("ten\n", 1),
    ("0\n", 1),
])
def test_read_instructions_rejects_bad_lines(tmp_path, body, lineno):
    path = tmp_path / "bad.txt"
    path.write_text(body)
    with pytest.raises(InstructionFormatError, match=f"line {lineno}"):
        read_instructions(path)


def test_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("# nothing\n")
    with pytest.raises(InstructionFormatError):
        read_instructions(path)
