import random

import pytest
from bankallocator import (
    BANK_SIZE,
    HARDWARE_SKIP_BANKS,
    BankAllocator,
    BankOverflowError,
    BankReplacement,
    OversizedAreaError,
    PackConfig,
    PackError,
    cart_size,
    max_bank,
    pack,
)
from objectparser import BankArea, ObjectModule


def module(filename, *areas):
    return ObjectModule(
        filename=filename,
        text=f"contents of {filename}",
        areas=[BankArea(size=size, bank=bank) for size, bank in areas],
    )


def pairs(patch):
    return [(r.from_bank, r.to_bank) for r in patch.replacements]


def test_pack_areas():
    """Areas from bank 255 are packed around the pinned ones."""
    modules = [
        module("a.o", (5, 1), (16380, 255)),
        module("b.o", (15, 2), (500, 255), (40, 255)),
    ]

    output = pack(modules, 255, 0, True)

    assert [p.filename for p in output] == ["a.o", "b.o"]
    assert [p.text for p in output] == ["contents of a.o", "contents of b.o"]
    assert pairs(output[0]) == [(1, 1), (255, 3)]
    assert pairs(output[1]) == [(255, 1), (255, 1), (2, 2)]


def test_pack_areas_mbc1():
    """Bank 0x20 is never used as an output bank with the hardware skip."""
    modules = [
        module("a.o", (5, 1), (16380, 255)),
        module("b.o", (15, 2), (16380, 255), (16380, 255)),
    ]

    output = pack(modules, 255, 31, True)

    assert pairs(output[0]) == [(1, 1), (255, 31)]
    assert pairs(output[1]) == [(2, 2), (255, 33), (255, 34)]


def test_pack_areas_without_hardware_skip():
    modules = [
        module("a.o", (5, 1), (16380, 255)),
        module("b.o", (15, 2), (16380, 255), (16380, 255)),
    ]

    output = pack(modules, 255, 31, False)

    assert pairs(output[0]) == [(1, 1), (255, 31)]
    assert pairs(output[1]) == [(2, 2), (255, 32), (255, 33)]


def test_pack_without_filter_repacks_everything():
    modules = [module("a.o", (10000, 1), (200, 7)), module("b.o", (9000, 2))]

    output = pack(modules)

    # 10000 opens bank 1, 9000 does not fit beside it, 200 joins bank 1.
    assert pairs(output[0]) == [(1, 1), (7, 1)]
    assert pairs(output[1]) == [(2, 2)]


def test_descending_order_is_stable():
    """Equal sizes are placed in input order; replacements follow placement."""
    modules = [module("a.o", (10000, 255)), module("b.o", (10000, 254), (300, 253))]

    output = pack(modules, 0, 1, False)

    assert pairs(output[0]) == [(255, 1)]
    assert pairs(output[1]) == [(253, 1), (254, 2)]


def test_start_bank_is_respected():
    modules = [module("a.o", (100, 255), (200, 255))]

    output = pack(modules, 0, 5, False)

    assert pairs(output[0]) == [(255, 5), (255, 5)]


@pytest.mark.parametrize("start_bank", [0, 1])
def test_start_bank_zero_and_one_are_equivalent(start_bank):
    output = pack([module("a.o", (100, 255))], 0, start_bank, False)

    assert pairs(output[0]) == [(255, 1)]


def test_empty_inputs():
    assert pack([]) == []

    output = pack([module("empty.o"), module("a.o", (1, 255))])

    assert output[0].replacements == []
    assert pairs(output[1]) == [(255, 1)]


def test_reserve_table_limits_bank():
    modules = [module("a.o", (16000, 255), (300, 255))]

    assert pairs(pack(modules, 0, 1, False)[0]) == [(255, 1), (255, 1)]

    output = pack(modules, 0, 1, False, {1: 0x100})

    assert pairs(output[0]) == [(255, 1), (255, 2)]


def test_oversized_area():
    with pytest.raises(OversizedAreaError, match=f"{BANK_SIZE + 1} bytes"):
        pack([module("a.o", (BANK_SIZE + 1, 255))])


def test_area_exactly_bank_sized():
    output = pack([module("a.o", (BANK_SIZE, 255), (BANK_SIZE, 255))])

    assert pairs(output[0]) == [(255, 1), (255, 2)]


def test_reserved_start_bank_is_skipped_for_large_area():
    output = pack([module("a.o", (16000, 255))], 0, 1, False, {1: 0x400})

    assert pairs(output[0]) == [(255, 2)]


def test_smaller_area_backfills_reserved_start_bank():
    """A large area moves past the reserved start bank; a small one fills it."""
    modules = [module("a.o", (0x2000, 255), (0x500, 255))]

    output = pack(modules, 0, 1, False, {1: 0x3000})

    assert pairs(output[0]) == [(255, 1), (255, 2)]


def test_oversized_for_next_reserved_bank():
    with pytest.raises(OversizedAreaError, match="16000 bytes .* 1024 bytes reserved"):
        pack([module("a.o", (16000, 255))], 0, 1, False, {1: 0x400, 2: 0x400})


def test_hardware_skip_renumbers_pinned_areas_above_skipped_bank():
    """
    A bank occupied at 0x20 shifts every later bank by one, pinned or not,
    so pinned areas above it no longer keep their compiled bank number.
    """
    modules = [module("a.o", (100, 0x20), (100, 0x21), (100, 0x1F))]

    output = pack(modules, 255, 1, True)

    assert pairs(output[0]) == [(0x1F, 0x1F), (0x20, 0x21), (0x21, 0x22)]

    output = pack(modules, 255, 1, False)

    assert pairs(output[0]) == [(0x1F, 0x1F), (0x20, 0x20), (0x21, 0x21)]


def test_fixed_bank_overflow():
    modules = [module("a.o", (10000, 3)), module("b.o", (10000, 3), (20, 255))]

    with pytest.raises(BankOverflowError, match="Bank overflow in 3") as info:
        pack(modules, 255, 1, False)

    assert info.value.bank == 3
    assert info.value.size == 20000
    assert info.value.capacity == BANK_SIZE


def test_fixed_bank_overflow_from_reserve():
    with pytest.raises(BankOverflowError, match="Bank overflow in 2"):
        pack([module("a.o", (16000, 2))], 255, 1, False, {2: 0x400})


def test_pinning_to_bank_zero():
    with pytest.raises(PackError, match="bank 0"):
        pack([module("a.o", (10, 0))], 255)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        pack([module("a.o", (BANK_SIZE * 2, 255))])


def test_pack_is_deterministic():
    rng = random.Random(1234)
    modules = [
        module(f"{i}.o", *[(rng.randint(1, 9000), 255) for _ in range(3)])
        for i in range(10)
    ]

    first = [pairs(p) for p in pack(modules, 0, 1, True)]
    second = [pairs(p) for p in pack(modules, 0, 1, True)]

    assert first == second


def random_area(rng):
    # Pinned candidates stay small so they can never overflow their bank.
    if rng.random() < 0.25:
        return (rng.randint(1, 100), rng.randint(1, 40))
    return (rng.randint(1, 8000), 255)


def random_modules(rng):
    return [
        module(f"{i}.o", *[random_area(rng) for _ in range(rng.randint(0, 4))])
        for i in range(rng.randint(1, 25))
    ]


@pytest.mark.parametrize("seed", range(20))
def test_random_packing_respects_capacity(seed):
    rng = random.Random(seed)
    reserve = {bank: rng.randint(0, 0x800) for bank in range(1, 80)}
    modules = random_modules(rng)
    config = PackConfig(fixed_bank_filter=rng.choice([0, 255]), reserve_table=reserve)

    banks = BankAllocator(config).allocate(modules)

    placed = sorted(
        (owner, area.size, area.bank) for bank in banks for owner, area in bank.areas
    )
    expected = sorted(
        (owner, area.size, area.bank)
        for owner, mod in enumerate(modules)
        for area in mod.areas
    )
    assert placed == expected

    for bank_no, bank in enumerate(banks, start=1):
        assert bank.size + reserve.get(bank_no, 0) <= BANK_SIZE

        for _, area in bank.areas:
            if config.is_fixed(area):
                assert area.bank == bank_no


@pytest.mark.parametrize("seed", range(10))
def test_random_pinned_areas_keep_their_bank(seed):
    rng = random.Random(seed)
    modules = random_modules(rng)

    output = pack(modules, 255, 1, False)

    for mod, patch in zip(modules, output):
        assert len(patch.replacements) == len(mod.areas)
        for replacement in patch.replacements:
            if replacement.from_bank != 255:
                assert replacement.to_bank == replacement.from_bank


@pytest.mark.parametrize("start_bank", [1, 0x1E, 0x3F])
def test_hardware_skip_never_targets_unusable_banks(start_bank):
    modules = [module(f"{i}.o", (9000, 255), (8000, 255)) for i in range(70)]

    output = pack(modules, 0, start_bank, True)

    targets = {r.to_bank for patch in output for r in patch.replacements}
    assert targets.isdisjoint(HARDWARE_SKIP_BANKS)
    assert max(targets) > 0x60


def test_max_bank():
    output = pack([module("a.o", (16000, 255), (16000, 255), (16000, 255))])

    assert max_bank(output) == 3
    assert max_bank([]) == 0
    assert max_bank(pack([module("empty.o")])) == 0


@pytest.mark.parametrize(
    "highest, size",
    [
        (0, 1),
        (1, 2),
        (3, 4),
        (5, 8),
        (6, 8),
        (7, 8),
        (8, 16),
        (31, 32),
        (32, 64),
        (33, 64),
    ],
)
def test_cart_size(highest, size):
    assert cart_size(highest) == size


def test_cart_size_is_monotonic():
    sizes = [cart_size(n) for n in range(512)]

    assert sizes == sorted(sizes)


def test_cart_size_rejects_negative():
    with pytest.raises(ValueError):
        cart_size(-1)


def test_replacement_fields():
    replacement = BankReplacement(from_bank=255, to_bank=3)

    assert replacement.from_bank == 255
    assert replacement.to_bank == 3
