from dataclasses import dataclass, field
from typing import List, Mapping, Tuple

from objectparser import BankArea

BANK_SIZE = 16384

# Bank numbers the MBC1 memory controller cannot select.
HARDWARE_SKIP_BANKS = (0x20, 0x40, 0x60)

ReserveTable = Mapping[int, int]


class PackError(ValueError):
    """Base class for fatal packing failures."""


class OversizedAreaError(PackError):
    def __init__(self, size: int, capacity: int = BANK_SIZE, reserved: int = 0):
        message = (
            f"Area of {size} bytes is too large to fit in a bank of {capacity} bytes"
        )
        if reserved:
            message += f" with {reserved} bytes reserved"
        super().__init__(message)
        self.size = size
        self.capacity = capacity
        self.reserved = reserved


class BankOverflowError(PackError):
    def __init__(self, bank: int, size: int, capacity: int = BANK_SIZE):
        super().__init__(
            f"Bank overflow in {bank}. "
            f"Size was {size} bytes where max allowed is {capacity} bytes"
        )
        self.bank = bank
        self.size = size
        self.capacity = capacity


@dataclass(frozen=True)
class PackConfig:
    """Everything `BankAllocator` needs besides the modules themselves."""

    fixed_bank_filter: int = 0
    start_bank: int = 1
    use_hardware_skip: bool = False
    reserve_table: ReserveTable = field(default_factory=dict)

    def reserved(self, bank: int) -> int:
        return self.reserve_table.get(bank, 0)

    def is_fixed(self, area: BankArea) -> bool:
        return self.fixed_bank_filter != 0 and area.bank != self.fixed_bank_filter


@dataclass
class Bank:
    """An allocation bin. Holds `(module_index, area)` pairs in placement order."""

    areas: List[Tuple[int, BankArea]] = field(default_factory=list)

    @property
    def size(self) -> int:
        return sum(area.size for _, area in self.areas)


@dataclass(frozen=True)
class BankReplacement:
    from_bank: int
    to_bank: int


@dataclass(frozen=True)
class ObjectPatch:
    filename: str
    text: str
    replacements: List[BankReplacement] = field(default_factory=list)
