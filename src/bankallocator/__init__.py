from .models import (
    BANK_SIZE,
    HARDWARE_SKIP_BANKS,
    Bank,
    BankOverflowError,
    BankReplacement,
    ObjectPatch,
    OversizedAreaError,
    PackConfig,
    PackError,
    ReserveTable,
)
from .allocator import BankAllocator, cart_size, max_bank, pack

__all__ = [
    "BANK_SIZE",
    "HARDWARE_SKIP_BANKS",
    "Bank",
    "BankAllocator",
    "BankOverflowError",
    "BankReplacement",
    "ObjectPatch",
    "OversizedAreaError",
    "PackConfig",
    "PackError",
    "ReserveTable",
    "cart_size",
    "max_bank",
    "pack",
]
