import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from objectparser import BankArea, ObjectModule
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

logger = logging.getLogger(__name__)

TaggedArea = Tuple[int, BankArea]


def pack(
    modules: Sequence[ObjectModule],
    fixed_bank_filter: int = 0,
    start_bank: int = 1,
    use_hardware_skip: bool = False,
    reserve_table: Optional[ReserveTable] = None,
) -> List[ObjectPatch]:
    """
    Assigns every banked area of `modules` to a bank and returns one
    `ObjectPatch` per module, in input order.

    Raises:
        OversizedAreaError: If an area can never fit in a bank.
        BankOverflowError: If pinned areas overflow their bank.
    """
    config = PackConfig(
        fixed_bank_filter=fixed_bank_filter,
        start_bank=start_bank,
        use_hardware_skip=use_hardware_skip,
        reserve_table=dict(reserve_table or {}),
    )
    return BankAllocator(config).pack(modules)


class BankAllocator:
    """
    First-fit-descending packer of banked areas into fixed-size banks.
    The bank list only lives for the duration of one `allocate()` call.
    """

    def __init__(self, config: PackConfig, capacity: int = BANK_SIZE):
        self.config = config
        self.capacity = capacity
        self._banks: List[Bank] = []

    def pack(self, modules: Sequence[ObjectModule]) -> List[ObjectPatch]:
        banks = self.allocate(modules)

        return [
            ObjectPatch(
                filename=module.filename,
                text=module.text,
                replacements=self.replacements_for(index, banks),
            )
            for index, module in enumerate(modules)
        ]

    def allocate(self, modules: Sequence[ObjectModule]) -> List[Bank]:
        """
        Places every area of `modules` and returns the banks in bank-number
        order, starting at bank 1.
        """
        areas = flatten_areas(modules)
        self._check_area_sizes(areas)

        # Sorting is stable, so equal sizes keep their input order.
        areas = sorted(areas, key=lambda tagged: tagged[1].size, reverse=True)

        self._banks = [Bank() for _ in range(max(self.config.start_bank, 0))]

        try:
            if self.config.fixed_bank_filter != 0:
                self._place_fixed(areas)
            self._check_bank_sizes()

            for tagged in areas:
                if not self.config.is_fixed(tagged[1]):
                    self._place_first_fit(tagged)

            logger.debug("Packed %d areas into %d banks", len(areas), len(self._banks))
            return self._banks
        finally:
            self._banks = []

    def replacements_for(
        self, module_index: int, banks: List[Bank]
    ) -> List[BankReplacement]:
        """
        Walks the banks in order, numbering each one, and returns the
        from/to pairs for the areas owned by `module_index`.
        """
        replacements: List[BankReplacement] = []

        for bank_no, bank in self.numbered_banks(banks):
            for owner, area in bank.areas:
                if owner == module_index:
                    replacements.append(BankReplacement(area.bank, bank_no))

        return replacements

    def numbered_banks(self, banks: List[Bank]) -> Iterator[Tuple[int, Bank]]:
        """Yields `(output_bank_number, bank)`, honoring the hardware skip."""
        bank_no = 1
        for bank in banks:
            if (
                self.config.use_hardware_skip
                and bank.areas
                and bank_no in HARDWARE_SKIP_BANKS
            ):
                bank_no += 1
            yield bank_no, bank
            bank_no += 1

    def _check_area_sizes(self, areas: List[TaggedArea]) -> None:
        for _, area in areas:
            if area.size > self.capacity:
                raise OversizedAreaError(area.size, self.capacity)

    def _place_fixed(self, areas: List[TaggedArea]) -> None:
        """Pins every area outside the filter bank to its original bank number."""
        for tagged in areas:
            area = tagged[1]
            if not self.config.is_fixed(area):
                continue

            if area.bank == 0:
                raise PackError("Cannot pin an area to bank 0")

            while len(self._banks) < area.bank:
                self._banks.append(Bank())

            self._banks[area.bank - 1].areas.append(tagged)
            logger.debug("Pinned %d bytes to bank %d", area.size, area.bank)

    def _check_bank_sizes(self) -> None:
        for bank_no, bank in enumerate(self._banks, start=1):
            size = bank.size
            if size + self.config.reserved(bank_no) > self.capacity:
                raise BankOverflowError(bank_no, size, self.capacity)

    def _place_first_fit(self, tagged: TaggedArea) -> None:
        area = tagged[1]

        for bank_no, bank in enumerate(self._banks, start=1):
            if bank_no < self.config.start_bank:
                continue

            if bank.size + area.size + self.config.reserved(bank_no) <= self.capacity:
                bank.areas.append(tagged)
                logger.debug("Placed %d bytes in bank %d", area.size, bank_no)
                return

        next_bank_no = len(self._banks) + 1
        reserved = self.config.reserved(next_bank_no)
        if area.size + reserved > self.capacity:
            raise OversizedAreaError(area.size, self.capacity, reserved)

        self._banks.append(Bank(areas=[tagged]))
        logger.debug("Opened bank %d for %d bytes", next_bank_no, area.size)


def flatten_areas(modules: Sequence[ObjectModule]) -> List[TaggedArea]:
    return [
        (index, area) for index, module in enumerate(modules) for area in module.areas
    ]


def max_bank(patches: Iterable[ObjectPatch]) -> int:
    """Returns the highest destination bank across all patches, or 0."""
    return max(
        (r.to_bank for patch in patches for r in patch.replacements),
        default=0,
    )


def cart_size(max_bank: int) -> int:
    """
    Returns the smallest power of two that is at least `max_bank + 1`,
    the number of banks the cartridge must provide.
    """
    if max_bank < 0:
        raise ValueError("Bank number must not be negative.")

    return 1 << max_bank.bit_length()
