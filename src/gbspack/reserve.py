import re
from typing import Dict

ENTRY_RE = re.compile(r"(?P<bank>[0-9]+):(?P<size>[0-9A-Fa-f]+)")


class ReserveFormatError(ValueError):
    pass


def parse_reserve(text: str) -> Dict[int, int]:
    """
    Parses a reserve list such as "1:7F3,2:00F" into `{1: 0x7F3, 2: 0xF}`.
    Bank numbers are decimal, reserved sizes are hexadecimal.
    """
    table: Dict[int, int] = {}

    for entry in text.split(","):
        entry = entry.strip()
        if not entry:
            continue

        match = ENTRY_RE.fullmatch(entry)
        if not match:
            raise ReserveFormatError(
                f"Invalid reserve entry '{entry}', expected BANK:HEXSIZE"
            )

        bank = int(match["bank"])
        if bank in table:
            raise ReserveFormatError(f"Bank {bank} is reserved more than once")

        table[bank] = int(match["size"], 16)

    return table
