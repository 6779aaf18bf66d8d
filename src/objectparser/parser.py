import re
from typing import Iterable, Iterator, List, Tuple, assert_never

from .models import (
    AREA_MARKER,
    SYMBOL_PREFIX,
    AreaLine,
    BankArea,
    ObjectFormatError,
    ObjectLine,
    ObjectModule,
    RawLine,
    SymbolLine,
)

DECIMAL_RE = re.compile(r"[0-9]+")
HEX_RE = re.compile(r"[0-9A-Fa-f]+")
SYMBOL_RE = re.compile(r"S (?P<name>[^ ]+) (?P<kind>Def|Ref)(?P<value>[0-9A-F]{6})")


def parse_module(filename: str, text: str) -> ObjectModule:
    """Builds the `ObjectModule` for one object file's contents."""
    return ObjectModule(filename=filename, text=text, areas=parse_areas(text))


def parse_areas(text: str) -> List[BankArea]:
    """
    Returns the banked areas declared in `text`, in file order.

    Raises:
        ObjectFormatError: If an area declaration is malformed.
    """
    areas: List[BankArea] = []

    for line in parse_lines(text):
        match line:
            case AreaLine(bank=bank, size=size):
                areas.append(BankArea(size=size, bank=bank))
            case SymbolLine() | RawLine():
                continue
            case x:
                assert_never(x)

    return areas


def parse_area(line: str) -> BankArea:
    """Decodes a single area declaration line into a `BankArea`."""
    area = parse_area_line(line)
    return BankArea(size=area.size, bank=area.bank)


def parse_lines(text: str) -> List[ObjectLine]:
    """
    Splits object text into typed lines. Concatenating the `str()` of every
    returned line reproduces `text` exactly.
    """
    return [parse_line(line, ending) for line, ending in iter_lines(text)]


def render_lines(lines: Iterable[ObjectLine]) -> str:
    return "".join(str(line) for line in lines)


def parse_line(line: str, ending: str = "") -> ObjectLine:
    if AREA_MARKER in line:
        return parse_area_line(line, ending)

    if line.startswith(SYMBOL_PREFIX):
        match = SYMBOL_RE.fullmatch(line)
        if match:
            return SymbolLine(
                name=match["name"],
                kind=match["kind"],
                value=int(match["value"], 16),
                ending=ending,
            )

    return RawLine(line, ending)


def parse_area_line(line: str, ending: str = "") -> AreaLine:
    tokens = line.split(" ")

    if len(tokens) < 4:
        raise ObjectFormatError("Area declaration is missing fields", line)

    name_parts = tokens[1].split("_")
    if len(name_parts) < 3 or not DECIMAL_RE.fullmatch(name_parts[2]):
        raise ObjectFormatError("Area name has no decimal bank suffix", line)

    if not HEX_RE.fullmatch(tokens[3]):
        raise ObjectFormatError("Area size is not hexadecimal", line)

    return AreaLine(
        tokens=tokens,
        bank=int(name_parts[2]),
        size=int(tokens[3], 16),
        ending=ending,
    )


def iter_lines(text: str) -> Iterator[Tuple[str, str]]:
    """Yields `(line, terminator)` pairs, keeping "\\r\\n" and "\\n" intact."""
    for raw in text.splitlines(keepends=True):
        stripped = raw.rstrip("\r\n")
        yield stripped, raw[len(stripped) :]
