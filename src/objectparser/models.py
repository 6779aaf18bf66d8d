from dataclasses import dataclass, field, replace
from typing import List, Union

AREA_MARKER = "A _CODE_"
SYMBOL_PREFIX = "S "
BANKED_FUNCTION_PREFIX = "b_"
BANK_SYMBOL_MARKER = "__bank_"


class ObjectFormatError(ValueError):
    """Raised when an area declaration line cannot be decoded."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(f"{message}: {line!r}" if line else message)
        self.line = line


@dataclass(frozen=True)
class BankArea:
    size: int
    bank: int


@dataclass(frozen=True)
class ObjectModule:
    filename: str
    text: str
    areas: List[BankArea] = field(default_factory=list)


@dataclass(frozen=True)
class AreaLine:
    """
    A banked code area declaration, e.g. `A _CODE_5 size 1F flags 0 addr 0`.
    `tokens` is the line split on single spaces so rendering is byte-exact.
    """

    tokens: List[str]
    bank: int
    size: int
    ending: str = ""

    def with_bank(self, bank: int) -> "AreaLine":
        tokens = list(self.tokens)
        name_parts = tokens[1].split("_")
        name_parts[2] = str(bank)
        tokens[1] = "_".join(name_parts)
        return replace(self, tokens=tokens, bank=bank)

    def __str__(self) -> str:
        return " ".join(self.tokens) + self.ending


@dataclass(frozen=True)
class SymbolLine:
    """
    A symbol declaration, e.g. `S ___bank_SCRIPT_3 Def0000FF`.
    `kind` is "Def" or "Ref"; `value` is the decoded hex field.
    """

    name: str
    kind: str
    value: int
    ending: str = ""

    @property
    def is_definition(self) -> bool:
        return self.kind == "Def"

    def with_value(self, value: int) -> "SymbolLine":
        return replace(self, value=value)

    def __str__(self) -> str:
        return f"{SYMBOL_PREFIX}{self.name} {self.kind}{self.value:06X}{self.ending}"


@dataclass(frozen=True)
class RawLine:
    text: str
    ending: str = ""

    def __str__(self) -> str:
        return self.text + self.ending


ObjectLine = Union[AreaLine, SymbolLine, RawLine]
