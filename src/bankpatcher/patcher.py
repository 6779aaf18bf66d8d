from typing import Iterable, List, Set, assert_never

from bankallocator import BankReplacement, ObjectPatch
from objectparser import (
    AreaLine,
    ObjectLine,
    RawLine,
    SymbolLine,
    parse_lines,
    render_lines,
)
from objectparser.models import BANK_SYMBOL_MARKER, BANKED_FUNCTION_PREFIX


def patch_module(patch: ObjectPatch) -> str:
    """Returns the patched text of one packed module."""
    return apply_replacements(patch.text, patch.replacements)


def apply_replacements(text: str, replacements: Iterable[BankReplacement]) -> str:
    """
    Applies each replacement in order. Every replacement is a full pass over
    the result of the previous one.
    """
    lines = parse_lines(text)
    banked = banked_function_symbols(lines)

    for replacement in replacements:
        lines = rewrite_lines(lines, replacement, banked)

    return render_lines(lines)


def apply_replacement(text: str, replacement: BankReplacement) -> str:
    return apply_replacements(text, [replacement])


def banked_function_symbols(lines: Iterable[ObjectLine]) -> Set[str]:
    """
    Returns the names of `b_<name>` symbols whose function `_<name>` is
    declared in the same module.
    """
    lines = list(lines)
    declared = {line.name for line in lines if isinstance(line, SymbolLine)}

    return {
        line.name
        for line in lines
        if isinstance(line, SymbolLine)
        and line.name.startswith(BANKED_FUNCTION_PREFIX)
        and "_" + line.name[len(BANKED_FUNCTION_PREFIX) :] in declared
    }


def rewrite_lines(
    lines: List[ObjectLine], replacement: BankReplacement, banked: Set[str]
) -> List[ObjectLine]:
    return [rewrite_line(line, replacement, banked) for line in lines]


def rewrite_line(
    line: ObjectLine, replacement: BankReplacement, banked: Set[str]
) -> ObjectLine:
    match line:
        case AreaLine(bank=bank) if bank == replacement.from_bank:
            return line.with_bank(replacement.to_bank)

        case SymbolLine() if is_bank_symbol(line, banked) and (
            line.value == replacement.from_bank
        ):
            return line.with_value(replacement.to_bank)

        case AreaLine() | SymbolLine() | RawLine():
            return line

        case x:
            assert_never(x)


def is_bank_symbol(line: SymbolLine, banked: Set[str]) -> bool:
    if not line.is_definition:
        return False

    return line.name in banked or BANK_SYMBOL_MARKER in line.name
