from .models import (
    AreaLine,
    BankArea,
    ObjectFormatError,
    ObjectLine,
    ObjectModule,
    RawLine,
    SymbolLine,
)
from .parser import parse_area, parse_areas, parse_lines, parse_module, render_lines

__all__ = [
    "AreaLine",
    "BankArea",
    "ObjectFormatError",
    "ObjectLine",
    "ObjectModule",
    "RawLine",
    "SymbolLine",
    "parse_area",
    "parse_areas",
    "parse_lines",
    "parse_module",
    "render_lines",
]
