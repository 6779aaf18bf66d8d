from bankallocator import (
    BankReplacement,
    ObjectPatch,
    PackError,
    cart_size,
    max_bank,
    pack,
)
from bankpatcher import apply_replacements, patch_module
from objectparser import BankArea, ObjectFormatError, ObjectModule, parse_areas
from .files import output_filename, read_input_list, read_object, write_patch
from .gbspack import pack_files, write_patches
from .report import build_report, write_report
from .reserve import ReserveFormatError, parse_reserve

__version__ = "1.2.5"

__all__ = [
    "BankArea",
    "BankReplacement",
    "ObjectFormatError",
    "ObjectModule",
    "ObjectPatch",
    "PackError",
    "ReserveFormatError",
    "apply_replacements",
    "build_report",
    "cart_size",
    "max_bank",
    "output_filename",
    "pack",
    "pack_files",
    "parse_areas",
    "parse_reserve",
    "patch_module",
    "read_input_list",
    "read_object",
    "write_patch",
    "write_patches",
    "write_report",
]
