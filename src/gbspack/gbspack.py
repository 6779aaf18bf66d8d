from typing import List, Optional, Sequence

from bankallocator import ObjectPatch, ReserveTable, pack
from .files import read_object, write_patch


def pack_files(
    paths: Sequence[str],
    fixed_bank_filter: int = 0,
    start_bank: int = 1,
    use_hardware_skip: bool = False,
    reserve_table: Optional[ReserveTable] = None,
) -> List[ObjectPatch]:
    """Reads every object file in `paths` and packs them together."""
    modules = [read_object(path) for path in paths]
    return pack(
        modules, fixed_bank_filter, start_bank, use_hardware_skip, reserve_table
    )


def write_patches(
    patches: Sequence[ObjectPatch], output_path: str = "", ext: str = "o"
) -> List[str]:
    """Writes every patched module and returns the output filenames in order."""
    return [write_patch(patch, output_path, ext) for patch in patches]
