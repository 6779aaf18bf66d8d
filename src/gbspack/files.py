import logging
from pathlib import Path
from typing import List

from bankallocator import ObjectPatch
from bankpatcher import patch_module
from objectparser import ObjectModule, parse_module

logger = logging.getLogger(__name__)


def read_object(path: str) -> ObjectModule:
    """Reads an object file, keeping its line endings untouched."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()

    module = parse_module(path, text)
    logger.info("Read %s (%d banked areas)", path, len(module.areas))
    return module


def read_input_list(path: str) -> List[str]:
    """Returns the object paths listed in `path`, one per non-blank line."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def output_filename(original: str, output_path: str, ext: str) -> str:
    """
    Builds the output name for `original`: same stem, extension `ext`,
    inside `output_path` or beside the original when `output_path` is empty.
    """
    original_path = Path(original)
    directory = Path(output_path) if output_path else original_path.parent
    return str(directory / f"{original_path.stem}.{ext}")


def write_patch(patch: ObjectPatch, output_path: str = "", ext: str = "o") -> str:
    filename = output_filename(patch.filename, output_path, ext)

    with open(filename, "w", encoding="utf-8", newline="") as f:
        f.write(patch_module(patch))

    logger.info("Wrote %s", filename)
    return filename
