from .patcher import (
    apply_replacement,
    apply_replacements,
    banked_function_symbols,
    patch_module,
)

__all__ = [
    "apply_replacement",
    "apply_replacements",
    "banked_function_symbols",
    "patch_module",
]
