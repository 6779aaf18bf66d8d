import json
from typing import Any, Dict, Sequence

from bankallocator import ObjectPatch, cart_size, max_bank


def build_report(
    patches: Sequence[ObjectPatch], output_names: Sequence[str]
) -> Dict[str, Any]:
    """Summarizes where every module's areas were moved."""
    highest = max_bank(patches)

    return {
        "max_bank": highest,
        "cart_size": cart_size(highest),
        "modules": [
            {
                "input": patch.filename,
                "output": output,
                "replacements": [
                    {"from": r.from_bank, "to": r.to_bank} for r in patch.replacements
                ],
            }
            for patch, output in zip(patches, output_names)
        ],
    }


def write_report(report: Dict[str, Any], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
        f.write("\n")
