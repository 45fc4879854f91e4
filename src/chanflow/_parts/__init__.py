"""Part variants: the computation behind a node.

Every variant exposes the same surface, its pins (``pins_of``) and the
imports it needs (``imports_of``), so graph bookkeeping and inference
never special-case a variant.
"""

from ._pin import PinDefinition, PinDirection
from ._variants import (
    PART_MODELS,
    Broadcast,
    Code,
    CodePin,
    Gather,
    Part,
    PartType,
    Transform,
    Unslicer,
    imports_of,
    parse_part,
    pins_of,
)

__all__ = [
    "PART_MODELS",
    "Broadcast",
    "Code",
    "CodePin",
    "Gather",
    "Part",
    "PartType",
    "PinDefinition",
    "PinDirection",
    "Transform",
    "Unslicer",
    "imports_of",
    "parse_part",
    "pins_of",
]
