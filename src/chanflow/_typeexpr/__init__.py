"""Type expressions and unification.

This module contains:
- TypeName, TypeParam, Compound: immutable expression tree nodes
- Type: mutable holder refined and lithified during inference
- TypeInferenceMap: parameter bindings learned by unification
- parse_type: parser for the Go-flavoured type syntax
"""

from ._expr import Compound, Type, TypeExpr, TypeName, TypeParam, iter_params, map_params
from ._inference import TypeInferenceMap, UnificationError
from ._parser import TypeSyntaxError, parse_type

__all__ = [
    "Compound",
    "Type",
    "TypeExpr",
    "TypeInferenceMap",
    "TypeName",
    "TypeParam",
    "TypeSyntaxError",
    "UnificationError",
    "iter_params",
    "map_params",
    "parse_type",
]
