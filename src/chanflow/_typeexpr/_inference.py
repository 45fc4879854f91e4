"""Unification of type expressions over scoped type parameters."""

import logging

from ._expr import Compound, TypeExpr, TypeName, TypeParam, iter_params, map_params

logger = logging.getLogger(__name__)


class UnificationError(Exception):
    """Raised when two type expressions cannot be made equal."""

    def __init__(self, left: TypeExpr, right: TypeExpr, reason: str = "types are incompatible") -> None:
        self.left = left
        self.right = right
        self.reason = reason
        super().__init__(f"cannot unify {left} with {right}: {reason}")


class TypeInferenceMap(dict[TypeParam, TypeExpr]):
    """Bindings learned for type parameters during one inference pass.

    A binding may point at another parameter; ``resolve`` and ``apply``
    follow such chains. Instances are meant to be created fresh for every
    inference pass and passed around explicitly.
    """

    def resolve(self, expr: TypeExpr) -> TypeExpr:
        """Follow parameter bindings at the top level of ``expr`` only."""
        seen: set[TypeParam] = set()
        while isinstance(expr, TypeParam) and expr in self:
            if expr in seen:
                msg = f"Cyclic binding through {expr.scope}.{expr}"
                raise RuntimeError(msg)
            seen.add(expr)
            expr = self[expr]
        return expr

    def apply(self, expr: TypeExpr) -> TypeExpr:
        """Substitute every known binding into ``expr``, transitively."""
        return map_params(expr, self._apply_param)

    def _apply_param(self, param: TypeParam) -> TypeExpr:
        resolved = self.resolve(param)
        if isinstance(resolved, TypeParam):
            return resolved
        return self.apply(resolved)

    def infer(self, left: TypeExpr, right: TypeExpr) -> None:
        """Unify two expressions, recording any new bindings.

        Args:
            left: First expression.
            right: Second expression.

        Raises:
            UnificationError: At the first point where the expressions
                disagree. Bindings recorded before the failure are kept, so
                the map should be discarded after an error.

        """
        left = self.resolve(left)
        right = self.resolve(right)
        if left == right:
            return
        match left, right:
            case TypeParam(), _:
                self._bind(left, right)
            case _, TypeParam():
                self._bind(right, left)
            case Compound(head=lh, args=la), Compound(head=rh, args=ra) if lh == rh and len(la) == len(ra):
                for a, b in zip(la, ra, strict=True):
                    self.infer(a, b)
            case TypeName(), TypeName():
                raise UnificationError(left, right, "different named types")
            case _:
                raise UnificationError(left, right, "different type constructors")

    def _bind(self, param: TypeParam, expr: TypeExpr) -> None:
        if not isinstance(expr, TypeParam) and param in set(iter_params(self.apply(expr))):
            raise UnificationError(param, expr, "recursive type")
        logger.debug(f"Bound {param.scope}.{param} := {expr}")
        self[param] = expr
