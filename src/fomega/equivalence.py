"""Type and kind equivalence for fomega.

Types are compared up to alpha-renaming of binders. No beta-reduction
happens here: callers normalize both sides first when that is required.
"""

from .core import *
from .normalize import substitute
from .errors import TypeClash, VariableClash


def check_kind_equiv(received: Kind, expected: Kind) -> None:
    """Raise ``TypeClash`` unless the two kinds are identical.

    Kinds have no binders, so frozen-dataclass equality is the structural
    comparison.
    """
    if received != expected:
        raise TypeClash(received, expected,
                        message=f"kind clash: expected kind {expected} but got {received}")


def _rebind(received: Annotated, expected: Annotated) -> Annotated:
    """Rename the received binder onto the expected one and return the body."""
    re, ex = received.desc, expected.desc
    check_kind_equiv(re.param_kind, ex.param_kind)
    return substitute(re.body, re.param, Annotated(TVar(ex.param), ex.param_kind))


def check_type_equiv(received: Annotated, expected: Annotated) -> None:
    """Raise ``VariableClash`` or ``TypeClash`` unless the types are alpha-equivalent."""
    re, ex = received.desc, expected.desc

    if isinstance(re, TInt) and isinstance(ex, TInt):
        return

    if isinstance(re, TVar) and isinstance(ex, TVar):
        if re.name != ex.name:
            raise VariableClash(received, expected)
        return

    if isinstance(re, TArrow) and isinstance(ex, TArrow):
        check_type_equiv(re.left, ex.left)
        check_type_equiv(re.right, ex.right)
        return

    if isinstance(re, TForall) and isinstance(ex, TForall):
        check_type_equiv(_rebind(received, expected), ex.body)
        return

    if isinstance(re, TLam) and isinstance(ex, TLam):
        check_type_equiv(_rebind(received, expected), ex.body)
        return

    # Applications with a variable head survive normalization.
    if isinstance(re, TApp) and isinstance(ex, TApp):
        check_type_equiv(re.function, ex.function)
        check_type_equiv(re.argument, ex.argument)
        return

    raise TypeClash(received, expected)
