"""fomega: a static checker for System F-omega."""

from .parser import parse, parse_type, parse_kind
from .renamer import rename
from .typechecker import CheckerOptions, TypeChecker, type_of
from .normalize import Strategy, normalize
from .equivalence import check_kind_equiv, check_type_equiv
from .evaluator import reduce

__version__ = "0.1.0"
