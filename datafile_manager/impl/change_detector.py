"""
Structural comparison of datafiles.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

from datafile_manager.impl.util import ComparisonError, log

_SCALAR_TYPES = (str, int, float)


def has_changed(previous: Optional[Any], candidate: Any) -> bool:
    """
    Returns True if ``candidate`` differs structurally from ``previous``.

    ``previous`` is None when no datafile has been accepted yet, in which case any candidate counts
    as changed. If the two documents cannot be compared, they are also reported as changed, so that
    the manager re-initializes rather than keeps serving data it cannot vouch for.
    """
    if previous is None:
        return True
    try:
        return not structurally_equal(previous, candidate)
    except (ComparisonError, RecursionError) as e:
        log.debug("Could not compare datafiles, treating as changed: %s" % e)
        return True


def structurally_equal(a: Any, b: Any) -> bool:
    """
    Deep equality over mappings, sequences and JSON scalars.

    Mappings are compared without regard to key order; lists and tuples are compared in order and
    are interchangeable. Booleans never equal numbers.

    :raises ComparisonError: if either value contains an unsupported type
    """
    if isinstance(a, Mapping):
        if not isinstance(b, Mapping):
            _check_supported(b)
            return False
        if len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b:
                return False
            if not structurally_equal(value, b[key]):
                return False
        return True

    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)):
            _check_supported(b)
            return False
        if len(a) != len(b):
            return False
        return all(structurally_equal(x, y) for x, y in zip(a, b))

    _check_supported(a)
    _check_supported(b)
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, str) != isinstance(b, str):
        return False
    # NaN is not equal to itself; a datafile carrying one must still compare equal to itself
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def _check_supported(value: Any):
    if value is None or isinstance(value, (bool, Mapping, list, tuple) + _SCALAR_TYPES):
        return
    raise ComparisonError("unsupported value of type %s in datafile" % type(value).__name__)
