"""
Named Instances

One InputParameters record per supported rate over the BLS12-377 scalar
field at 128-bit security, with a capacity of one element (t = rate + 1).
ParameterSets are derived on first use and cached.
"""

from functools import lru_cache
from typing import Dict

from .field import Fq
from .input import InputParameters
from .parameters import ParameterSet, generate_parameters


SECURITY_LEVEL = 128

# Rate 1: For single-element hashing
RATE_1 = InputParameters(security_level=SECURITY_LEVEL, t=2, field=Fq)

# Rate 2: Merkle nodes of arity 2
RATE_2 = InputParameters(security_level=SECURITY_LEVEL, t=3, field=Fq)

RATE_3 = InputParameters(security_level=SECURITY_LEVEL, t=4, field=Fq)

# Rate 4: Merkle nodes of arity 4
RATE_4 = InputParameters(security_level=SECURITY_LEVEL, t=5, field=Fq)

RATE_5 = InputParameters(security_level=SECURITY_LEVEL, t=6, field=Fq)

RATE_6 = InputParameters(security_level=SECURITY_LEVEL, t=7, field=Fq)

RATE_7 = InputParameters(security_level=SECURITY_LEVEL, t=8, field=Fq)

INSTANCES: Dict[int, InputParameters] = {
    1: RATE_1,
    2: RATE_2,
    3: RATE_3,
    4: RATE_4,
    5: RATE_5,
    6: RATE_6,
    7: RATE_7,
}


@lru_cache(maxsize=None)
def rate_parameters(rate: int) -> ParameterSet:
    """ParameterSet of the named instance for `rate`."""
    try:
        input = INSTANCES[rate]
    except KeyError:
        raise KeyError(f"No instance for rate {rate}; supported rates are {sorted(INSTANCES)}") from None
    return generate_parameters(input)
