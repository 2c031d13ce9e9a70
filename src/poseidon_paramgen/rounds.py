"""
Round Number Selection

Chooses (r_F, r_P) from the attack bounds of the Poseidon paper
(eprint 2019/458, Section 5.5):

- Statistical attacks:   r_F >= 6, or 10 when M > (floor(log2 p) - C)(t + 1)
- Interpolation:         r_F + r_P >= log_alpha(2) min(M, n) + log_alpha(t)
- Groebner basis (three bounds on r_F + r_P in terms of M, t, log2 p)

plus, for exponent S-boxes, the binomial bound on Groebner-basis cost from
eprint 2023/537. Among all secure candidates the one with the fewest S-box
evaluations (t r_F + r_P) wins, preferring fewer full rounds on ties, and a
security margin of two full rounds and 7.5% partial rounds is added.

These bounds are estimates over the reals, so this module (unlike the
matrix code) uses floating point.
"""

import logging
import math

from .errors import ParameterValidationError
from .input import Alpha, InputParameters, RoundNumbers

log = logging.getLogger(__name__)


MAX_PARTIAL_ROUNDS = 500
MAX_FULL_ROUNDS = 100
MIN_FULL_ROUNDS = 4


def _log2_binomial(n: float, k: float) -> float:
    """log2 of the (generalized) binomial coefficient C(n, k)."""
    return (math.lgamma(n + 1) - math.lgamma(k + 1) - math.lgamma(n - k + 1)) / math.log(2)


def _is_secure_exponent(input: InputParameters, r_F: int, r_P: int, a: int) -> bool:
    t, M = input.t, input.security_level
    log2_p = math.log2(input.p)
    n = input.log_2_p
    log_a_2 = math.log(2, a)

    bounds = (
        # Statistical
        6 if M <= math.floor(log2_p - math.log2(a - 1)) * (t + 1) else 10,
        # Interpolation
        1 + math.ceil(log_a_2 * min(M, n)) + math.ceil(math.log(t, a)) - r_P,
        # Groebner basis
        log_a_2 * min(M, log2_p) - r_P,
        t - 1 + log_a_2 * min(M / (t + 1), log2_p / 2) - r_P,
        (t - 2 + M / (2 * math.log2(a)) - r_P) / (t - 1),
    )
    if r_F < max(math.ceil(b) for b in bounds):
        return False

    # Groebner basis cost, eprint 2023/537
    r_temp = t // 3
    over = (r_F - 1) * t + r_P + r_temp + r_temp * (r_F / 2) + r_P + a
    under = r_temp * (r_F / 2) + r_P + a
    return math.ceil(2 * _log2_binomial(over, under)) >= M


def _is_secure_inverse(input: InputParameters, r_F: int, r_P: int) -> bool:
    t, M = input.t, input.security_level
    n = input.log_2_p
    log2_t = math.log2(t)

    r_f_min = 6 if M <= math.floor(math.log2(input.p) - 2) * (t + 1) else 10
    r_p_min = max(
        # Interpolation
        1 + math.ceil(0.5 * min(M, n)) + math.ceil(log2_t) - math.floor(r_F * log2_t),
        # Groebner basis
        t - 1 + math.ceil(log2_t) + math.ceil(min(M, n) / (t + 1)) - math.floor(r_F * log2_t),
    )
    return r_F >= r_f_min and r_P >= r_p_min


def is_secure(input: InputParameters, round_numbers: RoundNumbers, alpha: Alpha) -> bool:
    """Check a candidate against every attack bound (no margin applied)."""
    if alpha.is_inverse:
        return _is_secure_inverse(input, round_numbers.full, round_numbers.partial)
    return _is_secure_exponent(input, round_numbers.full, round_numbers.partial, alpha.exponent)


def choose_round_numbers(input: InputParameters, alpha: Alpha) -> RoundNumbers:
    """
    Cheapest secure round numbers for an instance, with security margin.

    Raises ParameterValidationError if no candidate within the search
    bounds is secure.
    """
    t = input.t
    best = None
    best_cost = None

    for r_P in range(1, MAX_PARTIAL_ROUNDS):
        if best is not None and t * MIN_FULL_ROUNDS + r_P > best_cost:
            break
        for r_F in range(MIN_FULL_ROUNDS, MAX_FULL_ROUNDS, 2):
            candidate = RoundNumbers(full=r_F, partial=r_P)
            if not is_secure(input, candidate, alpha):
                continue
            cost = candidate.sbox_count(t)
            if best is None or (cost, r_F) < (best_cost, best.full):
                best, best_cost = candidate, cost
            # More full rounds only cost more for this r_P
            break

    if best is None:
        raise ParameterValidationError(
            ["no secure round numbers within search bounds"],
            context={'t': t, 'security_level': input.security_level, 'alpha': str(alpha)},
        )

    chosen = best.with_security_margin()
    log.debug(
        "round numbers for t=%d, M=%d, alpha=%s: r_F=%d r_P=%d (before margin %d/%d)",
        t, input.security_level, alpha, chosen.full, chosen.partial, best.full, best.partial,
    )
    return chosen
