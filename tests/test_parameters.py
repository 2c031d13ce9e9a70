"""
Tests for Parameter Sets

Covers:
- Alpha and round-number selection
- Cauchy mixing matrix
- ParameterSet validation (all failures reported together)
- Fingerprints and named instances
"""

import pytest

from poseidon_paramgen import (
    Alpha,
    ArcMatrix,
    ErrorCode,
    Fq,
    InputParameters,
    Matrix,
    OptimizedArcMatrix,
    ParameterSet,
    ParameterValidationError,
    RoundNumbers,
    SquareMatrix,
    choose_alpha,
    choose_round_numbers,
    generate_mds,
    generate_parameters,
    is_secure,
    make_prime_field,
    permute,
    permute_optimized,
    rate_parameters,
    INSTANCES,
)


@pytest.fixture(scope="module")
def rate2():
    return rate_parameters(2)


class TestInputParameters:
    """Instance configuration records."""

    def test_defaults(self):
        input = InputParameters()
        assert input.security_level == 128
        assert input.t == 3
        assert input.rate == 2
        assert input.field is Fq
        assert input.p == Fq.MODULUS
        assert input.log_2_p == 253

    def test_width_too_small(self):
        with pytest.raises(ValueError):
            InputParameters(t=1)

    def test_round_numbers(self):
        rounds = RoundNumbers(full=8, partial=31)
        assert rounds.half_full == 4
        assert rounds.total == 39
        assert rounds.sbox_count(3) == 55
        with pytest.raises(ValueError):
            RoundNumbers(full=7, partial=31)

    def test_security_margin(self):
        assert RoundNumbers(full=6, partial=28).with_security_margin() == RoundNumbers(full=8, partial=31)

    def test_alpha(self):
        assert Alpha(17).apply(Fq(2)) == 2 ** 17
        assert Alpha.inverse().apply(Fq(0)) == 0
        assert Alpha.inverse().apply(Fq(2)) * 2 == 1
        assert str(Alpha.inverse()) == "inverse"
        with pytest.raises(ValueError):
            Alpha(2)


class TestAlphaSelection:
    """Smallest exponent of the form 2^k + 1 coprime to p - 1."""

    def test_bls12_377(self):
        # p - 1 is divisible by 3 and 5
        assert choose_alpha(Fq.MODULUS) == Alpha(17)
        assert not Alpha(3).is_permutation(Fq.MODULUS)
        assert not Alpha(5).is_permutation(Fq.MODULUS)

    def test_small_fields(self):
        assert choose_alpha(101) == Alpha(3)
        assert choose_alpha(31) == Alpha(17)   # 30 = 2 * 3 * 5

    def test_inverse_fallback(self):
        # 511 = 7 * 73 and 3, 5, 17 all divide p - 1 = 510
        p = 511
        with pytest.raises(ParameterValidationError):
            choose_alpha(p)
        assert choose_alpha(p, allow_inverse=True) == Alpha.inverse()


class TestRoundSelection:
    """Round numbers from the attack bounds."""

    @pytest.mark.parametrize("t", [2, 3, 5, 8])
    def test_bls12_377_rounds(self, t):
        input = InputParameters(security_level=128, t=t)
        assert choose_round_numbers(input, Alpha(17)) == RoundNumbers(full=8, partial=31)

    def test_chosen_rounds_are_secure(self):
        input = InputParameters(t=3)
        assert is_secure(input, RoundNumbers(full=6, partial=28), Alpha(17))
        assert not is_secure(input, RoundNumbers(full=4, partial=1), Alpha(17))

    def test_more_security_more_rounds(self):
        low = choose_round_numbers(InputParameters(security_level=80, t=3), Alpha(17))
        high = choose_round_numbers(InputParameters(security_level=256, t=3), Alpha(17))
        assert low.sbox_count(3) <= high.sbox_count(3)


class TestMds:
    """Cauchy mixing matrix."""

    def test_entries(self):
        mds = generate_mds(3)
        assert mds.get_element(0, 0) == Fq(3).inverse()
        assert mds.get_element(2, 1) == Fq(6).inverse()

    @pytest.mark.parametrize("t", [1, 2, 3, 4, 5])
    def test_invertible(self, t):
        assert generate_mds(t).is_invertible()

    def test_too_wide_for_field(self):
        F7 = make_prime_field(7)
        assert generate_mds(2, F7).is_invertible()
        with pytest.raises(ValueError):
            generate_mds(3, F7)


class TestParameterSet:
    """Validation at construction."""

    def test_generated_set(self, rate2):
        assert rate2.t == 3
        assert rate2.rate == 2
        assert rate2.alpha == Alpha(17)
        assert rate2.round_numbers == RoundNumbers(full=8, partial=31)
        assert rate2.arc.shape == (39, 3)
        assert rate2.optimized_arc.shape == (39, 3)
        assert rate2.mds == generate_mds(3)

    def test_mds_read_only(self, rate2):
        assert rate2.mds.is_read_only
        with pytest.raises(TypeError):
            rate2.mds.set_element(0, 0, 1)

    def test_caller_matrix_not_frozen(self):
        mds = generate_mds(2)
        generate_parameters(InputParameters(t=2), mds=mds)
        mds.set_element(0, 0, 1)

    def test_immutable(self, rate2):
        with pytest.raises(AttributeError):
            rate2.alpha = Alpha(5)

    def test_permutation_schedules_agree(self, rate2):
        for state in ([0, 0, 0], [1, 2, 3]):
            assert permute(rate2, state) == permute_optimized(rate2, state)

    def test_all_failures_reported(self, rate2):
        """Wrong alpha and wrong mixing width are both listed."""
        with pytest.raises(ParameterValidationError) as excinfo:
            ParameterSet(
                input=rate2.input,
                round_numbers=rate2.round_numbers,
                alpha=Alpha(3),
                mds=generate_mds(2),
                arc=rate2.arc,
                optimized_arc=rate2.optimized_arc,
            )
        error = excinfo.value
        assert error.code == ErrorCode.PARAMETER_VALIDATION
        assert len(error.failures) >= 2
        assert any("alpha" in f for f in error.failures)
        assert any("width" in f for f in error.failures)
        assert error.to_dict()['failures'] == error.failures

    def test_inverse_not_allowed(self, rate2):
        with pytest.raises(ParameterValidationError, match="inverse"):
            ParameterSet(
                input=rate2.input,
                round_numbers=rate2.round_numbers,
                alpha=Alpha.inverse(),
                mds=rate2.mds,
                arc=rate2.arc,
                optimized_arc=rate2.optimized_arc,
            )

    def test_row_count_mismatch(self, rate2):
        with pytest.raises(ParameterValidationError, match="rows"):
            ParameterSet(
                input=rate2.input,
                round_numbers=RoundNumbers(full=8, partial=30),
                alpha=rate2.alpha,
                mds=rate2.mds,
                arc=rate2.arc,
                optimized_arc=rate2.optimized_arc,
            )

    def test_swapped_constants(self, rate2):
        """Optimized constants in the arc slot and vice versa."""
        with pytest.raises(ParameterValidationError) as excinfo:
            ParameterSet(
                input=rate2.input,
                round_numbers=rate2.round_numbers,
                alpha=rate2.alpha,
                mds=rate2.mds,
                arc=rate2.optimized_arc,
                optimized_arc=rate2.arc,
            )
        assert len(excinfo.value.failures) == 2

    def test_unmoved_constants_rejected(self, rate2):
        """Optimized constants must be sparse in the later partial rounds."""
        with pytest.raises(ParameterValidationError, match="sparse"):
            ParameterSet(
                input=rate2.input,
                round_numbers=rate2.round_numbers,
                alpha=rate2.alpha,
                mds=rate2.mds,
                arc=rate2.arc,
                optimized_arc=OptimizedArcMatrix(rate2.arc.matrix),
            )

    def test_constants_moved_through_other_matrix_rejected(self):
        """Optimized constants must come from this set's mixing matrix."""
        params = rate_parameters(1)
        other = OptimizedArcMatrix.transform(params.arc, SquareMatrix(2, [1, 1, 0, 1]), params.round_numbers)
        with pytest.raises(ParameterValidationError, match="do not match"):
            ParameterSet(
                input=params.input,
                round_numbers=params.round_numbers,
                alpha=params.alpha,
                mds=params.mds,
                arc=params.arc,
                optimized_arc=other,
            )

    def test_cached_set_not_reassignable(self):
        """Matrices of a cached set cannot be swapped or reshaped."""
        params = rate_parameters(1)
        fingerprint = params.fingerprint()
        with pytest.raises(AttributeError):
            params.arc.matrix = Matrix(1, 2, [0, 0]).read_only()
        with pytest.raises(AttributeError):
            params.mds.n_rows = 5
        assert params.mds.shape == (2, 2)
        assert rate_parameters(1).fingerprint() == fingerprint

    def test_singular_mds(self, rate2):
        with pytest.raises(ParameterValidationError, match="invertible"):
            ParameterSet(
                input=rate2.input,
                round_numbers=rate2.round_numbers,
                alpha=rate2.alpha,
                mds=SquareMatrix(3, [1] * 9),
                arc=rate2.arc,
                optimized_arc=rate2.optimized_arc,
            )

    def test_non_square_mds(self, rate2):
        with pytest.raises(ParameterValidationError, match="square"):
            ParameterSet(
                input=rate2.input,
                round_numbers=rate2.round_numbers,
                alpha=rate2.alpha,
                mds=Matrix(3, 2, [1] * 6),
                arc=rate2.arc,
                optimized_arc=rate2.optimized_arc,
            )


class TestFingerprint:
    """BLAKE3 digest of the canonical serialization."""

    def test_stable(self, rate2):
        again = generate_parameters(InputParameters(t=3))
        assert again.fingerprint() == rate2.fingerprint()
        assert hash(again) == hash(rate2)
        assert len(rate2.fingerprint()) == 64

    def test_distinct_instances(self, rate2):
        assert rate_parameters(1).fingerprint() != rate2.fingerprint()

    def test_serialize_prefix(self, rate2):
        data = rate2.serialize()
        assert data[:8] == (128).to_bytes(8, 'big')
        assert data[8:16] == (3).to_bytes(8, 'big')

    def test_to_dict(self, rate2):
        d = rate2.to_dict()
        assert d['t'] == 3
        assert d['alpha'] == "17"
        assert d['r_F'] == 8 and d['r_P'] == 31
        assert len(d['arc']) == 39
        assert d['fingerprint'] == rate2.fingerprint()


class TestInstances:
    """Named rate instances."""

    def test_rates(self):
        assert sorted(INSTANCES) == [1, 2, 3, 4, 5, 6, 7]
        for rate, input in INSTANCES.items():
            assert input.t == rate + 1
            assert input.security_level == 128

    def test_cached(self):
        assert rate_parameters(1) is rate_parameters(1)

    def test_unknown_rate(self):
        with pytest.raises(KeyError):
            rate_parameters(8)

    def test_widest_instance(self):
        params = rate_parameters(7)
        assert params.t == 8
        assert params.round_numbers == RoundNumbers(full=8, partial=31)
        assert isinstance(params.arc, ArcMatrix)
