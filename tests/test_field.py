"""
Tests for Prime Field Arithmetic

Covers:
- Arithmetic and inverses in Fq
- Canonical encoding
- Custom prime fields and field mixing
"""

import pytest

from poseidon_paramgen import Fq, FieldElement, BLS12_377_SCALAR_MODULUS, make_prime_field


class TestFq:
    """Arithmetic in the BLS12-377 scalar field."""

    def test_modulus(self):
        assert Fq.MODULUS == BLS12_377_SCALAR_MODULUS
        assert Fq(BLS12_377_SCALAR_MODULUS) == 0

    def test_reduction(self):
        assert Fq(-1).value == Fq.MODULUS - 1
        assert Fq(Fq.MODULUS + 5) == Fq(5)

    def test_arithmetic(self):
        a, b = Fq(7), Fq(11)
        assert a + b == 18
        assert a - b == Fq(-4)
        assert a * b == 77
        assert (a / b) * b == a
        assert -a + a == 0
        assert 3 - a == Fq(-4)
        assert a ** 2 == 49

    def test_inverse(self):
        for v in (1, 2, 10, Fq.MODULUS - 1):
            assert Fq(v) * Fq(v).inverse() == 1
        assert Fq(3) ** -1 == Fq(3).inverse()

    def test_inverse_of_zero(self):
        with pytest.raises(ZeroDivisionError):
            Fq(0).inverse()
        with pytest.raises(ZeroDivisionError):
            Fq(1) / Fq(0)

    def test_equality_and_hash(self):
        assert Fq(5) == 5
        assert Fq(5) != Fq(6)
        assert hash(Fq(5)) == hash(Fq(5 + Fq.MODULUS))
        assert int(Fq(42)) == 42

    def test_predicates(self):
        assert Fq.zero().is_zero()
        assert Fq.one().is_one()
        assert not Fq(2).is_one()


class TestEncoding:
    """Little-endian canonical encoding."""

    def test_byte_size(self):
        assert Fq.byte_size() == 32

    def test_to_bytes_little_endian(self):
        encoded = Fq(1).to_bytes()
        assert len(encoded) == 32
        assert encoded[0] == 1
        assert encoded[1:] == bytes(31)

    def test_from_bytes(self):
        x = Fq(123456789)
        assert Fq.from_bytes(x.to_bytes()) == x

    def test_non_canonical_rejected(self):
        data = Fq.MODULUS.to_bytes(32, 'little')
        with pytest.raises(ValueError):
            Fq.from_bytes(data)
        assert Fq.from_bytes_mod_order(data) == 0

    def test_wide_reduction(self):
        data = bytes([0xff]) * 64
        assert Fq.from_bytes_mod_order(data).value == int.from_bytes(data, 'little') % Fq.MODULUS


class TestCustomFields:
    """make_prime_field() creates isolated field classes."""

    def test_small_field(self):
        F101 = make_prime_field(101)
        assert issubclass(F101, FieldElement)
        assert F101(100) + F101(1) == 0
        assert F101(3) * F101(3).inverse() == 1
        assert F101.byte_size() == 1

    def test_composite_rejected(self):
        with pytest.raises(ValueError):
            make_prime_field(91)
        with pytest.raises(ValueError):
            make_prime_field(100)

    def test_fields_do_not_mix(self):
        F101 = make_prime_field(101)
        with pytest.raises(TypeError):
            Fq(1) + F101(1)
        assert Fq(1) != F101(1)
