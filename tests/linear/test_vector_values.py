"""Tests for VectorValues."""

import numpy as np
import pytest

from pygaussbayes.core.exceptions import (
    DimensionError,
    MissingVariableError,
    PyGaussBayesError,
    ValidationError,
)
from pygaussbayes.linear import VectorValues


@pytest.fixture
def values():
    return VectorValues({'x1': [1.0], 'x2': [2.0, 3.0]})


class TestAccess:

    def test_getitem(self, values):
        np.testing.assert_array_equal(values['x2'], [2.0, 3.0])
        assert values['x2'].dtype == np.float64

    def test_scalar_becomes_length_one(self):
        v = VectorValues({'x': 5})
        np.testing.assert_array_equal(v['x'], [5.0])

    def test_matrix_value_rejected(self):
        with pytest.raises(DimensionError):
            VectorValues({'x': np.ones((2, 2))})

    def test_missing_key_error(self, values):
        with pytest.raises(MissingVariableError) as exc_info:
            values['nope']
        err = exc_info.value
        assert err.key == 'nope'
        assert err.available == ('x1', 'x2')
        assert "x1" in str(err)

    def test_missing_key_is_lookup_error(self, values):
        with pytest.raises(LookupError):
            values['nope']
        with pytest.raises(PyGaussBayesError):
            values['nope']

    def test_mapping_protocol(self, values):
        assert len(values) == 2
        assert 'x1' in values
        assert 'x3' not in values
        assert list(values) == ['x1', 'x2']
        assert values.keys() == ['x1', 'x2']

    def test_tuple_keys(self):
        v = VectorValues({('pose', 0): [0.0, 0.0, 0.0]})
        assert v.dims() == {('pose', 0): 3}


class TestInsertion:

    def test_insert_new(self, values):
        values.insert('x3', [4.0])
        np.testing.assert_array_equal(values['x3'], [4.0])

    def test_insert_duplicate_raises(self, values):
        with pytest.raises(ValidationError, match="already"):
            values.insert('x1', [9.0])

    def test_update_overwrites(self, values):
        values.update(VectorValues({'x1': [9.0], 'x3': [4.0]}))
        np.testing.assert_array_equal(values['x1'], [9.0])
        assert values.keys() == ['x1', 'x2', 'x3']

    def test_copy_is_independent(self, values):
        copied = values.copy()
        copied['x1'][0] = 100.0
        np.testing.assert_array_equal(values['x1'], [1.0])

    def test_input_array_copied(self):
        arr = np.array([1.0, 2.0])
        v = VectorValues({'x': arr})
        arr[0] = 100.0
        np.testing.assert_array_equal(v['x'], [1.0, 2.0])


class TestBlocks:

    def test_vector_order(self, values):
        np.testing.assert_array_equal(values.vector(['x2', 'x1']), [2.0, 3.0, 1.0])

    def test_vector_empty(self, values):
        assert values.vector([]).shape == (0,)

    def test_vector_missing(self, values):
        with pytest.raises(MissingVariableError):
            values.vector(['x1', 'x9'])

    def test_dims(self, values):
        assert values.dims() == {'x1': 1, 'x2': 2}

    def test_zero_like(self, values):
        z = VectorValues.zero(values)
        assert z.dims() == values.dims()
        assert z.norm() == 0.0


class TestLinearAlgebra:

    def test_dot_and_norm(self, values):
        assert values.dot(values) == pytest.approx(14.0)
        assert values.norm() == pytest.approx(np.sqrt(14.0))

    def test_scale(self, values):
        np.testing.assert_array_equal(values.scale(2.0)['x2'], [4.0, 6.0])

    def test_add_sub_neg(self, values):
        doubled = values + values
        np.testing.assert_array_equal(doubled['x2'], [4.0, 6.0])
        assert (values - values).norm() == 0.0
        np.testing.assert_array_equal((-values)['x1'], [-1.0])

    def test_mismatched_keys(self, values):
        other = VectorValues({'x1': [1.0]})
        with pytest.raises(ValidationError, match="different keys"):
            values.dot(other)
        with pytest.raises(ValidationError):
            values + other


class TestEquals:

    def test_equal_within_tol(self, values):
        other = VectorValues({'x2': [2.0, 3.0 + 1e-12], 'x1': [1.0]})
        assert values.equals(other)
        assert not values.equals(other, tol=0.0)

    def test_different_keys(self, values):
        assert not values.equals(VectorValues({'x1': [1.0]}))

    def test_different_dims(self, values):
        assert not values.equals(VectorValues({'x1': [1.0], 'x2': [2.0]}))
