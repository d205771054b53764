# test/test_approximation.py
import numpy as np
import pytest

from seriesfit.config import Settings
from seriesfit.core import DegenerateInput, InvalidArgument, InvalidState, Series
from seriesfit.models import Approximation, Model, horner


def _series(pairs, name="s"):
    return Series.from_pairs(name, pairs)


def _linear():
    return _series([(1, 2.0), (2, 4.0), (3, 6.0), (4, 8.0)], name="linear")


def test_linear_end_to_end():
    model = Approximation(_linear(), 1)

    assert isinstance(model, Model)
    assert model.name == "Polynomial Approximation for: linear degree: 1"
    assert np.allclose(model.coefficients, [0.0, 2.0], atol=1e-9)

    ext = model.evaluate_range(5, 5)
    assert ext.size() == 1
    assert ext.value_at(5) == pytest.approx(10.0)

    assert model.mean_squared_error() == pytest.approx(0.0, abs=1e-18)
    assert model.r_squared() == pytest.approx(1.0)


def test_derived_covers_every_integer_time():
    s = _series([(0, 1.0), (2, 5.0), (5, 11.0)])
    model = Approximation(s, 1)

    d = model.derived
    assert d.name == "Polynomial Approximation (Degree 1)"
    assert [p.time for p in d] == [0, 1, 2, 3, 4, 5]
    assert np.allclose(d.values, 2.0 * np.arange(6) + 1.0)

    # Original times are not contiguous: values are matched by time.
    actual, predicted = model.aligned_values()
    assert np.allclose(actual, [1.0, 5.0, 11.0])
    assert np.allclose(predicted, [1.0, 5.0, 11.0])


def test_quadratic_matches_reference_least_squares():
    t = np.arange(-3, 6)
    rng = np.random.default_rng(0)
    y = 1.0 - 2.0 * t + 0.5 * t**2 + rng.normal(scale=0.1, size=t.size)
    model = Approximation(_series(zip(t.tolist(), y.tolist())), 2)

    expected = np.linalg.lstsq(np.vander(t.astype(float), 3, increasing=True), y, rcond=None)[0]
    assert np.allclose(model.coefficients, expected, atol=1e-9)


def test_unsorted_input_is_fitted_by_time_and_compared_in_stored_order():
    s = _series([(3, 6.0), (1, 2.0), (2, 4.0)])
    model = Approximation(s, 1)

    actual, predicted = model.aligned_values()
    assert np.allclose(actual, [6.0, 2.0, 4.0])
    assert np.allclose(predicted, actual)


def test_flat_linear_fit_passes_through_the_mean():
    s = _series([(1, 5.0), (2, 5.1), (3, 4.9), (4, 5.0), (5, 5.05)])
    model = Approximation(s, 1)

    mean_time = float(np.mean(s.times))
    assert model.evaluate(mean_time) == pytest.approx(float(np.mean(s.values)), rel=1e-12)


def test_horner_matches_power_sum():
    c = (1.5, -2.0, 0.25, 3.0)
    for t in (-2.0, 0.0, 1.0, 7.5):
        assert horner(c, t) == pytest.approx(sum(ci * t**i for i, ci in enumerate(c)))


def test_rejects_degree_below_one():
    with pytest.raises(InvalidArgument):
        Approximation(_linear(), 0)
    with pytest.raises(InvalidArgument):
        Approximation(_linear(), True)  # type: ignore[arg-type]


def test_empty_or_missing_series():
    with pytest.raises(DegenerateInput):
        Approximation(Series(name="empty"), 1)
    with pytest.raises(InvalidState):
        Approximation(None, 1)


def test_evaluate_range_errors():
    model = Approximation(_linear(), 1)
    with pytest.raises(InvalidArgument):
        model.evaluate_range(5, 3)

    model.coefficients = None
    with pytest.raises(InvalidState):
        model.evaluate_range(0, 1)
    with pytest.raises(InvalidState):
        model.evaluate(0)


def test_evaluate_range_outside_fit_range():
    model = Approximation(_linear(), 1)
    out = model.evaluate_range(-2, 10)

    assert out.name == "Approximation [-2-10]"
    assert out.size() == 13
    assert out.value_at(-2) == pytest.approx(-4.0)
    assert out.value_at(10) == pytest.approx(20.0)


def test_formula_rendering():
    model = Approximation(_linear(), 1)
    assert model.formula() == "2x"

    model.coefficients = (3.0, -2.0, 0.5)
    assert model.formula() == "3 - 2x + 0.5x^2"

    model.coefficients = (-1.5, 0.0, 2.0)
    assert model.formula() == "-1.5 + 2x^2"

    model.coefficients = (0.0, -2.0)
    assert model.formula() == "-2x"

    model.coefficients = (0.0, 0.0, 4.0)
    assert model.formula() == "4x^2"

    model.coefficients = (1e-12, -1e-11)
    assert model.formula() == "0"

    # rounds to zero at the display precision
    model.coefficients = (0.00001, 1.0)
    assert model.formula() == "1x"

    model.coefficients = None
    assert model.formula() == "Model not calculated"


def test_formula_uses_settings_precision():
    model = Approximation(_linear(), 1, settings=Settings(formula_decimals=2))
    model.coefficients = (1.23456, -0.5)
    assert model.formula() == "1.23 - 0.5x"


def test_recompute_reflects_source_changes_only_when_asked():
    s = _linear()
    model = Approximation(s, 1)
    first = model.derived

    s.add_point(5, 10.0)
    assert model.derived is first
    # stale: the new time is not covered by the derived series
    with pytest.raises(InvalidState):
        model.mean_squared_error()

    model.compute()
    assert model.derived is not first
    assert model.derived.max_time == 5
    assert model.mean_squared_error() == pytest.approx(0.0, abs=1e-18)


def test_set_data_and_compute_is_atomic_on_failure():
    model = Approximation(_linear(), 1)
    original, derived, coefficients = model.original, model.derived, model.coefficients

    with pytest.raises(DegenerateInput):
        model.set_data_and_compute(Series(name="empty"))

    assert model.original is original
    assert model.derived is derived
    assert model.coefficients == coefficients

    other = _series([(1, 1.0), (2, 1.0), (3, 1.0)], name="flat")
    model.set_data_and_compute(other)
    assert model.original is other
    assert np.allclose(model.coefficients, [1.0, 0.0], atol=1e-9)
    assert model.formula() == "1"


def test_under_determined_fit_logs_warning(caplog):
    s = _series([(1, 1.0), (2, 3.0)])
    with caplog.at_level("WARNING", logger="seriesfit.models.approximation"):
        Approximation(s, 2)
    assert "under-determined" in caplog.text


def test_metrics_require_computed_model():
    model = Approximation(_linear(), 1)
    model.derived = None
    with pytest.raises(InvalidState):
        model.mean_squared_error()
    with pytest.raises(InvalidState):
        model.r_squared()
    with pytest.raises(InvalidState):
        model.aligned_values()
