"""Tests for rate coercion and cost estimation."""

import pytest

from email_triage.batch.cost import RateConfig, coerce_rate, estimate_cost


def test_defaults():
    rates = RateConfig()
    assert rates.classify_per_email == 0.001
    assert rates.generate_per_email == 0.002
    assert rates.per_email == pytest.approx(0.003)


def test_zero_results():
    assert estimate_cost(0, RateConfig(0.001, 0.002)) == "0.0000"


def test_four_results():
    assert estimate_cost(4, RateConfig(0.001, 0.002)) == "0.0120"


def test_rounds_half_up():
    assert estimate_cost(1, RateConfig(0.00005, 0)) == "0.0001"
    assert estimate_cost(1, RateConfig(0.00004, 0)) == "0.0000"


def test_negative_count_treated_as_zero():
    assert estimate_cost(-3, RateConfig()) == "0.0000"


def test_monotonic_in_rate():
    steps = [0, 0.0001, 0.00049, 0.0005, 0.001, 0.0125, 0.5, 3]
    for n in (1, 3, 17):
        costs = [float(estimate_cost(n, RateConfig(r, 0.002))) for r in steps]
        assert costs == sorted(costs)


def test_monotonic_in_count():
    rates = RateConfig()
    costs = [float(estimate_cost(n, rates)) for n in range(50)]
    assert costs == sorted(costs)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0.5", 0.5),
        (2, 2.0),
        ("", 0.0),
        ("  ", 0.0),
        (None, 0.0),
        ("abc", 0.0),
        ("-1", 0.0),
        (-0.25, 0.0),
        ("nan", 0.0),
        (float("inf"), 0.0),
        (True, 0.0),
    ],
)
def test_coerce_rate(value, expected):
    assert coerce_rate(value) == expected


def test_rate_config_sanitizes_direct_construction():
    rates = RateConfig(classify_per_email="oops", generate_per_email=-4)
    assert rates.classify_per_email == 0.0
    assert rates.generate_per_email == 0.0
    assert estimate_cost(10, rates) == "0.0000"


def test_rate_config_coerce_keeps_defaults_for_missing_values():
    rates = RateConfig.coerce(None, "0.01")
    assert rates.classify_per_email == 0.001
    assert rates.generate_per_email == 0.01


def test_huge_finite_rates():
    rates = RateConfig(coerce_rate("1e24"), 0)
    assert estimate_cost(1, rates) == "1000000000000000000000000.0000"
    assert estimate_cost(3, RateConfig(1e24, 0.002)) == "3000000000000000000000000.0060"


def test_extreme_float_rates_do_not_raise():
    rates = RateConfig(1.7e308, 5e-324)
    cost = estimate_cost(1000, rates)
    assert cost.endswith(".0000")
    assert cost.startswith("17")
