"""Tests for token accounting and cost estimation."""

import pytest

from hybrid_tailor.logging.cost_calculator import MODEL_PRICING, calculate_cost
from hybrid_tailor.logging.token_usage import (
    TokenAccountant,
    estimate_tokens,
    naive_rewrite_baseline,
)
from hybrid_tailor.models.rewrite import RewriteResult


class TestCalculateCost:
    def test_empty_calls_returns_zero(self):
        assert calculate_cost([]) == 0.0

    def test_sonnet_pricing(self):
        cost = calculate_cost([("claude-sonnet-4-5-20250929", 1_000_000, 1_000_000)])
        assert cost == pytest.approx(18.0)

    def test_multiple_calls_summed(self):
        calls = [
            ("claude-haiku-4-5-20251001", 1000, 500),
            ("claude-sonnet-4-5-20250929", 2000, 1000),
        ]
        expected = (1000 * 1.0 + 500 * 5.0 + 2000 * 3.0 + 1000 * 15.0) / 1_000_000
        assert calculate_cost(calls) == pytest.approx(expected)

    def test_unknown_model_costs_nothing(self):
        assert calculate_cost([("some-other-model", 10_000, 10_000)]) == 0.0

    def test_pricing_has_input_and_output(self):
        for prices in MODEL_PRICING.values():
            assert set(prices) == {"input", "output"}


class TestEstimateTokens:
    def test_four_chars_per_token(self):
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("") == 0


class TestTokenAccountant:
    def test_pre_analysis_spends_nothing(self):
        usage = TokenAccountant(baseline=500).usage()
        assert usage.pre_analysis == 0
        assert usage.total == 0
        assert usage.saved_vs_pure_ai == 500

    def test_records_rewrite(self):
        accountant = TokenAccountant(baseline=1000)
        accountant.record_rewrite(
            RewriteResult(fragments={}, input_tokens=300, output_tokens=100, model="claude-sonnet-4-5-20250929")
        )
        usage = accountant.usage()
        assert usage.rewriting == 400
        assert usage.total == 400
        assert usage.saved_vs_pure_ai == 600
        assert usage.estimated_cost_usd == pytest.approx((300 * 3 + 100 * 15) / 1_000_000)

    def test_savings_never_negative(self):
        accountant = TokenAccountant(baseline=10)
        accountant.record_rewrite(RewriteResult(fragments={}, input_tokens=50, output_tokens=50))
        assert accountant.usage().saved_vs_pure_ai == 0

    def test_baseline_covers_whole_resume_twice(self, sample_resume, scenario_job):
        baseline = naive_rewrite_baseline(sample_resume, scenario_job)
        assert baseline > estimate_tokens(sample_resume.summary) * 2
