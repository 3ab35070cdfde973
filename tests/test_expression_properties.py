"""
Property-based tests for ExpressionResult and the Expression enum.

These tests verify the confidence clamping invariant and the fallback
result using Hypothesis for property-based testing.
"""

import dataclasses

import pytest
from hypothesis import given, settings
import hypothesis.strategies as st

from face_emoji.expression import (
    CLASSIFIER_EXPRESSIONS,
    DetectionOutcome,
    Expression,
    ExpressionResult,
    clamp_confidence,
)


class TestConfidenceClamping:
    """
    **Feature: face-emoji, Property 1: Confidence Bounds**

    *For any* confidence value supplied at construction, the stored
    confidence of an ExpressionResult SHALL lie in [0, 1].
    """

    @settings(max_examples=100)
    @given(
        expression=st.sampled_from(list(Expression)),
        confidence=st.floats(allow_nan=False, allow_infinity=True),
    )
    def test_confidence_always_in_unit_interval(self, expression, confidence):
        result = ExpressionResult(expression, confidence)

        assert 0.0 <= result.confidence <= 1.0, \
            f"Confidence {result.confidence} outside [0, 1] for input {confidence}"

    @settings(max_examples=100)
    @given(confidence=st.floats(min_value=0.0, max_value=1.0, allow_nan=False))
    def test_in_range_confidence_unchanged(self, confidence):
        result = ExpressionResult(Expression.HAPPY, confidence)
        assert result.confidence == confidence

    @settings(max_examples=100)
    @given(confidence=st.floats(min_value=1.0, allow_nan=False, allow_infinity=True))
    def test_large_confidence_clamps_to_one(self, confidence):
        assert ExpressionResult(Expression.ANGRY, confidence).confidence == 1.0

    @settings(max_examples=100)
    @given(confidence=st.floats(max_value=0.0, allow_nan=False, allow_infinity=True))
    def test_negative_confidence_clamps_to_zero(self, confidence):
        assert ExpressionResult(Expression.SAD, confidence).confidence == 0.0

    def test_clamp_helper(self):
        assert clamp_confidence(-0.5) == 0.0
        assert clamp_confidence(0.25) == 0.25
        assert clamp_confidence(3) == 1.0


class TestExpressionResult:
    """Example-based tests for ExpressionResult construction."""

    def test_default_outcome_is_determined(self):
        result = ExpressionResult(Expression.HAPPY, 0.8)
        assert result.outcome is DetectionOutcome.DETERMINED
        assert not result.is_fallback

    def test_fallback_result(self):
        result = ExpressionResult.fallback()
        assert result.expression is Expression.NEUTRAL
        assert result.confidence == 0.5
        assert result.outcome is DetectionOutcome.FALLBACK
        assert result.is_fallback

    def test_fallback_is_reproducible(self):
        assert ExpressionResult.fallback() == ExpressionResult.fallback()

    def test_result_is_immutable(self):
        result = ExpressionResult(Expression.HAPPY, 0.8)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.confidence = 2.0


class TestExpressionEnum:

    def test_classifier_expressions(self):
        assert set(CLASSIFIER_EXPRESSIONS) == {
            Expression.HAPPY,
            Expression.SAD,
            Expression.SURPRISED,
            Expression.ANGRY,
            Expression.NEUTRAL,
        }

    def test_pool_only_expressions_not_produced(self):
        assert Expression.DISGUSTED not in CLASSIFIER_EXPRESSIONS
        assert Expression.FEARFUL not in CLASSIFIER_EXPRESSIONS

    def test_values_are_display_names(self):
        assert Expression.HAPPY.value == "Happy"
        assert Expression("Surprised") is Expression.SURPRISED
