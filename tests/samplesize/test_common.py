"""Tests for z_quantile, TestSpec and TestInputs."""

import dataclasses
import math

import pytest

from pytrialsize.samplesize import (
    DegenerateInput,
    InvalidProbability,
    InvalidSweepRange,
    SampleSizeError,
    TestFamily,
    TestInputs,
    TestKind,
    TestSpec,
    z_quantile,
)


class TestZQuantile:
    """Standard normal quantile."""

    def test_known_values(self):
        assert z_quantile(0.975) == pytest.approx(1.959963984540054, rel=1e-12)
        assert z_quantile(0.95) == pytest.approx(1.6448536269514722, rel=1e-12)
        assert z_quantile(0.80) == pytest.approx(0.8416212335729143, rel=1e-12)

    def test_median_zero(self):
        assert z_quantile(0.5) == pytest.approx(0.0, abs=1e-15)

    def test_symmetry(self):
        assert z_quantile(0.1) == pytest.approx(-z_quantile(0.9), rel=1e-12)

    @pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 1.5, math.nan])
    def test_domain(self, p):
        with pytest.raises(InvalidProbability, match=r"\(0, 1\)"):
            z_quantile(p)


class TestTestSpec:
    """Family / kind selection."""

    def test_from_strings(self):
        spec = TestSpec("mean", "equivalence")
        assert spec.family is TestFamily.MEAN
        assert spec.kind is TestKind.EQUIVALENCE

    @pytest.mark.parametrize(
        "alias", ["noninferiority", "superiority", "noninf", "sup", "Non-Inferiority"],
    )
    def test_kind_aliases(self, alias):
        assert TestSpec("proportion", alias).kind is TestKind.NONINFERIORITY_SUPERIORITY

    def test_family_alias(self):
        assert TestSpec("proportions", "equality").family is TestFamily.PROPORTION

    def test_enums_pass_through(self):
        spec = TestSpec(TestFamily.PROPORTION, TestKind.EQUALITY)
        assert spec == TestSpec("proportion", "equality")

    def test_unknown_family(self):
        with pytest.raises(ValueError, match="family must be one of"):
            TestSpec("median", "equality")

    def test_label(self):
        assert TestSpec("mean", "equality").label == "Two-sample equality test of means"
        assert "proportions" in TestSpec("proportion", "sup").label

    def test_frozen(self):
        spec = TestSpec("mean", "equality")
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.kind = TestKind.EQUIVALENCE


class TestTestInputs:
    """Immutable inputs."""

    def test_defaults(self):
        inputs = TestInputs(group_a=1.0, group_b=2.0)
        assert inputs.kappa == 1.0
        assert inputs.alpha == 0.05
        assert inputs.beta == 0.20
        assert inputs.margin == 0.0
        assert inputs.sd is None

    def test_with_value(self):
        inputs = TestInputs(group_a=1.0, group_b=2.0, sd=3.0)
        changed = inputs.with_value("group_a", 1.5)
        assert changed.group_a == 1.5
        assert changed.group_b == 2.0
        assert changed.sd == 3.0
        assert inputs.group_a == 1.0

    def test_with_value_unknown_field(self):
        with pytest.raises(ValueError, match="field must be one of"):
            TestInputs(group_a=1.0, group_b=2.0).with_value("power", 0.9)


class TestErrors:
    """Error hierarchy."""

    @pytest.mark.parametrize("exc", [InvalidProbability, DegenerateInput, InvalidSweepRange])
    def test_hierarchy(self, exc):
        assert issubclass(exc, SampleSizeError)
        assert issubclass(exc, ValueError)
