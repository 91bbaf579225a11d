"""Closed-form sample sizes for two-sample tests of means and proportions.

All six designs use the normal approximation with a (possibly
margin-shifted) hypothesis and an allocation ratio kappa = nB / nA.
Only the z-terms and the shape of the denominator change between them:

    ============  ==================  ====================
    kind          z-terms             denominator
    ============  ==================  ====================
    equality      z(1-a/2), z(1-b)    A - B
    noninf/sup    z(1-a),   z(1-b)    A - B - margin
    equivalence   z(1-a),   z(1-b/2)  |A - B| - margin
    ============  ==================  ====================

Validates against: R TrialSize::TwoSampleMean.*, TwoSampleProportion.*
"""

from __future__ import annotations

import math

from pytrialsize.samplesize._common import (
    DegenerateInput,
    SampleSizeResult,
    TestFamily,
    TestInputs,
    TestKind,
    TestSpec,
    _check_inputs,
)
from pytrialsize.samplesize._quantile import z_quantile

# Relative tolerance below which the effect net of margin counts as zero.
_ZERO_TOL = 1e-12
_MAX_N = 2.0 ** 63


# ---------------------------------------------------------------------------
# Formula pieces
# ---------------------------------------------------------------------------

def _z_terms(kind: TestKind, alpha: float, beta: float) -> tuple[float, float]:
    """Critical values for the type-1 and type-2 error of *kind*."""
    if kind is TestKind.EQUALITY:
        return z_quantile(1.0 - alpha / 2.0), z_quantile(1.0 - beta)
    elif kind is TestKind.NONINFERIORITY_SUPERIORITY:
        return z_quantile(1.0 - alpha), z_quantile(1.0 - beta)
    else:  # equivalence: two one-sided tests share beta
        return z_quantile(1.0 - alpha), z_quantile(1.0 - beta / 2.0)


def _difference(kind: TestKind, a: float, b: float, margin: float) -> float:
    """Effect the test must resolve, net of the margin."""
    if kind is TestKind.EQUALITY:
        return a - b
    elif kind is TestKind.NONINFERIORITY_SUPERIORITY:
        return a - b - margin
    else:  # equivalence
        return abs(a - b) - margin


def _variance_factor(family: TestFamily, inputs: TestInputs) -> float:
    """Per-subject variance of the difference, scaled to group A's n."""
    if family is TestFamily.MEAN:
        assert inputs.sd is not None
        return (1.0 + 1.0 / inputs.kappa) * inputs.sd ** 2
    p_a, p_b = inputs.group_a, inputs.group_b
    return p_a * (1.0 - p_a) / inputs.kappa + p_b * (1.0 - p_b)


def _is_zero_difference(kind: TestKind, inputs: TestInputs, diff: float) -> bool:
    """True when *diff* is zero up to rounding in the terms that formed it.

    ``0.3 - 0.1 - 0.2`` is ~3e-17, not 0.0, so the tolerance scales with
    the largest operand.
    """
    scale = max(abs(inputs.group_a), abs(inputs.group_b))
    if kind is not TestKind.EQUALITY:
        scale = max(scale, abs(inputs.margin))
    return abs(diff) <= _ZERO_TOL * scale


def _raw_sample_size(spec: TestSpec, inputs: TestInputs) -> float:
    """Unrounded n for already-validated inputs."""
    diff = _difference(spec.kind, inputs.group_a, inputs.group_b, inputs.margin)
    degenerate = DegenerateInput(
        f"{spec.label}: effect net of margin is zero "
        f"(group_a={inputs.group_a}, group_b={inputs.group_b}, "
        f"margin={inputs.margin}); sample size is unbounded"
    )
    if _is_zero_difference(spec.kind, inputs, diff):
        raise degenerate

    z_alpha, z_beta = _z_terms(spec.kind, inputs.alpha, inputs.beta)
    try:
        raw_n = _variance_factor(spec.family, inputs) * ((z_alpha + z_beta) / diff) ** 2
    except OverflowError:
        raise degenerate from None
    # n must fit the int64 columns of a sweep
    if not math.isfinite(raw_n) or raw_n >= _MAX_N:
        raise degenerate
    return raw_n


# ---------------------------------------------------------------------------
# Core API
# ---------------------------------------------------------------------------

def raw_sample_size(spec: TestSpec, inputs: TestInputs) -> float:
    """Real-valued group A sample size before rounding up.

    Raises
    ------
    InvalidProbability
        If alpha or beta is outside (0, 1).
    DegenerateInput
        If the denominator of the formula is exactly zero.
    ValueError
        On any other invalid input (kappa, sd).
    """
    _check_inputs(spec, inputs)
    return _raw_sample_size(spec, inputs)


def compute_sample_size(spec: TestSpec, inputs: TestInputs) -> int:
    """Group A sample size for the design described by *spec* and *inputs*.

    Parameters
    ----------
    spec : TestSpec
        Family (means / proportions) and kind (equality,
        non-inferiority / superiority, equivalence).
    inputs : TestInputs
        Group values, sd (means only), kappa, alpha, beta, margin.

    Returns
    -------
    int
        ``ceil`` of the closed-form value; at least 1.  Group B needs
        ``ceil(kappa * n)``.

    Raises
    ------
    InvalidProbability
        If alpha or beta is outside (0, 1).
    DegenerateInput
        If the denominator of the formula is exactly zero.

    Examples
    --------
    >>> spec = TestSpec("mean", "equality")
    >>> compute_sample_size(spec, TestInputs(group_a=5, group_b=10, sd=10))
    63
    """
    return max(math.ceil(raw_sample_size(spec, inputs)), 1)


def _build_result(spec: TestSpec, inputs: TestInputs, note: str) -> SampleSizeResult:
    raw_n = raw_sample_size(spec, inputs)
    n = max(math.ceil(raw_n), 1)
    return SampleSizeResult(
        n=n,
        n_b=max(math.ceil(inputs.kappa * n), 1),
        raw_n=raw_n,
        spec=spec,
        inputs=inputs,
        method=f"{spec.label} sample size calculation",
        note=note,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sample_size_means(
    mu_a: float,
    mu_b: float,
    sd: float,
    kind: TestKind | str = "equality",
    margin: float = 0.0,
    kappa: float = 1.0,
    alpha: float = 0.05,
    beta: float = 0.20,
) -> SampleSizeResult:
    """Sample size for a two-sample comparison of means.

    Parameters
    ----------
    mu_a, mu_b : float
        Expected means in group A and group B.
    sd : float
        Common standard deviation (> 0).
    kind : str
        ``'equality'``, ``'noninferiority'`` / ``'superiority'`` (same
        formula), or ``'equivalence'``.
    margin : float
        Negative for non-inferiority, positive for superiority and
        equivalence.  Ignored for equality.
    kappa : float
        Allocation ratio nB / nA (> 0).
    alpha : float
        Type-1 error (default 0.05).
    beta : float
        Type-2 error (default 0.20, i.e. 80% power).

    Returns
    -------
    SampleSizeResult

    Examples
    --------
    >>> sample_size_means(5, 10, sd=10).n
    63
    >>> sample_size_means(5, 5, sd=10, kind="noninferiority", margin=-5).n
    50
    """
    spec = TestSpec(TestFamily.MEAN, kind)
    inputs = TestInputs(
        group_a=mu_a, group_b=mu_b, sd=sd,
        kappa=kappa, alpha=alpha, beta=beta, margin=margin,
    )
    return _build_result(spec, inputs, note=f"n is per group; sd = {sd}")


def sample_size_props(
    p_a: float,
    p_b: float,
    kind: TestKind | str = "equality",
    margin: float = 0.0,
    kappa: float = 1.0,
    alpha: float = 0.05,
    beta: float = 0.20,
) -> SampleSizeResult:
    """Sample size for a two-sample comparison of proportions.

    Parameters
    ----------
    p_a, p_b : float
        Expected proportions in group A and group B.  Not clamped; keep
        them (and ``p_b + margin``) inside (0, 1) for a meaningful answer.
    kind : str
        ``'equality'``, ``'noninferiority'`` / ``'superiority'``, or
        ``'equivalence'``.
    margin : float
        Negative for non-inferiority, positive for superiority and
        equivalence.  Ignored for equality.
    kappa : float
        Allocation ratio nB / nA (> 0).
    alpha : float
        Type-1 error (default 0.05).
    beta : float
        Type-2 error (default 0.20).

    Returns
    -------
    SampleSizeResult

    Validates against: R TrialSize::TwoSampleProportion.Equality()
    """
    spec = TestSpec(TestFamily.PROPORTION, kind)
    inputs = TestInputs(
        group_a=p_a, group_b=p_b, sd=None,
        kappa=kappa, alpha=alpha, beta=beta, margin=margin,
    )
    return _build_result(spec, inputs, note=f"n is per group; p_a = {p_a}, p_b = {p_b}")
