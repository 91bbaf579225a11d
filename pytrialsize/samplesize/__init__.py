"""
Sample sizes for two-sample clinical trial designs.

Closed-form, normal-approximation sample sizes for comparing two means or
two proportions under equality, non-inferiority / superiority, and
equivalence hypotheses, plus sweeps of one input across a range.

Validates against: R package TrialSize (TwoSampleMean.*, TwoSampleProportion.*).
"""

from pytrialsize.samplesize._common import (
    DegenerateInput,
    InvalidProbability,
    InvalidSweepRange,
    SampleSizeError,
    SampleSizeResult,
    TestFamily,
    TestInputs,
    TestKind,
    TestSpec,
)
from pytrialsize.samplesize._quantile import z_quantile
from pytrialsize.samplesize._formulas import (
    compute_sample_size,
    raw_sample_size,
    sample_size_means,
    sample_size_props,
)
from pytrialsize.samplesize._power import achieved_power
from pytrialsize.samplesize._sweep import SweepResult, sweep, sweep_values
from pytrialsize.samplesize._plot import plot_sweep

__all__ = [
    "TestFamily",
    "TestKind",
    "TestSpec",
    "TestInputs",
    "SampleSizeResult",
    "SweepResult",
    "SampleSizeError",
    "InvalidProbability",
    "DegenerateInput",
    "InvalidSweepRange",
    "z_quantile",
    "compute_sample_size",
    "raw_sample_size",
    "sample_size_means",
    "sample_size_props",
    "achieved_power",
    "sweep",
    "sweep_values",
    "plot_sweep",
]
