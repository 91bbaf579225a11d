"""
PyTrialSize: sample size planning for two-arm clinical trials in Python.

Closed-form sample sizes for comparing two means or two proportions under
equality, non-inferiority / superiority, and equivalence hypotheses, and
tables of how the required n moves as one design input is swept.

Usage:
    from pytrialsize import samplesize
"""

__version__ = "0.1.0"

from pytrialsize import samplesize

__all__ = [
    "__version__",
    "samplesize",
]
