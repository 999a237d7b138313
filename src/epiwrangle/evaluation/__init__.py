"""Evaluation module - correlations between signals."""

from epiwrangle.evaluation.correlation import (
    CORRELATION_METHODS,
    pairwise_correlation,
    signal_cor,
)

__all__ = [
    'CORRELATION_METHODS',
    'pairwise_correlation',
    'signal_cor',
]
