"""
Power-Law Analyzer
==================

Accumulates entropy observations and fits a power-law tail exponent.

    alpha = 1 + n / sum(log(x / xmin))

The histogram is derived data: it is recomputed from the raw sample
sequence on every analysis run and never stored on its own.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Tuple, Union
import numpy as np

from ..contracts.base import DomainError, ErrorCode, StorageError
from ..contracts.events import HistogramBin, PowerLawReport


BIN_SCALE = 100
XMIN_FLOOR = 0.01
REPORT_HEADER = "# Event Size Distribution"


class PowerLawAnalyzer:
    """
    Append-only sample log with on-demand exponent fitting.
    """

    def __init__(self):
        self._samples: List[float] = []
        self._histogram: Tuple[HistogramBin, ...] = ()
        self._alpha: float = 0.0

    def log_event(self, value: float) -> None:
        """Append one observation. No dedup, no bound."""
        self._samples.append(value)

    @property
    def samples(self) -> Tuple[float, ...]:
        return tuple(self._samples)

    @property
    def alpha(self) -> float:
        """Exponent from the most recent fit (0.0 before any fit)."""
        return self._alpha

    def build_histogram(self) -> Tuple[HistogramBin, ...]:
        if not self._samples:
            self._histogram = ()
            return self._histogram

        keys = np.floor(np.asarray(self._samples, dtype=float) * BIN_SCALE).astype(np.int64)
        unique, counts = np.unique(keys, return_counts=True)
        self._histogram = tuple(
            HistogramBin(key=int(k), count=int(c)) for k, c in zip(unique, counts)
        )
        return self._histogram

    def fit_power_law(self) -> float:
        """
        Maximum-likelihood style exponent.

        Returns 0.0 with fewer than two samples. Raises DomainError when
        every positive sample equals xmin, since the estimate is infinite.
        """
        n = len(self._samples)
        if n < 2:
            self._alpha = 0.0
            return self._alpha

        values = np.asarray(self._samples, dtype=float)
        xmin = float(values.min())
        if xmin <= 0:
            xmin = XMIN_FLOOR

        positive = values[values > 0]
        sum_log = float(np.sum(np.log(positive / xmin)))
        if sum_log == 0.0:
            raise DomainError(
                ErrorCode.INSUFFICIENT_SPREAD,
                f"All {n} samples sit at xmin={xmin}; exponent is unbounded"
            )

        self._alpha = 1.0 + n / sum_log
        return self._alpha

    def analyze(self) -> PowerLawReport:
        """Recompute histogram and exponent, then evaluate the fitted curve per bin."""
        bins = self.build_histogram()
        alpha = self.fit_power_law()

        sizes = np.array([b.scaled_size for b in bins], dtype=float)
        with np.errstate(divide='ignore', invalid='ignore'):
            fitted = np.power(sizes, -alpha)

        return PowerLawReport(
            alpha=alpha,
            sample_count=len(self._samples),
            bins=bins,
            fitted=tuple(float(f) for f in fitted),
        )

    def save(self, target: Union[str, Path]) -> PowerLawReport:
        """Write the tab-separated analysis report."""
        report = self.analyze()
        lines = [
            REPORT_HEADER,
            f"# Power-law exponent (alpha): {report.alpha:g}",
            "# Size\tFrequency\tPowerLawFit",
        ]
        for hist_bin, fit in zip(report.bins, report.fitted):
            lines.append(f"{hist_bin.scaled_size:g}\t{hist_bin.count}\t{fit:g}")

        try:
            with open(target, 'w', encoding='utf-8') as f:
                f.write("\n".join(lines) + "\n")
        except OSError as e:
            raise StorageError(
                ErrorCode.EXPORT_FAILED, f"Could not write power-law analysis to {target}: {e}"
            ) from e

        return report
