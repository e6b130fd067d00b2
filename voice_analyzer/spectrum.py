"""Frequency-band levels for the spectrum display."""
from __future__ import annotations

from typing import Sequence

import numpy as np


DEFAULT_BANDS = 50
_MAX_WINDOW = 4096


def band_edges(sample_rate: int, n_bands: int = DEFAULT_BANDS) -> np.ndarray:
    """Return the n_bands + 1 band boundaries in Hz, from 0 to Nyquist."""
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    if n_bands <= 0:
        raise ValueError(f"Band count must be positive, got {n_bands}")
    return np.linspace(0.0, sample_rate / 2, n_bands + 1)


def frequency_bands(
    samples: Sequence[float] | np.ndarray,
    sample_rate: int,
    n_bands: int = DEFAULT_BANDS,
    max_window: int = _MAX_WINDOW,
) -> list[float]:
    """Average spectrum magnitude per equal-width band, scaled to 0-100.

    The loudest band is 100. Empty or silent input gives all zeros.
    """
    edges = band_edges(sample_rate, n_bands)
    audio = np.asarray(samples, dtype=np.float64)[:max_window]
    if len(audio) == 0:
        return [0.0] * n_bands

    windowed = audio * np.hanning(len(audio))
    magnitudes = np.abs(np.fft.rfft(windowed))
    freqs = np.fft.rfftfreq(len(audio), d=1.0 / sample_rate)

    # Bin index per FFT frequency; Nyquist lands in the last band
    band_idx = np.clip(np.searchsorted(edges, freqs, side="right") - 1, 0, n_bands - 1)
    sums = np.bincount(band_idx, weights=magnitudes, minlength=n_bands)
    counts = np.bincount(band_idx, minlength=n_bands)
    levels = np.divide(sums, counts, out=np.zeros(n_bands), where=counts > 0)

    peak = levels.max()
    if peak <= 0:
        return [0.0] * n_bands
    return [float(v) for v in levels / peak * 100.0]
