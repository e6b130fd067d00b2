"""Voice classification: autocorrelation pitch estimate and gender band lookup."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np


logger = logging.getLogger(__name__)

MALE = "male"
FEMALE = "female"
UNKNOWN = "unknown"
LABELS = (MALE, FEMALE, UNKNOWN)


class InvalidArgumentError(ValueError):
    """Raised when a caller passes input the analyzer cannot work with."""
    pass


@dataclass
class ClassifierConfig:
    """Tuning constants for pitch estimation and band classification."""
    max_window_size: int = 4096
    min_lag: int = 20                                   # samples
    female_band: tuple[float, float] = (165.0, 265.0)   # Hz, checked first
    male_band: tuple[float, float] = (85.0, 180.0)      # Hz
    max_confidence: float = 0.9
    base_confidence: float = 0.4
    confidence_span: float = 0.5
    unclassified_confidence: float = 0.3


@dataclass
class ClassificationResult:
    """Detected fundamental frequency with its gender label."""
    label: str
    confidence: float
    fundamental_frequency_hz: float


def _as_samples(samples: Sequence[float] | np.ndarray) -> np.ndarray:
    audio = np.asarray(samples, dtype=np.float64)
    if audio.ndim != 1:
        raise InvalidArgumentError(
            f"Expected a single channel of samples, got shape {audio.shape}"
        )
    return audio


def autocorrelate(samples: Sequence[float] | np.ndarray, window_size: int) -> np.ndarray:
    """Autocorrelation of the first *window_size* samples for every lag.

    ``result[lag] = sum(s[i] * s[i + lag] for i in range(window_size - lag))``
    """
    audio = _as_samples(samples)[:window_size]
    if len(audio) == 0:
        return np.zeros(0)
    # Full correlation is symmetric; the second half holds lags 0..n-1.
    return np.correlate(audio, audio, mode="full")[len(audio) - 1:]


def estimate_pitch(
    samples: Sequence[float] | np.ndarray,
    sample_rate: int,
    config: ClassifierConfig | None = None,
) -> tuple[float, int, float]:
    """Estimate the fundamental frequency from the autocorrelation peak.

    Returns:
        Tuple of (frequency_hz, best_lag, max_correlation). Frequency and
        lag are 0 when no positive correlation peak exists past *min_lag*.
    """
    if config is None:
        config = ClassifierConfig()
    if sample_rate <= 0:
        raise InvalidArgumentError(f"Sample rate must be positive, got {sample_rate}")

    audio = _as_samples(samples)
    window_size = min(config.max_window_size, len(audio))
    if window_size == 0:
        return 0.0, 0, 0.0

    acf = autocorrelate(audio, window_size)

    # Lags strictly below window_size / 2
    stop = (window_size + 1) // 2
    best_lag = 0
    max_correlation = 0.0
    if stop > config.min_lag:
        candidates = acf[config.min_lag:stop]
        # argmax returns the first maximum, matching a strict ">" scan
        peak = int(np.argmax(candidates))
        if candidates[peak] > 0:
            best_lag = config.min_lag + peak
            max_correlation = float(candidates[peak])

    frequency = sample_rate / best_lag if best_lag > 0 else 0.0
    logger.debug(
        "window=%d best_lag=%d max_correlation=%.4f f0=%.2f Hz",
        window_size, best_lag, max_correlation, frequency,
    )
    return float(frequency), best_lag, max_correlation


def classify_frequency(
    frequency_hz: float,
    config: ClassifierConfig | None = None,
) -> ClassificationResult:
    """Map a fundamental frequency onto the female/male bands.

    The bands overlap between 165 and 180 Hz. The female band is checked
    first, so anything in the overlap is labelled female.
    """
    if config is None:
        config = ClassifierConfig()

    female_low, female_high = config.female_band
    male_low, male_high = config.male_band

    if frequency_hz <= 0:
        return ClassificationResult(UNKNOWN, 0.0, 0.0)

    if female_low <= frequency_hz <= female_high:
        ramp = (frequency_hz - female_low) / (female_high - female_low)
        confidence = min(
            config.max_confidence,
            ramp * config.confidence_span + config.base_confidence,
        )
        return ClassificationResult(FEMALE, confidence, frequency_hz)

    if male_low <= frequency_hz <= male_high:
        ramp = (male_high - frequency_hz) / (male_high - male_low)
        confidence = min(
            config.max_confidence,
            ramp * config.confidence_span + config.base_confidence,
        )
        return ClassificationResult(MALE, confidence, frequency_hz)

    return ClassificationResult(UNKNOWN, config.unclassified_confidence, frequency_hz)


def classify(
    samples: Sequence[float] | np.ndarray,
    sample_rate: int,
    config: ClassifierConfig | None = None,
) -> ClassificationResult:
    """Classify a single channel of audio as male, female or unknown.

    Args:
        samples: Mono samples in [-1.0, 1.0]. May be empty.
        sample_rate: Sample rate in Hz. Must be positive.
        config: Optional tuning constants.

    Returns:
        ClassificationResult. Empty, silent or aperiodic input yields
        ``unknown`` with zero confidence and zero frequency.
    """
    frequency, _, _ = estimate_pitch(samples, sample_rate, config)
    return classify_frequency(frequency, config)
