"""Tests for voice_analyzer/spectrum.py."""
from __future__ import annotations

import numpy as np
import pytest

from voice_analyzer.spectrum import band_edges, frequency_bands


class TestBandEdges:
    def test_spans_zero_to_nyquist(self):
        edges = band_edges(8000, 50)
        assert len(edges) == 51
        assert edges[0] == 0.0
        assert edges[-1] == pytest.approx(4000.0)

    def test_equal_width(self):
        edges = band_edges(44100, 10)
        assert np.allclose(np.diff(edges), 2205.0)

    def test_invalid_sample_rate(self):
        with pytest.raises(ValueError):
            band_edges(0)

    def test_invalid_band_count(self):
        with pytest.raises(ValueError):
            band_edges(8000, 0)


class TestFrequencyBands:
    def test_default_band_count(self, make_sine):
        assert len(frequency_bands(make_sine(200.0, 8000), 8000)) == 50

    def test_peak_in_sine_band(self, make_sine):
        # 1 kHz at 8 kHz: bands are 80 Hz wide, 1000 Hz falls in band 12
        levels = frequency_bands(make_sine(1000.0, 8000), 8000)
        assert int(np.argmax(levels)) == 12
        assert levels[12] == pytest.approx(100.0)

    def test_levels_in_range(self, make_sine):
        audio = make_sine(300.0, 16000) + make_sine(2500.0, 16000, amplitude=0.2)
        levels = frequency_bands(audio, 16000)
        assert all(0.0 <= v <= 100.0 for v in levels)
        assert max(levels) == pytest.approx(100.0)

    def test_silence_is_flat_zero(self):
        assert frequency_bands(np.zeros(4096), 8000) == [0.0] * 50

    def test_empty_input(self):
        assert frequency_bands([], 8000, n_bands=8) == [0.0] * 8

    def test_custom_band_count(self, make_sine):
        assert len(frequency_bands(make_sine(200.0, 8000), 8000, n_bands=16)) == 16
