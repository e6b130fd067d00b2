"""Shared test fixtures."""
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf


def sine(freq: float, sr: int, n_samples: int = 4096, amplitude: float = 0.5) -> np.ndarray:
    """Sine wave starting at phase 0."""
    t = np.arange(n_samples) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


@pytest.fixture
def make_sine():
    return sine


@pytest.fixture(scope="session")
def voice_200hz_wav(tmp_path_factory) -> Path:
    """Generate a 1-second 200Hz sine WAV at 8kHz (female band)."""
    sr = 8000
    audio = sine(200.0, sr, n_samples=sr).astype(np.float32)
    path = tmp_path_factory.mktemp("fixtures") / "voice_200hz.wav"
    sf.write(str(path), audio, sr)
    return path


@pytest.fixture(scope="session")
def stereo_wav(tmp_path_factory) -> Path:
    """Generate a stereo WAV: 100Hz sine on the left, silence on the right."""
    sr = 8000
    left = sine(100.0, sr, n_samples=sr)
    right = np.zeros(sr)
    audio = np.stack([left, right], axis=1).astype(np.float32)
    path = tmp_path_factory.mktemp("fixtures") / "stereo.wav"
    sf.write(str(path), audio, sr)
    return path


@pytest.fixture(scope="session")
def silence_wav(tmp_path_factory) -> Path:
    """Generate a 1-second silent WAV file."""
    sr = 8000
    audio = np.zeros(sr, dtype=np.float32)
    path = tmp_path_factory.mktemp("fixtures") / "silence.wav"
    sf.write(str(path), audio, sr)
    return path
