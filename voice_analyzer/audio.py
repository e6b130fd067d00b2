"""Audio file decoding for analysis."""
from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

import numpy as np
import soundfile as sf


logger = logging.getLogger(__name__)


class AudioLoadError(Exception):
    """Raised when an audio file cannot be decoded."""
    pass


def _decode_with_ffmpeg(audio_path: Path) -> tuple[np.ndarray, int]:
    """Convert an unsupported format (webm, m4a, aac, ...) to WAV via ffmpeg."""
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(suffix=".wav")
        os.close(fd)
        subprocess.run(
            ["ffmpeg", "-i", str(audio_path), "-f", "wav", "-y", tmp_path],
            capture_output=True, check=True,
        )
        return sf.read(tmp_path, always_2d=True)
    except FileNotFoundError:
        raise AudioLoadError(
            f"Cannot decode {audio_path.name}: format not supported by libsndfile "
            "and ffmpeg is not installed."
        ) from None
    except (subprocess.CalledProcessError, sf.LibsndfileError) as e:
        raise AudioLoadError(f"Cannot decode {audio_path.name}: {e}") from e
    finally:
        if tmp_path:
            os.unlink(tmp_path)


def load_audio(
    audio_path: str | Path,
    target_sr: int | None = None,
) -> tuple[np.ndarray, int]:
    """Load the first channel of an audio file as float32.

    Args:
        audio_path: Path to the audio file.
        target_sr: Resample to this rate if given and different.

    Returns:
        Tuple of (samples, sample_rate).
    """
    audio_path = Path(audio_path)
    if not audio_path.exists():
        raise FileNotFoundError(f"Audio file not found: {audio_path}")

    try:
        audio_np, sr = sf.read(str(audio_path), always_2d=True)
    except sf.LibsndfileError:
        logger.debug("libsndfile cannot read %s, falling back to ffmpeg", audio_path)
        audio_np, sr = _decode_with_ffmpeg(audio_path)

    # soundfile returns (samples, channels); analysis uses channel 0 only
    samples = audio_np[:, 0].astype(np.float32)

    if target_sr is not None and target_sr != sr:
        if target_sr <= 0:
            raise ValueError(f"Target sample rate must be positive, got {target_sr}")
        try:
            import librosa
        except ImportError:
            raise ImportError(
                "librosa is required for resampling. "
                "Install with: pip install librosa"
            )
        samples = librosa.resample(samples, orig_sr=sr, target_sr=target_sr)
        sr = target_sr

    logger.debug("Loaded %s: %d samples at %d Hz", audio_path.name, len(samples), sr)
    return samples, int(sr)


def duration_seconds(samples: np.ndarray, sample_rate: int) -> float:
    """Length of *samples* in seconds."""
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    return len(samples) / sample_rate


def average_volume(samples: np.ndarray) -> float:
    """RMS level of *samples* on a 0-100 scale (full-scale sine is ~70.7)."""
    audio = np.asarray(samples, dtype=np.float64)
    if len(audio) == 0:
        return 0.0
    rms = float(np.sqrt(np.mean(np.square(audio))))
    return min(100.0, rms * 100.0)
