"""Visualization: spectrum bars and pitch-band chart."""
from __future__ import annotations

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap

from voice_analyzer.analysis import AnalysisRecord
from voice_analyzer.classifier import ClassifierConfig, FEMALE, MALE
from voice_analyzer.spectrum import band_edges


LABEL_COLORS = {
    MALE: "#1976D2",
    FEMALE: "#C2185B",
    "unknown": "#757575",
}

_BAR_CMAP = LinearSegmentedColormap.from_list(
    "spectrum_bars", ["#00ACC1", "#7E57C2", "#EF6C00"],
)


def _save_and_close(fig, output_path: str | Path | None, show: bool) -> None:
    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(str(output_path), dpi=150, bbox_inches="tight", facecolor="white")

    if show:
        plt.show()
    plt.close(fig)


def plot_spectrum(
    record: AnalysisRecord,
    title: str = "Frequency Spectrum",
    output_path: str | Path | None = None,
    show: bool = False,
) -> None:
    """Bar chart of the record's frequency band levels."""
    levels = record.frequency_data
    if not levels:
        raise ValueError("No frequency data to plot.")
    if record.sample_rate <= 0:
        raise ValueError("Record has no sample rate, cannot label frequencies.")

    n_bands = len(levels)
    edges = band_edges(record.sample_rate, n_bands)
    centers = (edges[:-1] + edges[1:]) / 2
    width = edges[1] - edges[0]
    colors = [_BAR_CMAP(i / max(1, n_bands - 1)) for i in range(n_bands)]

    fig, ax = plt.subplots(figsize=(12, 4))
    fig.patch.set_facecolor("white")
    ax.set_facecolor("#FAFAFA")
    ax.bar(centers, levels, width=width * 0.85, color=colors, edgecolor="white",
           linewidth=0.5, zorder=2)

    ax.set_xlim(0, edges[-1])
    ax.set_ylim(0, 105)
    ax.set_xlabel("Frequency (Hz)", fontsize=10, color="#555")
    ax.set_ylabel("Level", fontsize=10, color="#555")
    ax.set_title(title, fontsize=14, fontweight="bold", color="#222")

    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.spines["left"].set_color("#DDD")
    ax.spines["bottom"].set_color("#DDD")
    ax.yaxis.grid(True, alpha=0.15, linewidth=0.5, color="#999")
    ax.set_axisbelow(True)
    ax.tick_params(colors="#555", which="both")
    plt.tight_layout()

    _save_and_close(fig, output_path, show)


def plot_pitch_bands(
    record: AnalysisRecord,
    title: str = "Voice Pitch",
    output_path: str | Path | None = None,
    show: bool = False,
    config: ClassifierConfig | None = None,
) -> None:
    """Show the male and female pitch bands with the detected F0 marked."""
    if config is None:
        config = ClassifierConfig()

    result = record.classification
    f0 = result.fundamental_frequency_hz
    if f0 <= 0:
        raise ValueError("No pitch detected, nothing to plot.")

    fig, ax = plt.subplots(figsize=(10, 2.8))
    fig.patch.set_facecolor("white")

    bands = [(MALE, config.male_band, 0.55), (FEMALE, config.female_band, 0.05)]
    for label, (low, high), y in bands:
        ax.broken_barh([(low, high - low)], (y, 0.4), color=LABEL_COLORS[label], alpha=0.35)
        ax.text(low + 2, y + 0.2, f"{label} {low:.0f}-{high:.0f} Hz",
                va="center", fontsize=8, color=LABEL_COLORS[label], fontweight="bold")

    marker_color = LABEL_COLORS.get(result.label, LABEL_COLORS["unknown"])
    ax.axvline(f0, color=marker_color, linewidth=2, zorder=3)
    ax.text(f0, 1.02, f"{f0:.1f} Hz, {result.label} ({result.confidence * 100:.0f}%)",
            ha="center", va="bottom", fontsize=9, color=marker_color)

    low_edge = min(config.male_band[0], f0) * 0.85
    high_edge = max(config.female_band[1], f0) * 1.1
    ax.set_xlim(low_edge, high_edge)
    ax.set_ylim(0, 1.15)
    ax.set_yticks([])
    ax.set_xlabel("Fundamental frequency (Hz)", fontsize=10, color="#555")
    fig.suptitle(title, fontsize=14, fontweight="bold", color="#222")
    for side in ("top", "right", "left"):
        ax.spines[side].set_visible(False)
    plt.tight_layout()

    _save_and_close(fig, output_path, show)
