"""CLI entry point for Voice Analyzer."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from voice_analyzer.analysis import AnalysisRecord, analyze_file
from voice_analyzer.audio import AudioLoadError
from voice_analyzer.classifier import InvalidArgumentError
from voice_analyzer.sessions import DEFAULT_SESSIONS_PATH, SessionStore, SessionStoreError


def print_results(record: AnalysisRecord) -> None:
    """Pretty-print analysis results to stdout."""
    result = record.classification
    print(f"\n{'=' * 50}")
    print(f"  {record.file_name or record.source}")
    print(f"{'=' * 50}")
    print(f"  Duration:     {record.duration:.2f}s at {record.sample_rate}Hz")
    print(f"  Gender:       {result.label.upper()}")
    print(f"  Confidence:   {result.confidence * 100:.1f}%")
    print(f"  Pitch (Hz):   {result.fundamental_frequency_hz:.1f}")
    print(f"  Volume:       {record.average_volume:.1f}")
    print(f"\n  Spectrum:")
    # Five rows of ten bands each
    levels = record.frequency_data
    for start in range(0, len(levels), 10):
        row = "".join(" .:-=+*#%@"[min(9, int(v / 10))] for v in levels[start:start + 10])
        print(f"    {row}")
    print()


def print_sessions(store: SessionStore) -> None:
    sessions = store.load()
    if not sessions:
        print("No saved sessions")
        return
    for session in sessions:
        result = session.data.classification
        print(f"  {session.id}  {session.name}  "
              f"{result.label:<7s} {result.confidence * 100:5.1f}%  "
              f"{result.fundamental_frequency_hz:7.1f} Hz")


def write_charts(record: AnalysisRecord, output_dir: Path, stem: str) -> None:
    from voice_analyzer.visualization import plot_pitch_bands, plot_spectrum

    # Records saved without a sample rate cannot label the spectrum axis
    if record.frequency_data and record.sample_rate > 0:
        plot_spectrum(
            record,
            title=f"{stem} - Frequency Spectrum",
            output_path=output_dir / "spectrum.png",
        )
    if record.classification.fundamental_frequency_hz > 0:
        plot_pitch_bands(
            record,
            title=f"{stem} - Voice Pitch",
            output_path=output_dir / "pitch.png",
        )
    print(f"  Charts saved to {output_dir}/")


def run_session_command(args: argparse.Namespace, store: SessionStore) -> None:
    if args.list_sessions:
        print_sessions(store)
    if args.export:
        out_path = store.export(args.export, args.export_dir)
        print(f"  Session exported to {out_path}")
    if args.show:
        session = store.get(args.show)
        print_results(session.data)
        if not args.no_plot and args.output:
            write_charts(session.data, args.output, session.name)
    if args.delete:
        if not store.delete(args.delete):
            raise KeyError(f"No session with id {args.delete!r}")
        print(f"  Deleted session {args.delete}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Estimate the pitch of a voice recording and classify it as male or female.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  python analyze.py voice.wav --output results/
  python analyze.py voice.webm --save
  python analyze.py --list-sessions
  python analyze.py --show 1700000000000 --output results/
        """,
    )
    parser.add_argument("audio_file", type=Path, nargs="?", default=None,
                        help="Path to audio file (wav, flac, ogg; others via ffmpeg)")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Output directory for charts")
    parser.add_argument("--sample-rate", type=int, default=None,
                        help="Resample to this rate before analysis (default: file rate)")
    parser.add_argument("--no-plot", action="store_true",
                        help="Skip chart generation")
    parser.add_argument("--save", action="store_true",
                        help="Save the analysis as a session")
    parser.add_argument("--sessions", type=Path, default=DEFAULT_SESSIONS_PATH,
                        help=f"Session file (default: {DEFAULT_SESSIONS_PATH})")
    parser.add_argument("--list-sessions", action="store_true",
                        help="List saved sessions")
    parser.add_argument("--export", metavar="ID", default=None,
                        help="Export a saved session to JSON")
    parser.add_argument("--export-dir", type=Path, default=Path("."),
                        help="Directory for exported sessions (default: current)")
    parser.add_argument("--show", metavar="ID", default=None,
                        help="Print a saved session (charts too with --output)")
    parser.add_argument("--delete", metavar="ID", default=None,
                        help="Delete a saved session")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    store = SessionStore(args.sessions)
    session_command = args.list_sessions or args.export or args.show or args.delete

    if args.audio_file is None and not session_command:
        parser.error("an audio file or a session command is required")

    if args.audio_file is not None and not args.audio_file.exists():
        print(f"Error: File not found: {args.audio_file}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        args.output.mkdir(parents=True, exist_ok=True)

    t0 = time.time()
    try:
        if args.audio_file is not None:
            record = analyze_file(args.audio_file, target_sr=args.sample_rate)
            print_results(record)

            if not args.no_plot and args.output:
                write_charts(record, args.output, args.audio_file.stem)

            if args.save:
                session = store.save(record)
                if session is None:
                    print("  Session already saved")
                else:
                    print(f"  Saved as {session.name} (id {session.id})")

        if session_command:
            run_session_command(args, store)

    except (AudioLoadError, InvalidArgumentError, SessionStoreError) as e:
        print(f"  Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyError as e:
        print(f"  Error: {e.args[0]}", file=sys.stderr)
        sys.exit(1)
    except ImportError as e:
        print(f"  Error: {e}", file=sys.stderr)
        sys.exit(1)

    elapsed = time.time() - t0
    print(f"  Time: {elapsed:.1f}s")


if __name__ == "__main__":
    main()
