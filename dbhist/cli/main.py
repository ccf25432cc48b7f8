"""dbhist CLI - peak and RMS dBFS histograms of audio files."""
from __future__ import annotations
import argparse
import os
import sys
from pathlib import Path

from dbhist.version import __version__
from dbhist.analysis.buckets import MIN_DBFS
from dbhist.analysis.pipeline import analyze_buffer
from dbhist.dsp.windowing import window_size_for_rate
from dbhist.io.audio import describe, libsndfile_version, load_audio
from dbhist.reporting.table import write_report


EXIT_OK = 0
EXIT_BAD_ARGS = 2
EXIT_DECODE_ERROR = 3
EXIT_OUTPUT_ERROR = 4
EXIT_INTERNAL_ERROR = 5

USAGE_EPILOG = f"""\
Generate histogram of samples and RMS values.

50ms window is used for calculating RMS values. Histogram values are normalized
so that max value is 100.

Bucket 1 covers all values greater than 0 dBFS, bucket {MIN_DBFS} covers all values
lower or equal {MIN_DBFS} dBFS
"""


def _quiet(*_args, **_kwargs) -> None:
    pass


def _check_input(path: str) -> None:
    """Raise if the input file cannot be opened for reading."""
    with open(path, "rb"):
        pass


def _check_output(path: str, force: bool) -> None:
    """Raise FileExistsError if output exists and overwrite is not forced."""
    if Path(path).exists() and not force:
        raise FileExistsError(f"{path} already exists. Use --force")


def _process(args, out_fp, log) -> None:
    """Decode input, build histograms and write the report to out_fp."""
    log(f"Using {libsndfile_version()}")
    audio = load_audio(args.input)
    log(describe(args.input, audio))
    for w in audio.warnings:
        print(f"Warning: {w}", file=sys.stderr)

    nread = int(audio.samples.size)
    if nread <= 0:
        raise ValueError(f"no audio read from {args.input}")
    log(f"nread {nread} (samples)")

    win_size = window_size_for_rate(audio.fs)
    log(f"50ms rms window has {win_size} frames")

    results = analyze_buffer(audio, win_size, workers=args.workers)
    for res in results:
        log(f"ch {res.channel} has {res.zero_count} zeros")

    write_report(out_fp, results)


def cmd_histogram(args) -> int:
    """Handle the histogram run."""
    log = _quiet if getattr(args, "quiet", False) else print

    try:
        _check_input(args.input)
    except OSError as e:
        print(f"Error: can't open {args.input} - {e.strerror or e}", file=sys.stderr)
        return EXIT_BAD_ARGS
    try:
        _check_output(args.output, args.force)
    except FileExistsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_OUTPUT_ERROR

    existed = os.path.exists(args.output)
    try:
        out_fp = open(args.output, "w", encoding="utf-8")
    except OSError as e:
        print(f"Error: can't open {args.output} for writing - {e.strerror or e}", file=sys.stderr)
        return EXIT_OUTPUT_ERROR

    code = EXIT_OK
    with out_fp:
        try:
            _process(args, out_fp, log)
        except FileNotFoundError as e:
            print(f"Error: File not found - {e}", file=sys.stderr)
            code = EXIT_BAD_ARGS
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            code = EXIT_DECODE_ERROR
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            code = EXIT_OUTPUT_ERROR
        except Exception as e:
            print(f"Internal error: {e}", file=sys.stderr)
            code = EXIT_INTERNAL_ERROR

    if code != EXIT_OK:
        if not existed:
            Path(args.output).unlink(missing_ok=True)
        return code
    log("done")
    return EXIT_OK


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dbhist",
        description="dbhist - peak and RMS dBFS histograms of audio files",
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version",
        version=f"dbhist {__version__}"
    )
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input audio file"
    )
    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Output report file"
    )
    parser.add_argument(
        "--force", "-F",
        action="store_true",
        help="Overwrite the output file if it exists"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print progress messages"
    )
    parser.add_argument(
        "--workers", "-j",
        type=int,
        default=1,
        help="Worker processes for per-channel analysis (default: 1)"
    )

    args = parser.parse_args(argv)
    sys.exit(cmd_histogram(args))


if __name__ == "__main__":
    main()
