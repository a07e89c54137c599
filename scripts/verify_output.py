"""
Verification script for captured logflood output.

Reads a file of records (as written to stdout, or as delivered at the far end
of a pipeline) and checks that every line has the expected byte size, parses
as a record, carries the same filler, and that sequence numbers are contiguous
modulo 10^6. Gaps point at records lost somewhere in the pipeline.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import typer

from logflood.formatter import DATA_KEY, SEQ_KEY, SEQ_MODULUS, SEQ_WIDTH, TS_KEY
from logflood.utils.units import UnitParseError, parse_byte_size

app = typer.Typer(help="Check a captured logflood stream for size and sequence violations.")

MAX_REPORTED_PROBLEMS = 20


@dataclass
class VerifyReport:
    lines: int = 0
    size_violations: int = 0
    parse_errors: int = 0
    filler_mismatches: int = 0
    sequence_gaps: int = 0
    missing_records: int = 0
    problems: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return (
            self.lines > 0
            and not self.size_violations
            and not self.parse_errors
            and not self.filler_mismatches
            and not self.sequence_gaps
        )

    def _note(self, message: str) -> None:
        if len(self.problems) < MAX_REPORTED_PROBLEMS:
            self.problems.append(message)


def _verify_lines(lines: Iterable[bytes], record_size: int) -> VerifyReport:
    report = VerifyReport()
    expected_seq: Optional[int] = None
    filler: Optional[str] = None

    for lineno, raw in enumerate(lines, start=1):
        report.lines += 1
        line = raw.rstrip(b"\n")

        if len(line) != record_size:
            report.size_violations += 1
            report._note(f"line {lineno}: {len(line)} bytes, expected {record_size}")

        try:
            record = json.loads(line)
            timestamp, seq_text, data = record[TS_KEY], record[SEQ_KEY], record[DATA_KEY]
        except (ValueError, KeyError, TypeError) as exc:
            report.parse_errors += 1
            report._note(f"line {lineno}: not a record ({exc})")
            expected_seq = None
            continue

        if (
            not isinstance(timestamp, str)
            or not isinstance(seq_text, str)
            or len(seq_text) != SEQ_WIDTH
            or not seq_text.isdigit()
        ):
            report.parse_errors += 1
            report._note(f"line {lineno}: malformed ts or seq")
            expected_seq = None
            continue

        if filler is None:
            filler = data
        elif data != filler:
            report.filler_mismatches += 1
            report._note(f"line {lineno}: filler differs from first record")

        seq = int(seq_text)
        if expected_seq is not None and seq != expected_seq:
            report.sequence_gaps += 1
            report.missing_records += (seq - expected_seq) % SEQ_MODULUS
            report._note(f"line {lineno}: seq {seq:06d}, expected {expected_seq:06d}")
        expected_seq = (seq + 1) % SEQ_MODULUS

    return report


@app.command()
def main(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Captured output file."),
    record_size: str = typer.Option(
        "1KiB",
        "--record-size",
        "-s",
        help="Expected record size excluding the newline.",
    ),
) -> None:
    """
    Verify a captured stream and exit non-zero on any violation.
    """
    try:
        expected = parse_byte_size(record_size)
    except UnitParseError as exc:
        raise typer.BadParameter(str(exc), param_hint="--record-size") from exc

    with path.open("rb") as f:
        report = _verify_lines(f, expected)

    for problem in report.problems:
        typer.echo(problem, err=True)

    typer.echo(
        f"lines={report.lines} size_violations={report.size_violations} "
        f"parse_errors={report.parse_errors} filler_mismatches={report.filler_mismatches} "
        f"sequence_gaps={report.sequence_gaps} missing_records={report.missing_records}"
    )
    if not report.ok:
        typer.echo("FAIL", err=True)
        raise typer.Exit(code=1)
    typer.echo("OK")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
