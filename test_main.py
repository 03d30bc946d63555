"""Tests for the reduction harness and its run logger."""

import pytest

from main import build_parser, main
from polyline_reducer.utils.logger import ReductionLogger


def test_main_prints_counts_for_both_variants(capsys):
    main(["--points", "2000", "--seed", "3", "--epsilon", "0.5"])
    out = capsys.readouterr().out
    assert "2,000 points (seed 3)" in out
    assert "epsilon=0.5: to " in out
    assert "non-parametric: to " in out


def test_main_runs_benchmark_and_writes_debug_file(tmp_path, capsys):
    debug_file = tmp_path / "reduce_debug.log"
    main(["--points", "300", "--preset", "aggressive", "--full-scan",
          "--iterations", "2", "--debug-file", str(debug_file)])
    out = capsys.readouterr().out
    assert "epsilon=2 benchmark:" in out
    assert "non-parametric benchmark:" in out
    assert "Max error: " in out

    text = debug_file.read_text()
    assert text.startswith("Debug logging started at")
    assert "epsilon=2: 300 ->" in text


def test_parser_rejects_unknown_preset():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--preset", "nope"])


def test_logger_without_debug_file(capsys):
    run_logger = ReductionLogger()
    run_logger.log_reduction("demo", 10, 0, 1.0)
    run_logger.close()
    out = capsys.readouterr().out
    assert "demo: to 0 points" in out
    assert "Compression ratio: 1.0x" in out
