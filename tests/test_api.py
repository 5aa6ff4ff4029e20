#!/usr/bin/env python3
"""
Library facade: options, results and error reporting.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bftree.api import TranslateOptions, parse_string, run_string, translate_file, translate_string
from bftree.errors import BFIOError, BFNestingError, BFParseError, BFStepLimitError
from bftree.tree import AddTo, AddValue, Block, Jump, Print, SetValue


def test_parse_error_points_at_bracket():
    with pytest.raises(BFParseError) as excinfo:
        parse_string("+++\n++]\n")
    err = excinfo.value
    assert (err.line, err.column) == (2, 3)
    assert "Unmatched ']'" in str(err)
    assert ">    2 | ++]" in err.context
    assert "Hint:" in str(err)


def test_lone_closing_bracket_never_runs():
    with pytest.raises(BFParseError):
        run_string("]")


def test_unterminated_loop_policy():
    assert parse_string("+[-") == Block((AddValue(1), Jump(Block((AddValue(255),)))))
    with pytest.raises(BFParseError) as excinfo:
        parse_string("+[-", strict=True)
    assert "Unmatched '['" in str(excinfo.value)
    assert excinfo.value.line == 1


def test_unterminated_loop_points_at_open_bracket():
    with pytest.raises(BFParseError) as excinfo:
        parse_string("+[\n+\n+\n+", strict=True)
    err = excinfo.value
    assert (err.line, err.column) == (1, 2)
    assert ">    1 | +[" in err.context

    # the innermost bracket still open is reported, closed ones are skipped
    with pytest.raises(BFParseError) as excinfo:
        parse_string("[\n[-]\n  [+\n.", strict=True)
    assert (excinfo.value.line, excinfo.value.column) == (3, 3)


def test_deeply_nested_loops():
    depth = 1000
    assert run_string("[" * depth + "]" * depth + "+.").output == b"\x01"

    nested_clear = "+" + "[" * depth + "-" + "]" * depth + "."
    assert run_string(nested_clear).output == b"\x00"
    assert run_string(nested_clear, options=TranslateOptions(optimize=False)).output == b"\x00"


def test_nesting_beyond_limit_is_a_clean_error():
    depth = 20000
    with pytest.raises(BFNestingError, match="nested too deeply"):
        run_string("[" * depth + "]" * depth)


def test_translate_defaults_to_two_passes():
    result = translate_string("[->+<]")
    assert result.tree == Block((AddTo(1), SetValue(0)))
    assert result.passes_run == 2
    assert result.raw != result.tree


def test_translate_without_optimizer():
    result = translate_string("++.", options=TranslateOptions(optimize=False))
    assert result.tree is result.raw
    assert result.passes_run == 0


def test_translate_fixed_point():
    result = translate_string("[-]+++.", options=TranslateOptions(passes=None))
    assert result.tree == Block((SetValue(3), Print()))
    assert result.passes_run == 3


def test_translate_file(tmp_path):
    path = tmp_path / "prog.bf"
    path.write_text("copy cell: [->+<]\n", encoding="utf-8")
    assert translate_file(path).tree == Block((AddTo(1), SetValue(0)))


def test_run_string_output_and_state():
    result = run_string("+++.")
    assert result.output == b"\x03"
    assert result.pointer == 0

    assert run_string(",.", b"\x41").output == b"\x41"
    assert run_string(">+++++[-<++>]<.").output == bytes([10])


def test_run_string_input_exhausted():
    with pytest.raises(BFIOError):
        run_string(",,", b"x")


def test_run_string_step_limit():
    with pytest.raises(BFStepLimitError):
        run_string("+[>+]", options=TranslateOptions(max_steps=1000))
