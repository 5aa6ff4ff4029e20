#!/usr/bin/env python3
"""
Token mapping: symbols <-> commands, positions, comment skipping.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bftree.commands import BF_OPS, Command, commands, to_source, tokenize


def test_every_symbol_round_trips():
    assert len(BF_OPS) == 8
    for ch in "><+-.,[]":
        command = Command.from_char(ch)
        assert command is not None
        assert command.char == ch
        assert str(command) == ch


def test_non_command_characters_are_skipped():
    for ch in "abc \n\t#!0xyz":
        assert Command.from_char(ch) is None
    assert list(commands("a+b-c")) == [Command.INCREMENT, Command.DECREMENT]


def test_tokenize_tracks_line_and_column():
    tokens = tokenize("+ x\n  ]\n")
    assert [t.command for t in tokens] == [Command.INCREMENT, Command.LOOP_END]
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[1].line, tokens[1].column) == (2, 3)


def test_to_source_strips_comments():
    src = "hello [->+<] world.\n"
    assert to_source(commands(src)) == "[->+<]."


def main():
    print("=== Token Mapper Test ===\n")
    tests = [
        test_every_symbol_round_trips,
        test_non_command_characters_are_skipped,
        test_tokenize_tracks_line_and_column,
        test_to_source_strips_comments,
    ]
    for test in tests:
        test()
        print(f"✓ {test.__name__}")


if __name__ == "__main__":
    main()
