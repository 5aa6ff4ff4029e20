from .commands import Command, Token, commands, tokenize, to_source
from .tree import (
    AddTo,
    AddValue,
    Block,
    Jump,
    MovePointer,
    Node,
    Print,
    Read,
    SetValue,
    build_tree,
    dumps,
    to_data,
)
from .engine import Engine, TapeState
from .optimizer import optimize, optimize_program, optimize_to_fixed_point
from .errors import BFError, BFIOError, BFNestingError, BFParseError, BFStepLimitError
from .api import RunResult, TranslateOptions, TranslateResult, parse_string, run_string, run_tree, translate_file, translate_string

__all__ = [
    'Command',
    'Token',
    'commands',
    'tokenize',
    'to_source',
    'AddTo',
    'AddValue',
    'Block',
    'Jump',
    'MovePointer',
    'Node',
    'Print',
    'Read',
    'SetValue',
    'build_tree',
    'dumps',
    'to_data',
    'Engine',
    'TapeState',
    'optimize',
    'optimize_program',
    'optimize_to_fixed_point',
    'BFError',
    'BFIOError',
    'BFNestingError',
    'BFParseError',
    'BFStepLimitError',
    'RunResult',
    'TranslateOptions',
    'TranslateResult',
    'parse_string',
    'run_string',
    'run_tree',
    'translate_file',
    'translate_string',
]
