"""Command line interface: ``--compress`` or ``--decompress`` files."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Sequence
from typing import Optional

from shrink.engine import (
    DEFAULT_EXTENSION,
    ENGINES,
    EngineError,
    compress_files,
    decompress_files,
)

PROGRAM = "shrink"
COMMANDS = ("compress", "decompress", "benchmark", "help")

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


class _UsageError(Exception):
    """A flag could not be parsed."""


def find_intersection(names: Iterable[str], args: Iterable[str]) -> list[str]:
    """Keep the arguments whose name (the text before any '=') is in ``names``."""
    wanted = set(names)
    return [arg for arg in args if arg.split("=", 1)[0] in wanted]


def count_true(flags: Iterable[bool]) -> int:
    """Count the flags that are set."""
    return sum(1 for flag in flags if flag)


def split_files(argument: str) -> list[str]:
    """Split a comma separated file list and trim each name."""
    return [part.strip() for part in argument.split(",")]


def delete_files(files: Iterable[str]) -> None:
    """Remove every file; a missing file raises."""
    for file in files:
        os.remove(file)


def _parse_bool(name: str, raw: str) -> bool:
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise _UsageError(f"invalid boolean value {raw!r} for flag -{name}")


def _parse_flags(args: Sequence[str], spec: dict[str, type]) -> dict[str, object]:
    values: dict[str, object] = {}
    remaining = iter(args)
    for arg in remaining:
        name, has_value, raw = arg.lstrip("-").partition("=")
        kind = spec.get(name)
        if kind is None:
            raise _UsageError(f"flag provided but not defined: -{name}")
        if kind is bool:
            values[name] = _parse_bool(name, raw) if has_value else True
            continue
        if not has_value:
            following = next(remaining, None)
            if following is None:
                raise _UsageError(f"flag needs an argument: -{name}")
            raw = following
        if kind is int:
            try:
                values[name] = int(raw, 0)
            except ValueError:
                raise _UsageError(f"invalid value {raw!r} for flag -{name}") from None
        else:
            values[name] = raw
    return values


def _print_usage(header: str, commands: str, flags: Sequence[tuple[str, str]]) -> None:
    print(header, file=sys.stderr)
    print(f"Valid commands include:\n\t{commands}", file=sys.stderr)
    print("Flag:", file=sys.stderr)
    for name, text in flags:
        print(f"  --{name}\n    \t{text}", file=sys.stderr)


_ALGORITHM_HELP = "Which algorithm(s) to use, choices include: \n\t" + ", ".join(ENGINES)


def _main_usage() -> None:
    _print_usage(
        f"Usage of {PROGRAM}:",
        ", ".join(COMMANDS),
        [
            ("benchmark", "Benchmark File"),
            ("compress", "Compress File"),
            ("decompress", "Decompress File"),
            ("help", "Help"),
        ],
    )


def _compress_usage() -> None:
    _print_usage(
        f"Usage of {PROGRAM} --compress [OPTIONS] <file(s)>",
        "algorithm, delete, outfileext, help",
        [
            ("algorithm", f"{_ALGORITHM_HELP} (default \"huffman\")"),
            ("delete", "Delete file after compression"),
            ("help", "Compress Help"),
            ("outfileext", f"File extension used for the result (default \"{DEFAULT_EXTENSION}\")"),
        ],
    )


def _flate_usage() -> None:
    _print_usage(
        f"Usage of {PROGRAM} --compress --algorithm=flate [OPTIONS] <file(s)>",
        "btype, bfinal, help",
        [
            ("bfinal", "Final Block of the compression process"),
            ("btype", "Which btype to use, choices include: 1, 2, 3 (default 2)"),
            ("help", "Compress Help"),
        ],
    )


def _decompress_usage() -> None:
    _print_usage(
        f"Usage of {PROGRAM} --decompress [OPTIONS] <file(s)>",
        "algorithm, delete, help",
        [
            ("algorithm", f"{_ALGORITHM_HELP} (default \"huffman\")"),
            ("delete", "Delete compression file after decompression"),
            ("help", "Help"),
        ],
    )


def _input_files(args: Sequence[str]) -> Optional[list[str]]:
    name = next((arg for arg in args if not arg.startswith("-")), None)
    if name is None:
        print("No file provided for compression")
        return None
    files = split_files(name)
    missing = next((file for file in files if not os.path.exists(file)), None)
    if missing is not None:
        print(f"Could not open the provided file {missing}")
        return None
    return files


def _select(names: Sequence[str], args: Sequence[str]) -> list[str]:
    return find_intersection(names, args) or find_intersection(["--help"], args)


def _compress(args: Sequence[str]) -> int:
    flags = _parse_flags(
        _select(["--algorithm", "--delete", "--outfileext"], args[1:]),
        {"algorithm": str, "delete": bool, "outfileext": str, "help": bool},
    )
    if flags.get("help"):
        _compress_usage()
    algorithm = str(flags.get("algorithm", "huffman"))
    extension = str(flags.get("outfileext", DEFAULT_EXTENSION))

    files = _input_files(args)
    if files is None:
        return 1

    options = None
    if algorithm == "flate":
        flate_flags = _parse_flags(
            _select(["--btype", "--bfinal"], args[2:]),
            {"btype": int, "bfinal": int, "help": bool},
        )
        if flate_flags.get("help"):
            _flate_usage()
        options = {
            "btype": int(flate_flags.get("btype", 2)),
            "bfinal": int(flate_flags.get("bfinal", 0)),
        }

    compress_files(algorithm, files, extension, options)
    if flags.get("delete"):
        delete_files(files)
    return 0


def _decompress(args: Sequence[str]) -> int:
    flags = _parse_flags(
        _select(["--algorithm", "--delete", "--help"], args[1:]),
        {"algorithm": str, "delete": bool, "help": bool},
    )
    if flags.get("help"):
        _decompress_usage()
    files = _input_files(args)
    if files is None:
        return 1
    decompress_files(str(flags.get("algorithm", "huffman")), files)
    if flags.get("delete"):
        delete_files(files)
    return 0


def _run(args: Sequence[str]) -> int:
    if not args:
        print("Please provide commands")
        return 1
    commands = _parse_flags(
        find_intersection(["--compress", "--decompress", "--benchmark"], args),
        {"compress": bool, "decompress": bool, "benchmark": bool},
    )
    selected = count_true(commands.get(name, False) for name in COMMANDS[:3])
    if selected > 1:
        print("Specify a single command")
        return 1
    if selected == 0:
        help_flag = _parse_flags(find_intersection(["--help"], args), {"help": bool})
        if help_flag.get("help"):
            _main_usage()
            return 0
        print("No command is selected. Compression by default")
        return _compress(args)
    if commands.get("compress"):
        return _compress(args)
    if commands.get("decompress"):
        return _decompress(args)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line with ``argv`` (the arguments after the program name)."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        return _run(args)
    except _UsageError as exc:
        print(exc, file=sys.stderr)
        return 2
    except EngineError as exc:
        print(exc)
        return 1
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())