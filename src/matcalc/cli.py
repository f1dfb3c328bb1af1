"""Interactive calculator session (``python -m matcalc``)."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from .errors import MatcalcError, error_kind
from .evaluator import VariableStore, calculate
from .kernel import SystemKind, solve_system
from .logging_config import DEFAULT_LOG_LEVEL, setup_logging
from .tree import parse_number
from .values import Matrix, Scalar, Value, format_scalar, format_value

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

HELP_TEXT = """\
Matrix calculator

Usage:
    * `help`: show this message
    * `var <NAME> <TYPE> [...]`: declare a variable
        * TYPE: `SCALAR` | `MATRIX`
        * `var PI SCALAR 3.14`
        * `var M MATRIX 2 2` then enter each row as space-separated numbers
    * `show [NAME ...]`: print every variable, or only the named ones
    * `calc <expression>`: evaluate an expression; tokens are separated by one space
        * binary operators: + - * / ^
        * postfix operators: T (transpose), DET (determinant), INV (inverse)
        * example: `calc ( A + B ) DET`
    * `eqsys <equations> <unknowns>`: enter an augmented matrix A|b and classify the system
    * `exit`: leave the calculator
"""

_SYSTEM_LABELS = {
    SystemKind.INCOMPATIBLE: "is incompatible",
    SystemKind.COMPATIBLE_INDETERMINATE: "is compatible indeterminate",
    SystemKind.COMPATIBLE_DETERMINATE: "is compatible determinate",
}


def default_store() -> VariableStore:
    return VariableStore(
        {
            "A": Matrix.from_rows([[1.0, 2.0], [3.0, 4.0]]),
            "B": Matrix.from_rows([[3.0, 4.5], [8.0, 2.0]]),
            "C": Matrix.new_empty(1, 1),
            "PI": Scalar(3.1415),
        }
    )


class Session:
    """Read/print loop over a :class:`VariableStore`."""

    prompt = ">>> "

    def __init__(
        self,
        store: VariableStore | None = None,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.store = default_store() if store is None else store
        self.stdin = sys.stdin if stdin is None else stdin
        self.stdout = sys.stdout if stdout is None else stdout
        self._commands = {
            "help": self._help,
            "var": self._declare,
            "show": self._show,
            "calc": self._calc,
            "eqsys": self._eqsys,
        }

    def _print(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def _readline(self, prompt: str) -> str | None:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def run(self) -> int:
        while True:
            line = self._readline(self.prompt)
            if line is None or not self.handle(line):
                return 0

    def handle(self, line: str) -> bool:
        """Run one command line; ``False`` means the session should end."""
        words = line.strip().split(" ")
        command = words[0]
        if command == "exit":
            return False
        if command == "":
            return True
        handler = self._commands.get(command)
        if handler is None:
            self._print(f"Invalid input: {line.strip()}")
            return True
        handler(words[1:])
        return True

    def _help(self, _args: list[str]) -> None:
        self.stdout.write(HELP_TEXT)

    def _print_binding(self, name: str, value: Value) -> None:
        if isinstance(value, Matrix) and value.rows > 1:
            self._print(f"{name} =")
            self._print(format_value(value))
        else:
            self._print(f"{name} = {format_value(value)}")

    def _show(self, names: list[str]) -> None:
        if not names:
            names = list(self.store)
        for name in names:
            if name in self.store:
                self._print_binding(name, self.store[name])
            else:
                self._print(f"Variable `{name}` is not defined")

    def _declare(self, args: list[str]) -> None:
        if len(args) < 2:
            self._print("Invalid command. Try `help`")
            return
        name, kind = args[0], args[1]
        try:
            VariableStore.validate_name(name)
        except ValueError as exc:
            self._print(f"Reserved or invalid identifier: {exc}")
            return

        if kind == "SCALAR":
            number = parse_number(args[2]) if len(args) > 2 else None
            if number is None:
                self._print("A numeric value is required")
                return
            value: Value = Scalar(number)
        elif kind == "MATRIX":
            if len(args) < 4 or not (args[2].isdigit() and args[3].isdigit()):
                self._print("Matrix dimensions must be non-negative integers")
                return
            matrix = self._read_matrix(int(args[2]), int(args[3]))
            if matrix is None:
                return
            value = matrix
        else:
            self._print("Invalid type, expected SCALAR or MATRIX")
            return

        previous = self.store.get(name)
        self.store[name] = value
        logger.info("declared %s as %s", name, kind.lower())
        if previous is not None:
            self._print("Previous value:")
            self._print(format_value(previous))

    def _read_matrix(self, rows: int, cols: int) -> Matrix | None:
        self._print(f"{rows} rows, {cols} columns. Enter each row as space-separated numbers.")
        matrix = Matrix.new_empty(rows, cols)
        for i in range(rows):
            line = self._readline(f"Row {i}: ")
            if line is None:
                self._print("Input ended before the matrix was complete")
                return None
            cells = line.split()
            if len(cells) != cols:
                self._print("Wrong number of columns")
                return None
            for j, text in enumerate(cells):
                number = parse_number(text)
                if number is None:
                    self._print("Only numbers, please")
                    return None
                matrix.set(i, j, number)
        return matrix

    def _calc(self, words: list[str]) -> None:
        expression = " ".join(words)
        try:
            result = calculate(expression, self.store)
        except MatcalcError as exc:
            logger.info("calculation failed: %s", exc)
            self._print(f"An error occurred ({error_kind(exc)})")
            return
        if isinstance(result, Scalar):
            self._print(f"Result: {format_scalar(result.value)}")
        else:
            self._print("Result:")
            self._print(format_value(result))

    def _eqsys(self, args: list[str]) -> None:
        if len(args) < 2 or not (args[0].isdigit() and args[1].isdigit()):
            self._print("Usage: eqsys <equations> <unknowns>")
            return
        equations, unknowns = int(args[0]), int(args[1])
        self._print("Enter the augmented matrix A|b, b being the independent column")
        augmented = self._read_matrix(equations, unknowns + 1)
        if augmented is None:
            self._print("Error while loading the data")
            return
        try:
            result = solve_system(augmented)
        except MatcalcError as exc:
            self._print(f"An error occurred ({error_kind(exc)})")
            return
        self._print("The system of equations")
        self._print(format_value(augmented))
        self._print(_SYSTEM_LABELS[result.kind])
        if result.solution is not None:
            for idx, value in enumerate(result.solution):
                self._print(f"x{idx} = {format_scalar(value)}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive scalar/matrix calculator")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=DEFAULT_LOG_LEVEL,
        help="logging level for the matcalc logger",
    )
    parser.add_argument("--log-file", default=None, help="also write log records to this file")
    parser.add_argument("--no-defaults", action="store_true", help="start with an empty variable store")
    parser.add_argument("-c", "--command", default=None, help="evaluate one expression and exit")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)
    store = VariableStore() if args.no_defaults else default_store()

    if args.command is not None:
        try:
            result = calculate(args.command, store)
        except MatcalcError as exc:
            print(f"error ({error_kind(exc)}): {exc}", file=sys.stderr)
            return 1
        print(format_value(result))
        return 0

    return Session(store).run()


if __name__ == "__main__":
    raise SystemExit(main())
