from __future__ import annotations

import contextlib
import importlib.util
import io
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for session tests")
class SessionTests(unittest.TestCase):
    def _run(self, script: str, store=None) -> tuple[str, object]:
        from matcalc.cli import Session

        stdout = io.StringIO()
        session = Session(store, stdin=io.StringIO(script), stdout=stdout)
        status = session.run()
        self.assertEqual(status, 0)
        return stdout.getvalue(), session

    def test_calc_prints_scalar_result(self) -> None:
        out, _ = self._run("calc 4 ^ 3\nexit\n")
        self.assertIn("Result: 64", out)

    def test_calc_uses_default_variables(self) -> None:
        out, _ = self._run("calc A DET\ncalc A + B\n")
        self.assertIn("Result: -2", out)
        self.assertIn("4 6.5\n11 6", out)

    def test_calc_failure_reports_error_kind(self) -> None:
        out, _ = self._run("calc A + 2\ncalc A / B\ncalc 2 + Q\n")
        self.assertIn("An error occurred (TypeMismatch)", out)
        self.assertIn("An error occurred (UnsupportedOperation)", out)
        self.assertIn("An error occurred (MalformedToken)", out)

    def test_declare_scalar_and_show(self) -> None:
        out, session = self._run("var X SCALAR 2.5\nshow X Y\n")
        from matcalc.values import Scalar

        self.assertEqual(session.store["X"], Scalar(2.5))
        self.assertIn("X = 2.5", out)
        self.assertIn("Variable `Y` is not defined", out)

    def test_declare_matrix_reads_rows(self) -> None:
        out, session = self._run("var M MATRIX 2 2\n1 2\n3 4\ncalc M DET\nshow M\n")
        self.assertEqual(session.store["M"].tolist(), [[1.0, 2.0], [3.0, 4.0]])
        self.assertIn("Result: -2", out)
        self.assertIn("M =\n1 2\n3 4", out)

    def test_declare_matrix_rejects_bad_rows(self) -> None:
        out, session = self._run("var M MATRIX 1 2\n1 2 3\nvar N MATRIX 1 1\nx\n")
        self.assertIn("Wrong number of columns", out)
        self.assertIn("Only numbers, please", out)
        self.assertNotIn("M", session.store)
        self.assertNotIn("N", session.store)

    def test_declare_rejects_reserved_names_and_bad_values(self) -> None:
        out, session = self._run("var T SCALAR 1\nvar X SCALAR abc\nvar X VECTOR 1\nvar\n")
        self.assertIn("Reserved or invalid identifier", out)
        self.assertIn("A numeric value is required", out)
        self.assertIn("Invalid type", out)
        self.assertIn("Invalid command", out)
        self.assertNotIn("T", session.store)
        self.assertNotIn("X", session.store)

    def test_redeclare_prints_previous_value(self) -> None:
        out, _ = self._run("var PI SCALAR 3\n")
        self.assertIn("Previous value:\n3.1415", out)

    def test_eqsys_classifies_and_solves(self) -> None:
        out, _ = self._run("eqsys 2 2\n1 1 3\n1 -1 1\n")
        self.assertIn("is compatible determinate", out)
        self.assertIn("x0 = 2", out)
        self.assertIn("x1 = 1", out)

        out, _ = self._run("eqsys 3 3\n1 1 1 4\n2 2 2 8\n3 3 3 45\n")
        self.assertIn("is incompatible", out)

        out, _ = self._run("eqsys 2 2\n2 1 4\n4 2 8\n")
        self.assertIn("is compatible indeterminate", out)

    def test_unknown_command_and_help(self) -> None:
        out, _ = self._run("bogus\nhelp\n")
        self.assertIn("Invalid input: bogus", out)
        self.assertIn("`calc <expression>`", out)

    def test_exit_stops_processing(self) -> None:
        out, _ = self._run("exit\ncalc 1 + 1\n")
        self.assertNotIn("Result", out)

    def test_empty_store(self) -> None:
        from matcalc.evaluator import VariableStore

        out, _ = self._run("show\ncalc A\n", store=VariableStore())
        self.assertIn("An error occurred (MalformedToken)", out)


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for CLI tests")
class MainEntryPointTests(unittest.TestCase):
    def test_single_command_success(self) -> None:
        from matcalc.cli import main

        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            status = main(["--no-defaults", "-c", "4 ^ 3"])
        self.assertEqual(status, 0)
        self.assertEqual(stdout.getvalue().strip(), "64")

    def test_single_command_failure(self) -> None:
        from matcalc.cli import main

        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            status = main(["-c", "A + 2"])
        self.assertEqual(status, 1)
        self.assertIn("TypeMismatch", stderr.getvalue())

    def test_unknown_log_level_is_a_usage_error(self) -> None:
        from matcalc.cli import main

        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as ctx:
            main(["--log-level", "foo", "-c", "1 + 1"])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("invalid choice", stderr.getvalue())

    def test_log_level_is_case_insensitive(self) -> None:
        from matcalc.cli import main

        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            status = main(["--log-level", "error", "--no-defaults", "-c", "1 + 1"])
        self.assertEqual(status, 0)
        self.assertEqual(stdout.getvalue().strip(), "2")


if __name__ == "__main__":
    unittest.main()
