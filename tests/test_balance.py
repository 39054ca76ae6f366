"""Unit tests for app.services.balance: add/subtract/set semantics, clamping, input coercion."""

import itertools
import math
import unittest

from app.services.balance import MAX_CWT, apply_operation, normalize_operation, to_cws, to_cwt


class TestApplyOperation(unittest.TestCase):
    """apply_operation returns (new_cwt, new_cws) for each operation."""

    def test_add(self) -> None:
        self.assertEqual(apply_operation(10, 100, 3, 20, "add"), (13, 120))

    def test_subtract(self) -> None:
        self.assertEqual(apply_operation(10, 100, 4, 30, "subtract"), (6, 70))

    def test_subtract_below_zero_clamps(self) -> None:
        self.assertEqual(apply_operation(10, 100, 30, 200, "subtract"), (0, 0))

    def test_set(self) -> None:
        self.assertEqual(apply_operation(10, 100, 7, 50, "set"), (7, 50))

    def test_set_is_idempotent(self) -> None:
        first = apply_operation(10, 100, 7, 50, "set")
        second = apply_operation(first[0], first[1], 7, 50, "set")
        self.assertEqual(first, second)

    def test_unknown_operation_sets(self) -> None:
        self.assertEqual(apply_operation(10, 100, 7, 50, "multiply"), (7, 50))

    def test_absent_operation_sets(self) -> None:
        self.assertEqual(apply_operation(10, 100, 7, 50, None), (7, 50))
        self.assertEqual(apply_operation(10, 100, 7, 50), (7, 50))

    def test_operation_is_case_sensitive(self) -> None:
        self.assertEqual(apply_operation(10, 100, 1, 1, "ADD"), (1, 1))

    def test_set_negative_clamps_to_zero(self) -> None:
        self.assertEqual(apply_operation(10, 100, -5, -9, "set"), (0, 0))

    def test_add_negative_delta_clamps(self) -> None:
        self.assertEqual(apply_operation(2, 3, -10, -10, "add"), (0, 0))

    def test_missing_deltas_count_as_zero(self) -> None:
        self.assertEqual(apply_operation(10, 100, float("nan"), None, "add"), (10, 100))

    def test_non_numeric_deltas_count_as_zero(self) -> None:
        self.assertEqual(apply_operation(10, 100, "abc", {"x": 1}, "subtract"), (10, 100))

    def test_numeric_strings_are_parsed(self) -> None:
        self.assertEqual(apply_operation(1.5, 10, "2.25", "5", "add"), (3.75, 15))

    def test_cws_is_integer(self) -> None:
        cwt, cws = apply_operation(0, 10, 0.5, 2.9, "add")
        self.assertEqual(cwt, 0.5)
        self.assertEqual(cws, 12)
        self.assertIsInstance(cws, int)

    def test_cwt_keeps_fraction(self) -> None:
        cwt, _ = apply_operation(0.1, 0, 0.2, 0, "add")
        self.assertAlmostEqual(cwt, 0.3)
        self.assertIsInstance(cwt, float)

    def test_never_negative(self) -> None:
        currents = [0, 0.5, 10, 1e6]
        deltas = [-1e9, -3, 0, 2.5, 1e9, None, "x", float("nan"), float("inf")]
        operations = ["add", "subtract", "set", None, "other"]
        for cur, d_cwt, d_cws, op in itertools.product(currents, deltas, deltas, operations):
            cwt, cws = apply_operation(cur, int(cur), d_cwt, d_cws, op)
            self.assertGreaterEqual(cwt, 0, (cur, d_cwt, d_cws, op))
            self.assertGreaterEqual(cws, 0, (cur, d_cwt, d_cws, op))

    def test_add_overflow_saturates(self) -> None:
        cwt, _ = apply_operation(1e308, 0, 1e308, 0, "add")
        self.assertTrue(math.isfinite(cwt))
        self.assertEqual(cwt, MAX_CWT)
        self.assertEqual(to_cwt(cwt), MAX_CWT)

    def test_subtract_negative_overflow_saturates(self) -> None:
        cwt, _ = apply_operation(1e308, 0, -1e308, 0, "subtract")
        self.assertEqual(cwt, MAX_CWT)


class TestCoercion(unittest.TestCase):
    """to_cwt / to_cws turn unusable values into zero."""

    def test_to_cwt(self) -> None:
        self.assertEqual(to_cwt(None), 0.0)
        self.assertEqual(to_cwt(True), 0.0)
        self.assertEqual(to_cwt("  4.5 "), 4.5)
        self.assertEqual(to_cwt(float("inf")), 0.0)
        self.assertEqual(to_cwt([1]), 0.0)

    def test_to_cws_truncates(self) -> None:
        self.assertEqual(to_cws("12.7"), 12)
        self.assertEqual(to_cws(-3.9), -3)
        self.assertEqual(to_cws("nope"), 0)


class TestNormalizeOperation(unittest.TestCase):
    def test_known_and_unknown(self) -> None:
        self.assertEqual(normalize_operation("add"), "add")
        self.assertEqual(normalize_operation("subtract"), "subtract")
        self.assertEqual(normalize_operation("set"), "set")
        self.assertEqual(normalize_operation(None), "set")
        self.assertEqual(normalize_operation(3), "set")


if __name__ == "__main__":
    unittest.main()
