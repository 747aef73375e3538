import unittest

from spcoder.core.optimizer import OptimizerError, SemesterResult
from spcoder.core.ranking import BETTER, SAME, WORSE, baseline, rank_results, round_grade, to_result_rows


class RankingTests(unittest.TestCase):
    def setUp(self):
        self.results = [
            SemesterResult((), 70.0),
            SemesterResult(("A",), 80.0),
            SemesterResult(("B",), 70.0),
            SemesterResult(("C",), 60.0),
        ]

    def test_baseline(self):
        self.assertEqual(baseline(self.results).grade, 70.0)

    def test_missing_baseline(self):
        with self.assertRaises(OptimizerError):
            baseline(self.results[1:])

    def test_repeated_baseline(self):
        with self.assertRaises(OptimizerError):
            baseline(self.results + [SemesterResult((), 70.0)])

    def test_rank_descending_with_tie_break(self):
        ranked = rank_results(self.results)
        self.assertEqual([r.remove for r in ranked], [("A",), (), ("B",), ("C",)])

    def test_round_grade(self):
        self.assertEqual(round_grade(66.666666), 66.67)

    def test_result_rows_status(self):
        rows = to_result_rows(self.results)
        statuses = {row.remove: row.status for row in rows}
        self.assertEqual(statuses[("A",)], BETTER)
        self.assertEqual(statuses[()], SAME)
        self.assertEqual(statuses[("B",)], SAME)
        self.assertEqual(statuses[("C",)], WORSE)

    def test_status_uses_rounded_grades(self):
        rows = to_result_rows([SemesterResult((), 70.001), SemesterResult(("A",), 70.004)])
        self.assertEqual(rows[0].status, SAME)

    def test_row_label(self):
        rows = to_result_rows(self.results)
        labels = {row.remove: row.label for row in rows}
        self.assertEqual(labels[()], "nothing")
        self.assertEqual(labels[("A",)], "A")

    def test_empty_results(self):
        self.assertEqual(to_result_rows([]), [])


if __name__ == "__main__":
    unittest.main()
