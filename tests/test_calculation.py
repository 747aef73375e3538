import unittest
from unittest import mock

from spcoder.config.settings import Settings
from spcoder.core.modules import ModuleEntry, ModuleValidationError
from spcoder.core.optimizer import OptimizerError
from spcoder.core.ranking import BETTER, SAME, WORSE
from spcoder.services.calculation_service import CalculationService


class CalculationServiceTests(unittest.TestCase):
    def setUp(self):
        self.service = CalculationService(credit_cap=30, max_modules=10)

    def test_reports_both_semesters(self):
        report = self.service.calculate(
            [
                ModuleEntry("A", 60, 15, "sem1"),
                ModuleEntry("B", 80, 15, "sem1"),
            ]
        )
        sem1 = report.semester("sem1")
        sem2 = report.semester("sem2")

        self.assertEqual(sem1.title, "Semester One")
        self.assertEqual(sem1.baseline, 70.0)
        self.assertEqual(sem1.best.remove, ("A",))
        self.assertEqual(sem1.best.rounded, 80.0)
        self.assertEqual([(r.remove, r.status) for r in sem1.rows], [(("A",), BETTER), ((), SAME), (("B",), WORSE)])

        self.assertTrue(sem2.is_empty)
        self.assertIsNone(sem2.baseline)
        self.assertIsNone(sem2.best)

    def test_calculate_rows_from_form(self):
        report = self.service.calculate_rows(
            [
                {"moduleCode": "A", "grade": "50", "credits": "10", "semester": "sem2"},
                {"moduleCode": "B", "grade": "70", "credits": "10", "semester": "sem2"},
                {"moduleCode": "C", "grade": "90", "credits": "10", "semester": "sem2"},
            ]
        )
        sem2 = report.semester("sem2")
        removed = {row.remove for row in sem2.rows}
        self.assertNotIn(("A", "B", "C"), removed)
        self.assertIn(("A", "B"), removed)
        self.assertEqual(sem2.best.remove, ("A", "B"))
        self.assertEqual(sem2.best.rounded, 90.0)

    def test_credit_cap_applies(self):
        service = CalculationService(credit_cap=15, max_modules=10)
        report = service.calculate(
            [
                ModuleEntry("A", 50, 10, "sem1"),
                ModuleEntry("B", 70, 10, "sem1"),
                ModuleEntry("C", 90, 10, "sem1"),
            ]
        )
        self.assertEqual(len(report.semester("sem1").rows), 4)

    def test_too_many_modules(self):
        entries = [ModuleEntry(f"M{i}", 60, 10, "sem1") for i in range(11)]
        with self.assertRaises(ModuleValidationError):
            self.service.calculate(entries)

    def test_duplicate_codes(self):
        with self.assertRaises(ModuleValidationError):
            self.service.calculate([ModuleEntry("A", 60, 15, "sem1"), ModuleEntry("A", 65, 15, "sem1")])

    def test_to_dict(self):
        data = self.service.calculate([ModuleEntry("A", 60, 15, "sem1"), ModuleEntry("B", 80, 15, "sem1")]).to_dict()
        self.assertEqual(data["credit_cap"], 30)
        sem1 = data["semesters"][0]
        self.assertEqual(sem1["semester"], "sem1")
        self.assertEqual(sem1["results"][1]["remove"], [])
        self.assertEqual(sem1["best"]["remove"], ["A"])
        self.assertIsNone(data["semesters"][1]["best"])

    def test_from_settings(self):
        with mock.patch("spcoder.services.calculation_service.settings", Settings(credit_cap=15, max_modules=7)):
            service = CalculationService.from_settings()
        self.assertEqual(service.credit_cap, 15)
        self.assertEqual(service.max_modules, 7)

    def test_semester_module_limit(self):
        entries = [ModuleEntry(f"M{i:02d}", 60, 40, "sem1") for i in range(4)]
        service = CalculationService(credit_cap=30, max_modules=40)
        with mock.patch("spcoder.core.optimizer.settings", Settings(max_semester_modules=3)):
            with self.assertRaises(OptimizerError):
                service.calculate(entries)


if __name__ == "__main__":
    unittest.main()
