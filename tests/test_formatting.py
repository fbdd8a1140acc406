import sys
import unittest
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from nextgen.services.formatting import (  # noqa: E402
    clean_markdown,
    format_job_type,
    format_posted_date,
    format_salary,
    format_salary_range,
    split_csv,
)
from nextgen.services.matching import as_percent, skill_match_score  # noqa: E402


class SalaryFormattingTests(unittest.TestCase):
    def test_job_board_salary(self):
        self.assertEqual(format_salary(120000, 150000), "$120k - $150k")
        self.assertEqual(format_salary(90000, None), "From $90k")
        self.assertEqual(format_salary(None, 60500), "Up to $61k")
        self.assertEqual(format_salary(None, None), "Negotiable")
        self.assertEqual(format_salary(0, 0), "Negotiable")

    def test_dashboard_salary_range(self):
        self.assertEqual(format_salary_range(50000, 70000), "$50000 - $70000")
        self.assertEqual(format_salary_range(50000.0, None), "$50000+")
        self.assertEqual(format_salary_range(None, 70000), "Not specified")


class JobTypeAndDateTests(unittest.TestCase):
    def test_job_type_labels(self):
        self.assertEqual(format_job_type("full_time"), "Full-time")
        self.assertEqual(format_job_type("part_time"), "Part-time")
        self.assertEqual(format_job_type("internship"), "Internship")
        self.assertEqual(format_job_type(None), "")

    def test_posted_date_buckets(self):
        today = date(2024, 3, 31)
        cases = [
            ("2024-03-31", "Today"),
            ("2024-04-02", "Today"),
            ("2024-03-30", "Yesterday"),
            ("2024-03-26", "5 days ago"),
            ("2024-03-17", "2 weeks ago"),
            ("2024-01-01", "3 months ago"),
            ("2024-03-30T23:00:00Z", "Yesterday"),
            (None, "Recently"),
            ("not a date", "Recently"),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(format_posted_date(value, today=today), expected)


class MarkdownCleanupTests(unittest.TestCase):
    def test_strips_markdown(self):
        text = "## Plan\n**Bold** and *italic* and __strong__.\n[Docs](https://example.com)\n\n\n\n---\nUse `pip`."
        self.assertEqual(
            clean_markdown(text),
            "Plan\nBold and italic and strong.\nDocs\n\nUse pip.",
        )

    def test_removes_code_blocks(self):
        self.assertEqual(clean_markdown("Before\n```python\nprint(1)\n```\nAfter"), "Before\n\nAfter")
        self.assertEqual(clean_markdown(None), "")

    def test_split_csv(self):
        self.assertEqual(split_csv(" Python, ,SQL "), ["Python", "SQL"])
        self.assertEqual(split_csv(None), [])


class SkillMatchTests(unittest.TestCase):
    def test_containment_match(self):
        self.assertEqual(skill_match_score(["React Native"], ["react", "TypeScript"]), 0.75)
        self.assertEqual(skill_match_score(["python"], "Python, SQL, Excel"), 0.5 + (1 / 3) * 0.5)

    def test_bounds(self):
        self.assertEqual(skill_match_score([], ["Python"]), 0.5)
        self.assertEqual(skill_match_score(["Python"], []), 0.5)
        self.assertEqual(skill_match_score(["Python", "SQL"], ["python", "sql"]), 0.95)

    def test_percent_rounding(self):
        self.assertEqual(as_percent(0.915), 92)
        self.assertEqual(as_percent(0.834), 83)
        self.assertEqual(as_percent(None), 50)


if __name__ == "__main__":
    unittest.main()
