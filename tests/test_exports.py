import unittest
from riskpaths.exports.writers import write_matches, write_summary, SCHEMAS
from riskpaths.exports.reports import match_summary_md
from riskpaths.materiality import MaterialityEntry
from riskpaths.matching import MatchingEngine, summarize
from riskpaths.taxonomy import default_store
import csv
import io


class TestExports(unittest.TestCase):
    def setUp(self):
        engine = MatchingEngine(default_store())
        self.matches = engine.match([
            MaterialityEntry(materiality_heatpoint="Subsidy exposure", dependency="tax credits"),
        ])

    def test_matches_csv(self):
        csv_text = write_matches(self.matches)
        reader = csv.DictReader(io.StringIO(csv_text))
        recs = list(reader)
        self.assertEqual(len(recs), len(self.matches))
        self.assertEqual(set(reader.fieldnames), set(SCHEMAS["matches"]))
        row = next(r for r in recs if r["path_id"] == "PATH_001")
        self.assertEqual(row["materiality_heatpoint"], "Subsidy exposure")
        self.assertEqual(row["matched_level"], "dependency")
        self.assertIn("Revenue growth and volatility; EBITDA margin; ROA", row["kpis"])

    def test_empty_matches_csv_has_header(self):
        txt = write_matches([])
        self.assertEqual(txt.splitlines(), [",".join(SCHEMAS["matches"])])

    def test_summary_csv(self):
        txt = write_summary(summarize(self.matches))
        self.assertTrue(txt.startswith("total_matches,unique_materiality_issues"))
        self.assertEqual(txt.splitlines()[1].split(",")[0], str(len(self.matches)))

    def test_summary_md(self):
        md = match_summary_md(summarize(self.matches), self.matches)
        self.assertIn("# Materiality Matching Summary", md)
        self.assertIn("### Subsidy exposure", md)
        self.assertIn("PATH_001 via dependency", md)
        self.assertNotIn("## Matched Pathways", match_summary_md(summarize([])))


if __name__ == '__main__':
    unittest.main()
