import shutil
import tempfile
import time
import unittest

from riskpaths.reports.store import FileReportStore, NotAuthenticated, ReportDraft, ReportNotFound


def _draft(title="ESG Materiality Assessment - Acme", client="Acme", rtype="materiality_assessment", **kw):
    return ReportDraft(title=title, client_name=client, report_type=rtype, content="<h1>r</h1>", **kw)


class TestFileReportStore(unittest.TestCase):
    def setUp(self):
        self.root = tempfile.mkdtemp()
        self.store = FileReportStore(self.root)

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_save_and_get(self):
        r = self.store.save("u1", _draft(material_issues=3, risk_pathways=2, kpis=9, risk_score="Low"))
        self.assertTrue(r.id.startswith("rep_"))
        self.assertEqual(r.user_id, "u1")
        got = self.store.get("u1", r.id)
        self.assertEqual(got, r)
        self.assertEqual(got.kpis, 9)

    def test_reports_are_scoped_to_user(self):
        r = self.store.save("u1", _draft())
        self.assertIsNone(self.store.get("u2", r.id))
        self.assertEqual(self.store.list("u2"), [])
        self.assertFalse(self.store.delete("u2", r.id))
        self.assertIsNotNone(self.store.get("u1", r.id))

    def test_list_newest_first_with_filters(self):
        a = self.store.save("u1", _draft(title="Alpha report", client="Acme"))
        time.sleep(0.01)
        b = self.store.save("u1", _draft(title="Client Risk Analysis - Borealis", client="Borealis",
                                         rtype="client_analysis"))
        self.assertEqual([r.id for r in self.store.list("u1")], [b.id, a.id])
        self.assertEqual([r.id for r in self.store.list("u1", search_term="ACME")], [a.id])
        self.assertEqual([r.id for r in self.store.list("u1", search_term="risk analysis")], [b.id])
        self.assertEqual([r.id for r in self.store.list("u1", report_type="client_analysis")], [b.id])
        self.assertEqual(len(self.store.list("u1", report_type="all")), 2)

    def test_update(self):
        r = self.store.save("u1", _draft())
        updated = self.store.update("u1", r.id, title="Renamed", risk_score="High")
        self.assertEqual(updated.title, "Renamed")
        self.assertEqual(self.store.get("u1", r.id).risk_score, "High")
        with self.assertRaises(ValueError):
            self.store.update("u1", r.id, user_id="u2")
        with self.assertRaises(ValueError):
            self.store.update("u1", r.id, risk_score="Extreme")
        with self.assertRaises(ReportNotFound):
            self.store.update("u1", "rep_missing", title="x")

    def test_delete(self):
        r = self.store.save("u1", _draft())
        self.assertTrue(self.store.delete("u1", r.id))
        self.assertIsNone(self.store.get("u1", r.id))
        self.assertFalse(self.store.delete("u1", r.id))

    def test_requires_user(self):
        with self.assertRaises(NotAuthenticated):
            self.store.save("", _draft())
        with self.assertRaises(NotAuthenticated):
            self.store.list(None)

    def test_rejects_unsafe_ids(self):
        with self.assertRaises(ValueError):
            self.store.save("..", _draft())
        self.assertIsNone(self.store.get("u1", "../u2/rep_x"))

    def test_validates_draft(self):
        with self.assertRaises(ValueError):
            self.store.save("u1", _draft(rtype="memo"))


if __name__ == "__main__":
    unittest.main()
