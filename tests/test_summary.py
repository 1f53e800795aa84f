import unittest

from riskpaths.matching import MatchLevel, MatchSummary, MatchedPathway, summarize
from riskpaths.taxonomy.models import FullPath

FP = FullPath("d", "i", "tr", "tc", "fe", "cr")


def _m(heatpoint, level, pid, kpis):
    return MatchedPathway(materiality_heatpoint=heatpoint, matched_level=level, full_path=FP,
                          kpis=tuple(kpis), path_id=pid)


class TestSummary(unittest.TestCase):
    def test_empty_is_all_zero(self):
        s = summarize([])
        self.assertEqual(s, MatchSummary())
        self.assertTrue(all(v == 0 for v in s.to_dict().values()))

    def test_counts(self):
        matches = [
            _m("Drought", MatchLevel.DEPENDENCY, "P1", ["a", "b"]),
            _m("Drought", MatchLevel.IMPACT, "P1", ["a", "b"]),  # same path via impact
            _m("Coal", MatchLevel.DEPENDENCY, "P2", ["c"]),
            _m("Coal", MatchLevel.IMPACT, "P3", []),
        ]
        s = summarize(matches)
        self.assertEqual(s.total_matches, 4)
        self.assertEqual(s.unique_materiality_issues, 2)
        self.assertEqual(s.dependency_matches, 2)
        self.assertEqual(s.impact_matches, 2)
        self.assertEqual(s.unique_risk_paths, 3)
        # KPI mentions are not deduplicated across levels
        self.assertEqual(s.total_kpis, 5)

    def test_wire_keys(self):
        d = summarize([_m("X", MatchLevel.IMPACT, "P9", ["k"])]).to_dict()
        self.assertEqual(
            d,
            {"totalMatches": 1, "uniqueMaterialityIssues": 1, "dependencyMatches": 0,
             "impactMatches": 1, "uniqueRiskPaths": 1, "totalKPIs": 1},
        )


if __name__ == "__main__":
    unittest.main()
