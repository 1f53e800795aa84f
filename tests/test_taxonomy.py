import json
import os
import tempfile
import unittest

from riskpaths.taxonomy import TaxonomyPathway, TaxonomyStore, default_store


def _pathway(pid, dependency="d", impact="i", kpis=()):
    return TaxonomyPathway(
        path_id=pid, dependency=dependency, impact=impact, transition_risk="tr",
        transmission_channel="tc", financial_effect="fe", credit_risk="cr", kpis=tuple(kpis),
    )


class TestTaxonomyStore(unittest.TestCase):
    def setUp(self):
        self.store = default_store()

    def test_default_store_holds_only_the_reference_pathway(self):
        self.assertEqual(self.store.path_ids(), ["PATH_001"])
        self.assertEqual(len(self.store), 1)

    def test_get(self):
        p = self.store.get("PATH_001")
        self.assertIsNotNone(p)
        self.assertIn("subsidies", p.dependency)
        self.assertEqual(len(p.kpis), 8)
        self.assertIsNone(self.store.get("PATH_404"))

    def test_duplicate_path_id_rejected(self):
        with self.assertRaises(ValueError):
            TaxonomyStore([_pathway("P1"), _pathway("P1")])

    def test_non_string_match_key_rejected(self):
        with self.assertRaises(TypeError):
            TaxonomyStore([_pathway("P1", dependency=42)])

    def test_store_is_immutable_snapshot(self):
        items = [_pathway("P1"), _pathway("P2")]
        store = TaxonomyStore(items)
        items.append(_pathway("P3"))
        self.assertEqual(store.path_ids(), ["P1", "P2"])
        self.assertIsInstance(store.pathways, tuple)

    def test_from_json_path(self):
        records = [
            {"pathId": "X1", "dependency": "Water", "impact": "Drought", "KPIs": ["Water use"]},
            {"pathId": "X2", "dependency": "Coal", "impact": "Stranding", "kpis": ["Impairments"]},
        ]
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "taxonomy.json")
            with open(path, "w") as f:
                json.dump({"pathways": records}, f)
            store = TaxonomyStore.from_json_path(path)
        self.assertEqual(store.path_ids(), ["X1", "X2"])
        self.assertEqual(store.get("X2").kpis, ("Impairments",))
        self.assertEqual(store.get("X1").transition_risk, "")

    def test_to_dict_wire_shape(self):
        d = self.store.get("PATH_001").to_dict()
        self.assertEqual(d["pathId"], "PATH_001")
        self.assertIn("transmissionChannel", d)
        self.assertIsInstance(d["KPIs"], list)

    def test_hierarchy_lookup(self):
        resolved = self.store.find_dependency("loss-of-eligibility")
        self.assertIsNotNone(resolved)
        self.assertEqual(resolved.category, "Regulatory Misalignment")
        self.assertEqual(len(resolved.dependency.transmission_channels), 7)
        self.assertEqual(resolved.dependency.data_point_count(), 12)
        self.assertIsNone(self.store.find_dependency("nope"))


if __name__ == "__main__":
    unittest.main()
