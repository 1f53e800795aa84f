"""Risk taxonomy: dependency -> impact -> transition risk -> transmission channel
-> financial effect -> credit risk.

- models.py: pathway and hierarchy records
- store.py: immutable, injectable TaxonomyStore
- data.py: embedded datasets
"""

from riskpaths.taxonomy.models import FullPath, TaxonomyPathway
from riskpaths.taxonomy.store import TaxonomyStore, default_store

__all__ = ["FullPath", "TaxonomyPathway", "TaxonomyStore", "default_store"]
