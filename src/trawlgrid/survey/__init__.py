"""Survey data stages.

- loader: CSV ingestion and haul filtering
- taxonomy: species to functional-group join
- cpue: effort normalization and per-group aggregation
- densifier: zero-expansion to the haul x group table
"""

from trawlgrid.survey.loader import SurveyDataLoader
from trawlgrid.survey.taxonomy import TaxonomyMapper
from trawlgrid.survey.cpue import CpueCalculator
from trawlgrid.survey.densifier import DenseRecord, ZeroExpansionDensifier

__all__ = [
    "SurveyDataLoader",
    "TaxonomyMapper",
    "CpueCalculator",
    "DenseRecord",
    "ZeroExpansionDensifier",
]
