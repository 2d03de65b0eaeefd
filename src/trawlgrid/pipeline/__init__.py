"""Pipeline modules.

- processor: Survey processor (load -> taxonomy -> CPUE -> zero-expansion -> save)
"""

from trawlgrid.pipeline.processor import SurveyProcessor

__all__ = [
    "SurveyProcessor",
]
