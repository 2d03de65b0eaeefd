"""`trawlgrid` - zero-filled CPUE grids from bottom-trawl survey records.

Subpackages:
- survey: Data loading, taxonomy join, CPUE, zero-expansion
- pipeline: Batch processor and output writers
- contracts: Fail-fast stage invariants
- schemas: Pydantic configuration layers
"""

__version__ = "0.1.0"
