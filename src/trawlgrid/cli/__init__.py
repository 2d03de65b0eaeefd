"""Command-line interface modules for trawlgrid pipeline execution.

This package contains core execution logic, making scripts/ optional.
"""

from trawlgrid.cli.run_survey import run_cpue_pipeline, main

__all__ = ['run_cpue_pipeline', 'main']
