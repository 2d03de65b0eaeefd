#!/usr/bin/env python3
"""trawlgrid survey CPUE pipeline runner.

Usage:
    python scripts/run_cpue_pipeline.py scripts/user_config.py
    python scripts/run_cpue_pipeline.py scripts/user_config.py --survey-id GOA
    python scripts/run_cpue_pipeline.py scripts/user_config.py --output-format csv

Note: User config in scripts/user_config.py, expert defaults in
trawlgrid.schemas.param.ParamConfig
"""

import sys

from trawlgrid.cli.run_survey import main


if __name__ == "__main__":
    sys.exit(main())
