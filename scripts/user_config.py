"""trawlgrid User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Advanced settings (source column names, unit
conversion, output compression) live in trawlgrid.schemas.param.

Usage:
    python scripts/run_cpue_pipeline.py scripts/user_config.py
    python scripts/run_cpue_pipeline.py scripts/user_config.py --survey-id GOA
"""

CONFIG = {
    # ========================================================================
    # SURVEY & OUTPUT
    # ========================================================================
    "SURVEY_ID": "EBS",             # Used in output and log file names
    "BASE_DIR": "./trawlgrid_output",  # All outputs go here

    # ========================================================================
    # INPUT FILES
    # ========================================================================
    "HAUL_FILE": "data/ebs_haul.csv",
    "CATCH_FILE": "data/ebs_catch.csv",
    "TAXONOMY_FILE": "data/species_groups.csv",

    # ========================================================================
    # HAUL SELECTION
    # ========================================================================
    "MIN_PERFORMANCE": 0,           # PERFORMANCE >= 0 is a satisfactory tow
    "YEAR_START": 1982,
    "YEAR_END": None,               # None = no upper limit

    # ========================================================================
    # TAXONOMY & CPUE
    # ========================================================================
    "UNMAPPED_POLICY": "drop",      # "drop" or "error" for species without a group
    "EFFORT_TO_AREA": 0.01,         # AREA_SWEPT_HA (ha) -> km2

    # ========================================================================
    # OUTPUT FORMAT
    # ========================================================================
    "OUTPUT_FORMAT": "parquet",     # "parquet", "csv" or "netcdf"
}
