"""Pydantic configuration schemas for the trawlgrid pipeline.

All configuration validation, coercion, and normalization happens at schema
validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from trawlgrid.schemas.resolve import resolve_config
from trawlgrid.schemas.internal import InternalConfig
from trawlgrid.schemas.param import ParamConfig
from trawlgrid.schemas.user import UserConfig
from trawlgrid.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
