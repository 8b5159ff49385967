from .loader import TsConfig, load_tsconfig
from .matchers import (
    AliasConfig,
    AliasMatcher,
    AliasMatcherBuilder,
    PathPattern,
    parse_pattern,
)
from .resolver import DEFAULT_CONFIG_FILES, ConfigResolver
from .settings import ToolSettings, load_settings

__all__ = [
    "TsConfig",
    "load_tsconfig",
    "AliasConfig",
    "AliasMatcher",
    "AliasMatcherBuilder",
    "PathPattern",
    "parse_pattern",
    "ConfigResolver",
    "DEFAULT_CONFIG_FILES",
    "ToolSettings",
    "load_settings",
]
