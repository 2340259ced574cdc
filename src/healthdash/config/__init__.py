"""healthdash configuration system."""

from healthdash.config.loader import find_config_file, load_config, load_config_or_default
from healthdash.config.models import DashboardConfig, DashboardIdentity

__all__ = [
    "DashboardConfig",
    "DashboardIdentity",
    "load_config",
    "load_config_or_default",
    "find_config_file",
]
