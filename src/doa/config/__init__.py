"""
Config — Settings for the automaton store and validators.
"""

from doa.config.settings import (
    AutomatonConfig,
    load_config_from_env,
    ENV_PREFIX,
)

__all__ = [
    "AutomatonConfig",
    "load_config_from_env",
    "ENV_PREFIX",
]
