"""
Automaton Settings — Behavioral switches for the store and validators.

Settings can be passed explicitly or loaded from DOA_* environment
variables. Values are validated by Pydantic at construction.
"""

import os
from typing import Mapping

from pydantic import BaseModel, Field

from doa.vocabulary import ConflictPolicy


ENV_PREFIX = "DOA_"


class AutomatonConfig(BaseModel):
    """
    Configuration for an Automaton and the validators run over it.

    Provides:
    - Conflict policy for external (deterministic) transitions
    - Strict mode for the structure validator
    - Metrics recording toggle
    """

    conflict_policy: ConflictPolicy = Field(
        default=ConflictPolicy.LAST_WRITE_WINS,
        description="Policy when an external transition is re-inserted with a new destination"
    )

    strict: bool = Field(
        default=False,
        description="Report structural findings as errors instead of warnings"
    )

    record_metrics: bool = Field(
        default=True,
        description="Record validation counts and durations in the global registry"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "conflict_policy": "REJECT",
                    "strict": True,
                    "record_metrics": False,
                }
            ]
        }
    }


def load_config_from_env(environ: Mapping[str, str] | None = None) -> AutomatonConfig:
    """
    Build an AutomatonConfig from DOA_* environment variables.

    Recognized:
        DOA_CONFLICT_POLICY: LAST_WRITE_WINS or REJECT
        DOA_STRICT: boolean ("true", "1", "false", ...)
        DOA_RECORD_METRICS: boolean

    Unset variables keep their defaults. Invalid values raise
    pydantic.ValidationError.
    """
    env = os.environ if environ is None else environ
    values: dict[str, str] = {}

    for field_name in AutomatonConfig.model_fields:
        raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
        if raw is not None:
            values[field_name] = raw.strip()

    return AutomatonConfig.model_validate(values)
