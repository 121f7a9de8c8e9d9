# parameter_loader.py
# Load model constant overrides from JSON into a ModelConstants instance.

import dataclasses
import json
import logging
from typing import Any, Dict

from .constants import ModelConstants, DEFAULT_CONSTANTS

logger = logging.getLogger(__name__)


def model_constants_from_dict(overrides: Dict[str, Any],
                              base: ModelConstants = DEFAULT_CONSTANTS) -> ModelConstants:
    """
    Apply overrides on top of base. Keys are ModelConstants field names;
    unknown keys raise ValueError so typos do not pass silently.
    """
    known = {f.name for f in dataclasses.fields(ModelConstants)}
    unknown = sorted(k for k in overrides if k not in known)
    if unknown:
        raise ValueError(f"Unknown model parameters: {unknown}")

    values = {k: float(v) for k, v in overrides.items()}
    for k, v in values.items():
        logger.info(f"Model parameter override: {k} = {v:g} (default {getattr(base, k):g})")
    return dataclasses.replace(base, **values)


def load_model_constants_from_json(path: str, base: ModelConstants = DEFAULT_CONSTANTS) -> ModelConstants:
    """
    JSON format, either flat or nested:
      {"model_constants": {"A_DEHYDRATION": 2.0e5, "MW_HYDRATE": 200.0}}
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    overrides = data.get("model_constants", data)
    return model_constants_from_dict(overrides, base)
