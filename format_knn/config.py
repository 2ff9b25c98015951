"""
Structured configuration for the classifier and the validation sweep.

The YAML files under ``configs/`` are validated against these dataclasses so
that a typo in a key fails at load time instead of silently falling back to a
default.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from omegaconf import DictConfig, OmegaConf

from format_knn.models.KNN import DEFAULT_K
from format_knn.models.votes import DEFAULT_DISTANCE_THRESHOLD


@dataclass
class KNNConfig:
    k: int = DEFAULT_K
    distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD
    metric: str = "l0"
    # null in YAML; any int here is returned when no neighbor votes
    default_category: Optional[int] = None
    trace: bool = False
    trace_neighbors: int = 16


@dataclass
class ModelConfig:
    knn: KNNConfig = field(default_factory=KNNConfig)


@dataclass
class ValidationConfig:
    enabled: bool = True
    k_values: List[int] = field(default_factory=lambda: [1, 3, 5, 7])
    thresholds: List[float] = field(default_factory=lambda: [0.5, 1.0])


@dataclass
class Config:
    model: ModelConfig = field(default_factory=ModelConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    # Hydra `_target_` node producing the Corpus; left untyped
    data: Dict[str, Any] = field(default_factory=dict)


def load_config(path: Optional[Union[str, Path]] = None, overrides: Optional[List[str]] = None) -> DictConfig:
    """
    Load and validate a configuration.

    Args:
        path: YAML file to merge over the defaults (optional).
        overrides: Dotlist overrides such as ``["model.knn.k=3"]``.

    Returns:
        DictConfig in struct mode.
    """
    cfg = OmegaConf.structured(Config)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(str(path)))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(overrides))
    return cfg
