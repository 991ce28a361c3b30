from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TransformConfig:
    operation: str = "grayscale"
    scale: float = 0.5          # clarendon / lighten / darken
    rotations: float = 1        # number of 90 degree clockwise turns
    x_scale: int = 2            # enlarge
    y_scale: int = 2


@dataclass
class PipelineConfig:
    transform: TransformConfig = field(default_factory=TransformConfig)
    save_dir: Optional[str] = None
    show: bool = False
