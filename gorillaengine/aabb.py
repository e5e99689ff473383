"""Axis-aligned bounding box."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class AABB:
    """Axis-aligned box that starts at the origin and grows to include points."""

    min: np.ndarray = field(default_factory=lambda: np.zeros(3))
    max: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.min = np.asarray(self.min, dtype=float)
        self.max = np.asarray(self.max, dtype=float)
        if self.min.shape != self.max.shape:
            raise ValueError("min and max must have the same dimension")

    def grow_to_include(self, point) -> None:
        """Extend the box so that it contains the point."""
        vector = np.asarray(point, dtype=float)
        if vector.shape != self.min.shape:
            raise ValueError("point dimension does not match the box")
        self.min = np.minimum(self.min, vector)
        self.max = np.maximum(self.max, vector)