"""
Surface material of a primitive.

A surface stores the reflectance coefficients used by the light models.
Each property has a legal range and a default that is returned while the
property is unset. Properties are written at most once, while the scene
is being assembled.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict

from .errors import RangeError, StateError


class SurfaceProperty(Enum):
    """Material properties as (key, minimum, maximum, default)."""

    AMBIENT_RATIO = ('ambient', 0.0, 1.0, 0.05)
    DIFFUSE_RATIO = ('diffuse', 0.0, 1.0, 0.95)
    SPECULAR_RATIO = ('specular', 0.0, 1.0, 0.0)
    SPECULAR_EXPONENT = ('specular_exponent', 0.0, 1000.0, 30.0)
    REFLEXION_RATIO = ('reflexion', 0.0, 1.0, 0.0)

    def __init__(self, key: str, min_value: float, max_value: float, default: float):
        self.key = key
        self.min_value = min_value
        self.max_value = max_value
        self.default = default

    def is_valid(self, value: float) -> bool:
        """Check whether value lies within the property's range."""
        return self.min_value <= value <= self.max_value


class Surface:
    """Write-once map from SurfaceProperty to its value."""

    __slots__ = ('_values',)

    def __init__(self):
        self._values: Dict[SurfaceProperty, float] = {}

    def get(self, prop: SurfaceProperty) -> float:
        """Return the value of prop, or its default if it was never set."""
        return self._values.get(prop, prop.default)

    def set(self, prop: SurfaceProperty, value: float) -> None:
        """Set prop to value.

        Raises:
            RangeError: If value is outside the property's range
            StateError: If prop has already been set
        """
        if not prop.is_valid(value):
            raise RangeError(
                f"{prop.name} must be between {prop.min_value:f} and {prop.max_value:f}, got {value}"
            )
        if prop in self._values:
            raise StateError(f"Property {prop.name} is already set.")

        self._values[prop] = float(value)

    def is_set(self, prop: SurfaceProperty) -> bool:
        return prop in self._values

    # Convenience accessors used by the light models

    @property
    def ambient_ratio(self) -> float:
        return self.get(SurfaceProperty.AMBIENT_RATIO)

    @property
    def diffuse_ratio(self) -> float:
        return self.get(SurfaceProperty.DIFFUSE_RATIO)

    @property
    def specular_ratio(self) -> float:
        return self.get(SurfaceProperty.SPECULAR_RATIO)

    @property
    def specular_exponent(self) -> float:
        return self.get(SurfaceProperty.SPECULAR_EXPONENT)

    @property
    def reflexion_ratio(self) -> float:
        return self.get(SurfaceProperty.REFLEXION_RATIO)

    def __repr__(self) -> str:
        values = ', '.join(f"{prop.name}={self.get(prop)}" for prop in SurfaceProperty)
        return f"Surface({values})"
