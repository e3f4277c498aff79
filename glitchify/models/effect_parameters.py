from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Tuple


@dataclass(frozen=True)
class ParameterSpec:
    """
    Value-object describing one numeric knob of an effect in the same
    units the slider shows (e.g. brightness 0.1 … 3.0, 1.0 = unchanged).
    """
    name: str
    minimum: float
    maximum: float
    default: float
    integer: bool = False

    def clamp(self, value: float) -> float:
        return min(self.maximum, max(self.minimum, value))

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "min": self.minimum,
            "max": self.maximum,
            "default": self.default,
            "integer": self.integer,
        }


@dataclass(frozen=True)
class EffectDefinition:
    """
    Catalog entry: the effect function plus the knobs it accepts.
    """
    effect_id: str
    label: str
    function: Callable
    parameters: Tuple[ParameterSpec, ...] = field(default_factory=tuple)
    uses_rng: bool = False
    success_message: str = ""

    def spec_for(self, name: str) -> ParameterSpec | None:
        for spec in self.parameters:
            if spec.name == name:
                return spec
        return None

    def defaults(self) -> dict:
        return {spec.name: spec.default for spec in self.parameters}

    def as_dict(self) -> dict:
        return {
            "id": self.effect_id,
            "label": self.label,
            "parameters": [spec.as_dict() for spec in self.parameters],
        }
