from __future__ import annotations

import logging
import math
import os
from collections import abc
from numbers import Real
from typing import Dict, List, Mapping, Optional

import numpy as np
from dotenv import load_dotenv

from ..errors import InvalidParameter
from ..effects import add_noise, apply_tonal, cartoonize, glitch, invert_colors, pixelate
from ..models.effect_parameters import EffectDefinition, ParameterSpec
from ..models.pixel_buffer import PixelBuffer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

CLAMP = "clamp"
REJECT = "reject"

# ─── Catalog ───────────────────────────────────────────────────────
EFFECTS: Dict[str, EffectDefinition] = {
    definition.effect_id: definition
    for definition in (
        EffectDefinition(
            effect_id="tonal",
            label="Brightness/Contrast",
            function=apply_tonal,
            parameters=(
                ParameterSpec("brightness", 0.1, 3.0, 1.0),
                ParameterSpec("contrast", 0.1, 3.0, 1.0),
            ),
            success_message="Brightness/Contrast applied!",
        ),
        EffectDefinition(
            effect_id="invert",
            label="Invert Colors",
            function=invert_colors,
            success_message="Colors inverted!",
        ),
        EffectDefinition(
            effect_id="noise",
            label="Add Noise",
            function=add_noise,
            parameters=(ParameterSpec("amount", 0.01, 0.1, 0.05),),
            uses_rng=True,
            success_message="Noise effect applied!",
        ),
        EffectDefinition(
            effect_id="pixelate",
            label="Pixelate",
            function=pixelate,
            parameters=(ParameterSpec("block_size", 5, 50, 10, integer=True),),
            success_message="Pixelate effect applied!",
        ),
        EffectDefinition(
            effect_id="glitch",
            label="Glitch",
            function=glitch,
            parameters=(ParameterSpec("intensity", 1, 20, 5, integer=True),),
            uses_rng=True,
            success_message="Glitch effect applied!",
        ),
        EffectDefinition(
            effect_id="cartoon",
            label="Cartoon",
            function=cartoonize,
            parameters=(ParameterSpec("color_levels", 4, 16, 8, integer=True),),
            success_message="Cartoon effect applied!",
        ),
    )
}


class EffectService:
    """
    Business logic layer for the effect catalog.
    Resolves caller-supplied parameters against each effect's declared
    ranges and dispatches to the effect functions. Never touches history.

    Out-of-range values follow one policy per instance:
        clamp  – pull the value onto the nearest bound (UI-facing default)
        reject – raise InvalidParameter
    """

    def __init__(self, policy: str = None):
        self.policy = (policy or os.getenv("PARAMETER_POLICY", CLAMP)).strip().lower()
        if self.policy not in (CLAMP, REJECT):
            raise ValueError(f"Unknown parameter policy: {self.policy!r} (expected '{CLAMP}' or '{REJECT}')")
        self.effects = EFFECTS

    def list_effects(self) -> List[EffectDefinition]:
        return list(self.effects.values())

    def get_definition(self, effect_id: str) -> EffectDefinition:
        try:
            return self.effects[effect_id]
        except (KeyError, TypeError):
            raise InvalidParameter(f"Unknown effect: {effect_id!r}") from None

    def _resolve_value(self, effect_id: str, spec: ParameterSpec, raw) -> float:
        # bool is a Real subclass, never a meaningful knob value
        if isinstance(raw, bool) or not isinstance(raw, (Real, str)):
            raise InvalidParameter(f"{effect_id}.{spec.name} must be a number, got {raw!r}")
        try:
            value = float(raw)
        except ValueError:
            raise InvalidParameter(f"{effect_id}.{spec.name} must be a number, got {raw!r}") from None
        if not math.isfinite(value):
            raise InvalidParameter(f"{effect_id}.{spec.name} must be finite, got {raw!r}")

        if not spec.contains(value):
            if self.policy == REJECT:
                raise InvalidParameter(
                    f"{effect_id}.{spec.name}={value} outside [{spec.minimum}, {spec.maximum}]"
                )
            clamped = spec.clamp(value)
            logger.warning(f"{effect_id}.{spec.name}={value} out of range, clamped to {clamped}")
            value = clamped

        if spec.integer:
            return int(round(value))
        return value

    def resolve_parameters(self, effect_id: str, params: Optional[Mapping] = None) -> dict:
        """
        Validate caller-supplied knobs and fill in defaults.

        Args:
            effect_id: Catalog key, e.g. "glitch"
            params: Mapping of parameter name → value (may be None or partial)

        Returns:
            dict: Every declared parameter with a value inside its range.
        """
        definition = self.get_definition(effect_id)
        if params is None:
            params = {}
        if not isinstance(params, abc.Mapping):
            raise InvalidParameter(f"Parameters for {effect_id} must be a mapping, got {type(params).__name__}")
        params = dict(params)

        unknown = sorted(set(params) - {spec.name for spec in definition.parameters}, key=str)
        if unknown:
            raise InvalidParameter(f"Unknown parameter(s) for {effect_id}: {', '.join(map(str, unknown))}")

        resolved = definition.defaults()
        for name, raw in params.items():
            resolved[name] = self._resolve_value(effect_id, definition.spec_for(name), raw)
        return resolved

    def apply(
        self,
        effect_id: str,
        buffer: PixelBuffer,
        params: Optional[Mapping] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> PixelBuffer:
        """
        Run one effect. In-place effects mutate `buffer`; pass a clone if the
        caller must keep the original.
        """
        definition = self.get_definition(effect_id)
        resolved = self.resolve_parameters(effect_id, params)
        if definition.uses_rng:
            resolved["rng"] = rng
        return definition.function(buffer, **resolved)
