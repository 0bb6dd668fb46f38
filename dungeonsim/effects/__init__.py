"""
Effects module: status effects and their per-round processing.
"""

from .status_effect import (
    StatusEffect,
    StatusEffectSpec,
    StatusTick,
    apply_status_effect,
    process_status_effects,
    remove_status_effects,
)

__all__ = [
    "StatusEffect",
    "StatusEffectSpec",
    "StatusTick",
    "apply_status_effect",
    "process_status_effects",
    "remove_status_effects",
]
