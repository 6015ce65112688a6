"""
Simulation Module for the Mandate Calculator
============================================

Deterministic draw generation for mixed logit integration.

Usage:
    from mandate_dcm.simulation import generate_draw_panel, Mulberry32
"""

from .draws import (
    DrawPanel,
    Mulberry32,
    generate_draw_panel,
    generate_standard_normals,
)

__all__ = [
    'DrawPanel',
    'Mulberry32',
    'generate_draw_panel',
    'generate_standard_normals',
]
