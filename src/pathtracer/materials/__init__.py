"""Materials module for surface scattering models.

This module implements the three material kinds of the renderer:

Components:
    material: MaterialKind enum, the Material struct, and validation helpers
    diffuse: Lambertian reflection around the surface normal
    metal: Mirror reflection perturbed by a fuzz radius
    dielectric: Refraction with Schlick-weighted reflection
    scatter: Dispatch from a hit record's material to its scatter routine

Each kind has a frozen Python dataclass for scene construction and a Taichi
scatter function returning (direction, attenuation, did_scatter, rng_state).
"""

from .material import Material, MaterialKind, validate_albedo
from .diffuse import Diffuse, scatter_diffuse
from .metal import Metal, scatter_metal
from .dielectric import Dielectric, reflect_probability, scatter_dielectric
from .scatter import ScatterRecord, scatter

# Any material accepted by the scene builder
MaterialSpec = Diffuse | Metal | Dielectric

__all__ = [
    "Material",
    "MaterialKind",
    "MaterialSpec",
    "validate_albedo",
    # Diffuse
    "Diffuse",
    "scatter_diffuse",
    # Metal
    "Metal",
    "scatter_metal",
    # Dielectric
    "Dielectric",
    "reflect_probability",
    "scatter_dielectric",
    # Dispatch
    "ScatterRecord",
    "scatter",
]
