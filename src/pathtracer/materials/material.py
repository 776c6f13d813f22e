"""Material tagged union shared by all material kinds.

A material is one of three kinds, each carrying its own parameters:
    - DIFFUSE(albedo): Lambertian reflectance
    - METAL(albedo, fuzz): specular reflection perturbed by a fuzz radius
    - DIELECTRIC(refractive_index): clear refractive surface

Inside kernels a material is the ``Material`` struct: ``kind`` selects the
variant and only that variant's fields are meaningful. Materials are copied
by value into every hit record.

On the Python side each kind has its own frozen dataclass (``Diffuse``,
``Metal``, ``Dielectric``) that validates parameters at construction and
flattens itself into the struct fields via ``as_fields()``.
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Flattened material fields: (kind, albedo, fuzz, refractive_index)
MaterialFields = tuple[int, tuple[float, float, float], float, float]


class MaterialKind(IntEnum):
    """Enumeration of supported material kinds.

    Used for material dispatch when scattering.
    """

    DIFFUSE = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class Material:
    """Material parameters as stored in kernels.

    Attributes:
        kind: The MaterialKind of this material (-1 for no material).
        albedo: Reflectance color for DIFFUSE and METAL.
        fuzz: Reflection perturbation radius for METAL, in [0, 1].
        refractive_index: Index of refraction for DIELECTRIC (> 1).
    """

    kind: ti.i32
    albedo: vec3
    fuzz: ti.f32
    refractive_index: ti.f32


def validate_albedo(albedo: tuple[float, float, float]) -> None:
    """Check that an albedo is an RGB triple with components in [0, 1].

    Raises:
        ValueError: If albedo does not have 3 components or any component is
            outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
