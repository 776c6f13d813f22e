"""Scene builder coordinating sphere storage with materials.

The SceneManager is the Python-side view of the scene stored in Taichi
fields. It records every sphere it adds so the scene can be inspected or
serialized, and it can be frozen once construction is complete: the scene is
read-only for the whole render, so a frozen scene rejects further additions.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_diffuse_sphere((0, 0, -1), 0.5, albedo=(0.1, 0.2, 0.5))
    >>> scene.add_dielectric_sphere((-1, 0, -1), 0.5, refractive_index=1.5)
    >>> scene.freeze()
"""

from dataclasses import dataclass, field
from typing import Any

from pathtracer.materials import Dielectric, Diffuse, MaterialSpec, Metal
from pathtracer.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The material assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material: MaterialSpec


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations, each with "center",
            "radius" and a nested "material" dictionary.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


def material_from_config(config: dict[str, Any]) -> MaterialSpec:
    """Build a material from its dictionary form.

    Args:
        config: Dictionary with a "type" key ("diffuse", "metal" or
            "dielectric") and the parameters of that type.

    Returns:
        The material dataclass.

    Raises:
        ValueError: If the type is unknown or a parameter is invalid.
    """
    mat_type = config.get("type", "").lower()
    if mat_type == "diffuse":
        albedo_list = config.get("albedo", [0.5, 0.5, 0.5])
        return Diffuse(albedo=(albedo_list[0], albedo_list[1], albedo_list[2]))
    if mat_type == "metal":
        albedo_list = config.get("albedo", [0.8, 0.8, 0.8])
        return Metal(
            albedo=(albedo_list[0], albedo_list[1], albedo_list[2]),
            fuzz=config.get("fuzz", 0.0),
        )
    if mat_type == "dielectric":
        return Dielectric(refractive_index=config.get("refractive_index", 1.5))
    raise ValueError(f"Unknown material type: {mat_type}")


class SceneManager:
    """Scene builder with Python-side tracking of spheres.

    Creating a SceneManager clears the shared scene storage, so only one
    scene is live at a time.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene, in
            insertion order.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere((0, 0, -1), 0.5, Diffuse((0.8, 0.3, 0.3)))
        >>> scene.add_metal_sphere((1, 0, -1), 0.5, (0.8, 0.6, 0.2), fuzz=0.3)
        >>> scene.get_sphere_count()
        2
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self._frozen = False
        self.clear()

    def clear(self) -> None:
        """Clear the entire scene and unfreeze it."""
        clear_scene()
        self.spheres.clear()
        self._frozen = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def freeze(self) -> None:
        """Mark the scene as complete.

        After freezing, adding spheres raises RuntimeError until clear() is
        called.
        """
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Whether the scene has been frozen."""
        return self._frozen

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise RuntimeError("Scene is frozen; call clear() before adding spheres.")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: MaterialSpec,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material: The sphere's material (Diffuse, Metal or Dielectric).

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the scene is frozen or the maximum number of
                spheres is exceeded.
            TypeError: If material is not a supported material type.
        """
        self._check_not_frozen()
        if not isinstance(material, (Diffuse, Metal, Dielectric)):
            raise TypeError(f"Unsupported material: {material!r}")

        center = (float(center[0]), float(center[1]), float(center[2]))
        sphere_index = add_sphere(center, radius, material)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=float(radius),
                material=material,
            )
        )
        return sphere_index

    def add_diffuse_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> int:
        """Add a sphere with a diffuse material."""
        return self.add_sphere(center, radius, Diffuse(albedo=albedo))

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> int:
        """Add a sphere with a metal material."""
        return self.add_sphere(center, radius, Metal(albedo=albedo, fuzz=fuzz))

    def add_dielectric_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        refractive_index: float = 1.5,
    ) -> int:
        """Add a sphere with a dielectric material."""
        return self.add_sphere(center, radius, Dielectric(refractive_index=refractive_index))

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()
        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": sphere.material.to_dict(),
                }
            )
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene (including a frozen one) and loads the
        configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for sphere_config in config.spheres:
            center_list = sphere_config.get("center", [0, 0, 0])
            center: tuple[float, float, float] = (
                center_list[0],
                center_list[1],
                center_list[2],
            )
            radius = sphere_config.get("radius", 1.0)
            material = material_from_config(sphere_config.get("material", {}))
            self.add_sphere(center, radius, material)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {"spheres": self.to_config().spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with a 'spheres' key."""
        self.from_config(SceneConfig(spheres=data.get("spheres", [])))

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    def __repr__(self) -> str:
        return f"SceneManager(spheres={len(self.spheres)}, frozen={self._frozen})"
