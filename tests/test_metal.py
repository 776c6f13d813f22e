"""Unit tests for the Metal material module.

Tests cover:
- Parameter validation
- Perfect mirror reflection (fuzz=0)
- Fuzzy reflection bounded by the fuzz radius
- Absorption when the reflection points into the surface
"""

import math

import pytest
import taichi as ti


class TestMetalParameters:
    """Tests for the Metal dataclass."""

    def test_defaults(self):
        """Test fuzz defaults to a perfect mirror."""
        from pathtracer.materials import MaterialKind, Metal

        material = Metal(albedo=(0.8, 0.6, 0.2))
        assert material.fuzz == 0.0
        assert material.kind == MaterialKind.METAL
        assert material.as_fields() == (1, (0.8, 0.6, 0.2), 0.0, 0.0)

    @pytest.mark.parametrize("fuzz", [-0.1, 1.5])
    def test_fuzz_out_of_range(self, fuzz):
        """Test fuzz outside [0, 1] is rejected."""
        from pathtracer.materials import Metal

        with pytest.raises(ValueError, match="Fuzz"):
            Metal(albedo=(0.8, 0.8, 0.8), fuzz=fuzz)

    def test_albedo_validated(self):
        """Test metal albedo is validated like diffuse albedo."""
        from pathtracer.materials import Metal

        with pytest.raises(ValueError):
            Metal(albedo=(1.5, 0.8, 0.8))

    def test_to_dict(self):
        """Test dictionary form used for scene serialization."""
        from pathtracer.materials import Metal

        assert Metal((0.8, 0.6, 0.2), fuzz=0.3).to_dict() == {
            "type": "metal",
            "albedo": [0.8, 0.6, 0.2],
            "fuzz": 0.3,
        }


class TestMetalScatter:
    """Tests for scatter_metal."""

    def test_perfect_reflection_45_degrees(self):
        """Test a mirror reflects the unit incident direction."""
        from pathtracer.core.rng import seed_rng
        from pathtracer.materials.metal import scatter_metal

        result_dir = ti.field(dtype=ti.math.vec3, shape=())
        result_att = ti.field(dtype=ti.math.vec3, shape=())
        result_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            state = seed_rng(ti.cast(0, ti.u32), 0, 0, 0)
            albedo = ti.math.vec3(0.8, 0.6, 0.2)
            # Unnormalized incident direction
            incident = ti.math.vec3(2.0, -2.0, 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            direction, att, did_scatter, state = scatter_metal(albedo, 0.0, incident, normal, state)
            result_dir[None] = direction
            result_att[None] = att
            result_scatter[None] = did_scatter

        test_kernel()
        d = result_dir[None]
        s = 1.0 / math.sqrt(2.0)
        assert abs(d[0] - s) < 1e-5
        assert abs(d[1] - s) < 1e-5
        assert abs(d[2]) < 1e-6
        assert result_scatter[None] == 1
        assert abs(result_att[None][1] - 0.6) < 1e-6

    def test_reflection_into_surface_is_absorbed(self):
        """Test a ray leaving along the normal reflects inward and is absorbed."""
        from pathtracer.core.rng import seed_rng
        from pathtracer.materials.metal import scatter_metal

        result_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            state = seed_rng(ti.cast(0, ti.u32), 0, 0, 0)
            albedo = ti.math.vec3(0.8, 0.8, 0.8)
            incident = ti.math.vec3(0.0, 1.0, 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            _, _, did_scatter, state = scatter_metal(albedo, 0.0, incident, normal, state)
            result_scatter[None] = did_scatter

        test_kernel()
        assert result_scatter[None] == 0

    def test_fuzz_offset_is_bounded(self):
        """Test fuzzy directions stay within fuzz of the mirror direction."""
        import numpy as np

        from pathtracer.core.rng import seed_rng
        from pathtracer.materials.metal import scatter_metal

        n = 1000
        fuzz = 0.3
        directions = ti.field(dtype=ti.math.vec3, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                state = seed_rng(ti.cast(4, ti.u32), i, 0, 0)
                albedo = ti.math.vec3(0.8, 0.8, 0.8)
                incident = ti.math.vec3(0.0, -1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _, state = scatter_metal(albedo, fuzz, incident, normal, state)
                directions[i] = direction

        test_kernel()
        offsets = directions.to_numpy() - np.array([0.0, 1.0, 0.0])
        distances = np.sqrt(np.sum(offsets**2, axis=1))
        assert (distances < fuzz + 1e-5).all()
        # Not every sample is the mirror direction
        assert distances.max() > 0.05

    def test_grazing_fuzz_absorbs_some_rays(self):
        """Test fuzz at grazing incidence pushes some rays below the surface."""
        from pathtracer.core.rng import seed_rng
        from pathtracer.materials.metal import scatter_metal

        n = 1000
        scattered = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                state = seed_rng(ti.cast(5, ti.u32), i, 0, 0)
                albedo = ti.math.vec3(0.8, 0.8, 0.8)
                incident = ti.math.vec3(1.0, -0.05, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                _, _, ok, state = scatter_metal(albedo, 1.0, incident, normal, state)
                scattered[i] = ok

        test_kernel()
        values = scattered.to_numpy()
        assert 0 < values.sum() < n
