"""Explicitly seeded random number generation for Taichi kernels.

Every sampling function in the renderer takes the generator state as an
argument and returns the advanced state alongside its result. Each pixel
sample derives its own stream from (seed, pixel, sample index), so parallel
kernels never share generator state and a fixed seed reproduces the same
image bit for bit regardless of how the work is scheduled.

The generator is the PCG hash from "Hash Functions for GPU Rendering"
(Jarzynski & Olano, JCGT 2020), applied to its own output.

Example:
    >>> @ti.kernel
    ... def sample(seed: ti.u32) -> ti.f32:
    ...     state = seed_rng(seed, 0, 0, 0)
    ...     value, state = random_float(state)
    ...     return value
"""

import taichi as ti

PCG_MULTIPLIER = 747796405
PCG_INCREMENT = 2891336453
PCG_OUTPUT_MULTIPLIER = 277803737

# 2^32 / golden ratio, spreads consecutive seeds across the state space
SEED_SCRAMBLE = 0x9E3779B9

# Uniform floats are built from the top 24 bits so they are exact in f32
FLOAT_BITS_SHIFT = 8
INV_FLOAT_RANGE = 1.0 / 16777216.0


@ti.func
def pcg_hash(value: ti.u32) -> ti.u32:
    """Hash a 32-bit value with one PCG step and output permutation.

    Args:
        value: The input value.

    Returns:
        A well-mixed 32-bit value.
    """
    state = value * ti.u32(PCG_MULTIPLIER) + ti.u32(PCG_INCREMENT)
    shift = (state >> ti.cast(28, ti.u32)) + ti.cast(4, ti.u32)
    word = ((state >> shift) ^ state) * ti.u32(PCG_OUTPUT_MULTIPLIER)
    return (word >> ti.cast(22, ti.u32)) ^ word


@ti.func
def seed_rng(seed: ti.u32, pixel_i: ti.i32, pixel_j: ti.i32, sample_index: ti.i32) -> ti.u32:
    """Derive the generator state for one pixel sample.

    Args:
        seed: The render seed.
        pixel_i: Pixel x-coordinate.
        pixel_j: Pixel y-coordinate.
        sample_index: Index of the sample being taken for this pixel.

    Returns:
        The initial generator state for this (pixel, sample) stream.
    """
    state = pcg_hash(ti.cast(sample_index, ti.u32))
    state = pcg_hash(ti.cast(pixel_j, ti.u32) ^ state)
    state = pcg_hash(ti.cast(pixel_i, ti.u32) ^ state)
    return pcg_hash(seed ^ (state * ti.u32(SEED_SCRAMBLE)))


@ti.func
def random_float(rng_state: ti.u32):
    """Draw a uniform float in [0, 1).

    Args:
        rng_state: The current generator state.

    Returns:
        A tuple of (value, next_state).
    """
    next_state = pcg_hash(rng_state)
    value = ti.cast(next_state >> ti.cast(FLOAT_BITS_SHIFT, ti.u32), ti.f32) * INV_FLOAT_RANGE
    return value, next_state
