"""
Spatial utility functions for 2D geometry.

Helper functions for vector normalization, wall reflection,
and heading adjustments in the world rectangle.
"""

import numpy as np
from typing import Tuple


def normalize(vec: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Normalize vector to unit length.

    Args:
        vec: Vector to normalize [x, y]

    Returns:
        Tuple of (normalized vector, original length)
    """
    length = float(np.sqrt(np.dot(vec, vec)))

    if length < 1e-9:
        # Zero vector, return arbitrary unit vector
        return np.array([1.0, 0.0], dtype=np.float64), 0.0

    return vec / length, length


def bounce_off_walls(position: np.ndarray, velocity: np.ndarray, width: float, height: float):
    """
    Inelastic wall bounce inside the world rectangle [0, width] x [0, height].

    When an axis bound is crossed, that velocity component is inverted and
    the coordinate is clamped back inside. Modifies arrays in place.

    Args:
        position: Position [x, y] (modified)
        velocity: Velocity [vx, vy] (modified)
        width: World width
        height: World height
    """
    if position[0] < 0.0 or position[0] > width:
        velocity[0] = -velocity[0]
        position[0] = min(max(position[0], 0.0), width)

    if position[1] < 0.0 or position[1] > height:
        velocity[1] = -velocity[1]
        position[1] = min(max(position[1], 0.0), height)


def jitter_heading(velocity: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotate heading by angle (radians) and return a unit vector.

    Args:
        velocity: Current heading [vx, vy]
        angle: Rotation in radians

    Returns:
        New unit heading
    """
    heading = np.arctan2(velocity[1], velocity[0]) + angle
    return np.array([np.cos(heading), np.sin(heading)], dtype=np.float64)


def blend_heading(velocity: np.ndarray, direction: np.ndarray, weight: float) -> np.ndarray:
    """
    Blend a unit direction into the heading and renormalize.

    Uses formula: v' = normalize(v + weight * d)

    Args:
        velocity: Current heading [vx, vy]
        direction: Unit steering direction [dx, dy]
        weight: Blend weight

    Returns:
        New unit heading
    """
    blended, _ = normalize(velocity + direction * weight)
    return blended
