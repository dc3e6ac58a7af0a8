"""
Screen-to-world projection of pointer drags.

A drag is anchored at the end-effector position captured when it starts.
Every pointer move casts a ray from the camera through the pointer and
intersects it with the plane through the anchor that faces the camera,
giving a 3-D target at the same depth as the anchor.

Functions:
    pointer_to_ndc: Convert pixel coordinates to normalized device coordinates.

Classes:
    Plane: Plane in Hessian normal form.
    Ray: Half-line with an origin and unit direction.
    PerspectiveCamera: Minimal pinhole camera producing pointer rays.
    DragTargetProjector: Anchor-plane projector for one drag session.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from arm_ik_sim.utils.transforms import as_vec3, normalize

_PARALLEL_EPSILON = 1e-12


def pointer_to_ndc(x: float, y: float, width: float, height: float) -> Optional[Tuple[float, float]]:
    """Map a pixel position to NDC in [-1, 1], y pointing up.

    Args:
        x: Pixel column measured from the viewport's left edge.
        y: Pixel row measured from the viewport's top edge.
        width: Viewport width in pixels.
        height: Viewport height in pixels.

    Returns:
        ``(ndc_x, ndc_y)``, or None for a collapsed (zero-size) viewport.
    """
    if width <= 0 or height <= 0:
        return None
    return (x / width) * 2.0 - 1.0, -(y / height) * 2.0 + 1.0


@dataclass
class Plane:
    """Plane ``normal · p + constant = 0`` with unit *normal*."""

    normal: np.ndarray
    constant: float

    @classmethod
    def from_normal_and_point(cls, normal: Sequence[float], point: Sequence[float]) -> "Plane":
        n = normalize(as_vec3(normal))
        return cls(normal=n, constant=-float(np.dot(n, as_vec3(point))))

    def distance_to_point(self, point: np.ndarray) -> float:
        return float(np.dot(self.normal, point)) + self.constant


@dataclass
class Ray:
    """Ray from *origin* along unit *direction*."""

    origin: np.ndarray
    direction: np.ndarray

    def intersect_plane(self, plane: Plane) -> Optional[np.ndarray]:
        """Return where the ray meets *plane*.

        Returns:
            The intersection point, the origin itself when the ray lies in
            the plane, or None when the ray is parallel to the plane or the
            plane is behind the origin.
        """
        denom = float(np.dot(plane.normal, self.direction))
        if abs(denom) < _PARALLEL_EPSILON:
            if plane.distance_to_point(self.origin) == 0.0:
                return self.origin.copy()
            return None
        t = -(float(np.dot(self.origin, plane.normal)) + plane.constant) / denom
        if t < 0.0:
            return None
        return self.origin + self.direction * t

    def intersect_sphere(self, center: np.ndarray, radius: float) -> Optional[float]:
        """Distance along the ray to the first hit on a sphere, or None."""
        to_center = center - self.origin
        tca = float(np.dot(to_center, self.direction))
        d2 = float(np.dot(to_center, to_center)) - tca * tca
        r2 = radius * radius
        if d2 > r2:
            return None
        thc = math.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t1 < 0.0:
            return None
        return t0 if t0 >= 0.0 else t1


@dataclass
class PerspectiveCamera:
    """Pinhole camera looking down its local -z axis.

    Attributes:
        position: Camera position in world space.
        rotation: 3x3 camera-to-world rotation matrix.
        fov_deg: Vertical field of view in degrees.
        aspect: Viewport width divided by height.
    """

    position: np.ndarray = field(default_factory=lambda: np.array([2.0, 2.0, 2.0]))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    fov_deg: float = 50.0
    aspect: float = 1.0

    @classmethod
    def look_at(
        cls,
        position: Sequence[float],
        target: Sequence[float],
        up: Sequence[float] = (0.0, 0.0, 1.0),
        fov_deg: float = 50.0,
        aspect: float = 1.0,
    ) -> "PerspectiveCamera":
        """Build a camera at *position* aimed at *target*.

        Raises:
            ValueError: If *position* equals *target* or *up* is parallel to
                the viewing direction.
        """
        eye = as_vec3(position)
        z_axis = eye - as_vec3(target)
        if np.linalg.norm(z_axis) == 0.0:
            raise ValueError("Camera position and target coincide")
        z_axis = normalize(z_axis)
        x_axis = np.cross(as_vec3(up), z_axis)
        if np.linalg.norm(x_axis) < 1e-9:
            raise ValueError("`up` is parallel to the viewing direction")
        x_axis = normalize(x_axis)
        y_axis = np.cross(z_axis, x_axis)
        rotation = np.column_stack([x_axis, y_axis, z_axis])
        return cls(position=eye, rotation=rotation, fov_deg=fov_deg, aspect=aspect)

    def world_direction(self) -> np.ndarray:
        """Unit view direction in world space."""
        return normalize(self.rotation @ np.array([0.0, 0.0, -1.0]))

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Ray:
        """Ray from the camera through the NDC point ``(ndc_x, ndc_y)``."""
        half = math.tan(math.radians(self.fov_deg) / 2.0)
        local = np.array([ndc_x * half * self.aspect, ndc_y * half, -1.0])
        return Ray(origin=self.position.copy(), direction=normalize(self.rotation @ local))


@dataclass
class DragTargetProjector:
    """Projects pointer rays onto the camera-facing plane through an anchor.

    The anchor is fixed for the projector's lifetime (one drag session);
    the plane is rebuilt from the camera on every call so that a moving
    camera keeps the plane facing the viewer.

    Attributes:
        anchor: End-effector world position captured at drag start.
    """

    anchor: np.ndarray

    def __post_init__(self) -> None:
        self.anchor = as_vec3(self.anchor)

    def plane_for(self, camera: PerspectiveCamera) -> Plane:
        return Plane.from_normal_and_point(camera.world_direction(), self.anchor)

    def project_ray(self, ray: Ray, camera: PerspectiveCamera) -> Optional[np.ndarray]:
        """Intersect *ray* with the anchor plane; None when there is no hit."""
        return ray.intersect_plane(self.plane_for(camera))

    def project(self, camera: PerspectiveCamera, ndc_x: float, ndc_y: float) -> Optional[np.ndarray]:
        """Target point under the pointer at ``(ndc_x, ndc_y)``, or None."""
        return self.project_ray(camera.ray_from_ndc(ndc_x, ndc_y), camera)
