"""
Superformula (Gielis curve) coefficients and reconstruction.

The shape fitter consumes normalized contours and returns a
``SuperformulaConfig``. ``reconstruct_contour`` samples the fitted curve in
the canonical frame; combine it with ``NormalizedContour.to_image_space`` to
draw the result over the source image.

    r(phi) = ( |cos(m phi / 4) / a|^n2 + |sin(m phi / 4) / b|^n3 )^(-1 / n1)

with m = p / q, sampled over 2 * pi * q so rational symmetries close.
"""

import math

import numpy as np
from pydantic import BaseModel, Field

from contour_canon.domain.constants import DEFAULT_RECONSTRUCTION_POINTS


class SuperformulaConfig(BaseModel):
    """The twelve superformula coefficients. Defaults describe the unit circle."""
    a: float = Field(default=1.0, description="Horizontal semi-axis")
    b: float = Field(default=1.0, description="Vertical semi-axis")
    n1: float = Field(default=2.0, description="Overall exponent")
    n2: float = Field(default=2.0, description="Cosine term exponent")
    n3: float = Field(default=2.0, description="Sine term exponent")
    p: float = Field(default=4.0, description="Symmetry numerator")
    q: float = Field(default=1.0, description="Symmetry denominator")
    theta_offset: float = Field(default=0.0, description="In-plane rotation (radians)")
    phi_offset: float = Field(default=0.0, description="Out-of-plane rotation, 3D form only")
    x_offset: float = Field(default=0.0)
    y_offset: float = Field(default=0.0)
    z_offset: float = Field(default=0.0, description="Depth offset, 3D form only")

    def __str__(self) -> str:
        lines = [
            f"a = {self.a}",
            f"b = {self.b}",
            f"n 1 = {self.n1}",
            f"n 2 = {self.n2}",
            f"n 3 = {self.n3}",
            f"p = {self.p}",
            f"q = {self.q}",
            f"theta offset = {self.theta_offset}",
            f"phi offset = {self.phi_offset}",
            f"x offset = {self.x_offset}",
            f"y offset = {self.y_offset}",
            f"z offset = {self.z_offset}",
        ]
        return "\n".join(lines) + "\n"


def superformula_radius(phi, config: SuperformulaConfig) -> np.ndarray:
    """
    Radius of the curve at the given angle(s).

    Args:
        phi: Angle or array of angles (radians)
        config: Superformula coefficients

    Returns:
        Radius array with the shape of ``phi``
    """
    phi = np.asarray(phi, dtype=np.float64)
    m = config.p / config.q
    cos_term = np.abs(np.cos(m * phi / 4.0) / config.a) ** config.n2
    sin_term = np.abs(np.sin(m * phi / 4.0) / config.b) ** config.n3
    with np.errstate(divide="ignore"):
        return (cos_term + sin_term) ** (-1.0 / config.n1)


def reconstruct_contour(
    config: SuperformulaConfig,
    number_points: int = DEFAULT_RECONSTRUCTION_POINTS,
) -> np.ndarray:
    """
    Sample the curve described by ``config`` in the canonical frame.

    Args:
        config: Superformula coefficients
        number_points: Samples along the curve

    Returns:
        (number_points, 2) float64 array

    Raises:
        ValueError: If number_points < 3 or q == 0
    """
    if number_points < 3:
        raise ValueError(f"Need at least 3 points, got {number_points}")
    if config.q == 0:
        raise ValueError("Superformula q coefficient must be non-zero")

    period = 2.0 * math.pi * abs(config.q)
    phi = np.linspace(0.0, period, number_points, endpoint=False)
    radius = superformula_radius(phi, config)

    angle = phi + config.theta_offset
    x = radius * np.cos(angle) + config.x_offset
    y = radius * np.sin(angle) + config.y_offset
    return np.column_stack((x, y))
