"""
Exceptions raised by the normalization stages.

``InvalidContour`` marks a single degenerate blob and is absorbed by the
pipeline (the contour is dropped). ``HullCorrespondenceNotFound`` means the
contour and its hull disagree, which only happens when the caller broke the
integer-point / tracing-order contract.
"""

from typing import Optional


class InvalidContour(Exception):
    """Contour too small or too thin to normalize."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class HullCorrespondenceNotFound(Exception):
    """The first contour point is not a vertex of the contour's hull."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index
