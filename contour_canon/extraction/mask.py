"""
Mask utilities for contour extraction.

Handles:
- Accepting masks as numpy arrays or PIL images
- Forcing a single-channel 0/255 uint8 layout
- Optional morphological clean-up before boundary tracing
"""

from typing import Union

import cv2
import numpy as np
from PIL import Image

from contour_canon.domain.constants import (
    CLEAN_KERNEL_SIZE,
    CLEAN_THRESHOLD,
    MEDIAN_BLUR_SIZE,
    MEDIAN_BLUR_PASSES,
)

MaskLike = Union[np.ndarray, Image.Image]


class MaskProcessor:
    """Prepare segmentation masks for boundary tracing."""

    @classmethod
    def to_binary(cls, image: MaskLike) -> np.ndarray:
        """
        Convert a mask to single-channel uint8 with values 0 and 255.

        Any non-zero pixel is foreground.

        Args:
            image: numpy array (H, W), (H, W, 3), (H, W, 4) or PIL Image

        Returns:
            New (H, W) uint8 array; the input is never modified

        Raises:
            ValueError: If the input is not a 2D image
        """
        if isinstance(image, Image.Image):
            arr = np.array(image.convert("L"))
        else:
            arr = np.asarray(image)
            if arr.ndim == 3:
                channels = arr.shape[2]
                if channels >= 4:
                    arr = cv2.cvtColor(arr.astype(np.uint8), cv2.COLOR_RGBA2GRAY)
                elif channels == 3:
                    arr = cv2.cvtColor(arr.astype(np.uint8), cv2.COLOR_RGB2GRAY)
                else:
                    arr = arr[..., 0]

        if arr.ndim != 2:
            raise ValueError(f"Expected a 2D mask, got array of shape {arr.shape}")

        binary = np.zeros(arr.shape, dtype=np.uint8)
        binary[arr != 0] = 255
        return binary

    @classmethod
    def clean(cls, mask: np.ndarray) -> np.ndarray:
        """
        Close small gaps and smooth ragged borders of a binary mask.

        Operations:
        - Dilation with a cross-shaped structuring element
        - Re-binarization and filling of every external region
        - Erosion with the same element
        - Repeated median filtering

        Args:
            mask: (H, W) uint8 binary mask

        Returns:
            Cleaned copy of the mask
        """
        cleaned = np.ascontiguousarray(mask, dtype=np.uint8).copy()
        struct_elt = cv2.getStructuringElement(cv2.MORPH_CROSS, CLEAN_KERNEL_SIZE)

        cleaned = cv2.dilate(cleaned, struct_elt)
        _, cleaned = cv2.threshold(cleaned, CLEAN_THRESHOLD, 255, cv2.THRESH_BINARY)

        # Fill holes inside each region
        regions, _ = cv2.findContours(cleaned, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        cv2.drawContours(cleaned, regions, -1, 255, thickness=cv2.FILLED, lineType=8)

        cleaned = cv2.erode(cleaned, struct_elt)

        for _ in range(MEDIAN_BLUR_PASSES):
            cleaned = cv2.medianBlur(cleaned, MEDIAN_BLUR_SIZE)

        return cleaned
