import cv2
import numpy as np
import pytest


def draw_rectangle_mask(shape, top_left, size):
    """Mask of ``shape`` (h, w) with a filled ``size`` (w, h) rectangle at ``top_left`` (x, y)."""
    mask = np.zeros(shape, dtype=np.uint8)
    x, y = top_left
    w, h = size
    cv2.rectangle(mask, (x, y), (x + w - 1, y + h - 1), 255, thickness=-1)
    return mask


def rectangle_corners(width, height, origin=(0, 0)):
    """Four-corner integer polygon spanning ``width`` x ``height`` pixels."""
    x0, y0 = origin
    return np.array([
        [x0, y0],
        [x0, y0 + height - 1],
        [x0 + width - 1, y0 + height - 1],
        [x0 + width - 1, y0],
    ], dtype=np.int32)


@pytest.fixture
def square_mask():
    # 100x100 square, pixels 50..149, in a 200x200 frame
    return draw_rectangle_mask((200, 200), (50, 50), (100, 100))


@pytest.fixture
def elongated_mask():
    # 200x50 rectangle in a 400x400 frame
    return draw_rectangle_mask((400, 400), (100, 175), (200, 50))


@pytest.fixture
def notched_square_mask():
    mask = draw_rectangle_mask((200, 200), (50, 50), (100, 100))
    # 3 px wide, 6 px deep notch in the top edge
    mask[50:56, 98:101] = 0
    return mask
