"""
Numeric constants shared by the normalization stages.

Tolerances for degenerate geometry, morphology kernel sizes for mask
clean-up, and the canonical sampling density for reconstructed curves.
"""

# Degenerate geometry
MOMENT_EPSILON = 1e-9          # relative; |mu11p| below this * spread counts as 0
AREA_EPSILON = 1e-12           # |m00| below this is a zero-area polygon
EIGEN_EPSILON = 1e-12          # relative to the largest eigenvalue
MIN_CONTOUR_POINTS = 3
MIN_HULL_POINTS = 3
ALTITUDE_DECIMALS = 9          # point-to-edge distances are rounded to 1e-9 px

# Mask clean-up (cross dilation/erosion, repeated median blur)
CLEAN_KERNEL_SIZE = (4, 4)
CLEAN_THRESHOLD = 254
MEDIAN_BLUR_SIZE = 5
MEDIAN_BLUR_PASSES = 5

# Drop reasons reported in FrameResult.dropped
REASON_INVALID_CONTOUR = "InvalidContour"
REASON_HULL_MISMATCH = "HullCorrespondenceNotFound"

# Superformula reconstruction
DEFAULT_RECONSTRUCTION_POINTS = 360
