"""
Configuration and defaults for the contour normalization pipeline.

Contains:
- Contour rejection thresholds (area ratio, aspect ratio bounds)
- Hull-guided filtering distance
- Mask clean-up switch
- Worker pool sizing

Every value can be overridden through the environment or a ``.env`` file.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Contour rejection: a region survives when its bounding box covers at least
# mask_area / CONTOUR_AREA_RATIO pixels and its width/height ratio lies in
# [CONTOUR_LOW_ASPECT_RATIO, CONTOUR_HIGH_ASPECT_RATIO]
CONTOUR_AREA_RATIO = float(os.environ.get("CONTOUR_AREA_RATIO", "1000"))
CONTOUR_LOW_ASPECT_RATIO = float(os.environ.get("CONTOUR_LOW_ASPECT_RATIO", "0.7"))
CONTOUR_HIGH_ASPECT_RATIO = float(os.environ.get("CONTOUR_HIGH_ASPECT_RATIO", "1.3"))

# Hull-guided filtering (pixels)
HULL_DIST_THRESHOLD = float(os.environ.get("HULL_DIST_THRESHOLD", "2.0"))

# Morphological clean-up of the incoming mask before tracing
CONTOUR_CLEAN_MASK = _env_bool("CONTOUR_CLEAN_MASK", False)

# Worker pool (1 = process contours serially)
PIPELINE_MAX_WORKERS = int(os.environ.get("PIPELINE_MAX_WORKERS", "1"))

# Re-raise hull/contour mismatches instead of dropping the contour
PIPELINE_STRICT = _env_bool("PIPELINE_STRICT", False)
