from contour_canon.filtering.hull_filter import compute_hull, filter_contour, filter_contours

__all__ = ["compute_hull", "filter_contour", "filter_contours"]
