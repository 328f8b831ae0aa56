"""Case-study builders used by demos and integration tests."""

from cutpursuit.case_studies.piecewise import build_blurred_path, build_grid_image, build_piecewise_path

__all__ = ["build_blurred_path", "build_grid_image", "build_piecewise_path"]
