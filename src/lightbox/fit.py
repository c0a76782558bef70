import math
from typing import NamedTuple


class FitResult(NamedTuple):
    """Display size of an image contain-fitted into a container."""

    width: int
    height: int
    scale: float


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_fit(image_width: float, image_height: float, container_width: float, container_height: float) -> FitResult | None:
    """Contain-fit an image inside a container, preserving aspect ratio and never upscaling.

    Args:
        image_width: Intrinsic image width in pixels (> 0)
        image_height: Intrinsic image height in pixels (> 0)
        container_width: Measured container width in pixels
        container_height: Measured container height in pixels

    Returns:
        FitResult with rounded display size and the applied scale, or None when the
        container has no usable area yet (caller keeps showing a placeholder).

    Raises:
        ValueError: If the intrinsic image size is not positive
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {image_width}x{image_height}")
    if container_width <= 0 or container_height <= 0:
        return None

    image_aspect = image_width / image_height
    container_aspect = container_width / container_height

    if image_aspect > container_aspect:
        # Relatively wider than the container: width is the binding side
        fit_width = container_width
        fit_height = container_width / image_aspect
        scale = container_width / image_width
    else:
        fit_height = container_height
        fit_width = container_height * image_aspect
        scale = container_height / image_height

    if scale > 1.0:
        # Native size already fits
        return FitResult(width=_round_half_up(image_width), height=_round_half_up(image_height), scale=1.0)

    return FitResult(width=_round_half_up(fit_width), height=_round_half_up(fit_height), scale=scale)
