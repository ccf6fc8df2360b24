"""
Target dimension calculation for resize policies.

Scaled sizes are rounded half away from zero (half-up for the positive
values involved) using exact integer arithmetic, and never drop below 1.
"""

from .models import Custom, Dimensions, ResizePolicy, Scale


def _scale_axis(value: int, percent: int) -> int:
    # round(value * percent / 100) with halves rounded up, in integers
    return max(1, (2 * value * percent + 100) // 200)


def compute(original: Dimensions, policy: ResizePolicy) -> Dimensions:
    """
    Apply a resize policy to original dimensions.

    Args:
        original: Source width and height
        policy: NoResize, Scale or Custom

    Returns:
        Target dimensions (the original ones for NoResize or unknown policies)
    """
    width, height = original

    if isinstance(policy, Scale):
        return Dimensions(_scale_axis(width, policy.percent), _scale_axis(height, policy.percent))

    if isinstance(policy, Custom):
        return Dimensions(policy.width or width, policy.height or height)

    return Dimensions(width, height)
