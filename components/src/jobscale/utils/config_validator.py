# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Optional, Union

from jobscale.scale_protocol import MagnitudeKind, ScalingDirection, ScalingRequest
from jobscale.utils.exceptions import ValidationError


def validate_scaling_request(
    job_id: Optional[str],
    direction: Union[ScalingDirection, str],
    count: int = 0,
    percent: int = 0,
    task_group: Optional[str] = None,
) -> ScalingRequest:
    """Turn raw user input into a ScalingRequest.

    Args:
        job_id: Identifier of the job to scale
        direction: ScalingDirection or its value ("out" / "in")
        count: Absolute number of replicas to add or remove (0 = unset)
        percent: Percentage of replicas to add or remove (0 = unset)
        task_group: Optional task group to restrict scaling to

    Returns:
        ScalingRequest: The validated, immutable request

    Raises:
        ValidationError: If the input is missing or conflicting
    """
    if not job_id or not job_id.strip():
        raise ValidationError("missing job identifier")

    try:
        direction = ScalingDirection(direction)
    except ValueError:
        raise ValidationError(f"invalid scaling direction: {direction!r}") from None

    if count < 0 or percent < 0:
        raise ValidationError("count and percent must not be negative")

    if (count == 0 and percent == 0) or (count > 0 and percent > 0):
        raise ValidationError("count and percent are mutually exclusive")

    # Growth by more than 100% is fine, shrinking by more than 100% is not
    if percent > 100 and direction == ScalingDirection.IN:
        raise ValidationError(
            f"percent must be between 1 and 100 when scaling in, got {percent}"
        )

    if count > 0:
        kind, magnitude = MagnitudeKind.COUNT, count
    else:
        kind, magnitude = MagnitudeKind.PERCENT, percent

    return ScalingRequest(
        job_id=job_id.strip(),
        group_filter=task_group or None,
        direction=direction,
        magnitude_kind=kind,
        magnitude=magnitude,
    )
