# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Iterable, List

from jobscale.scale_protocol import (
    GroupScalePlan,
    MagnitudeKind,
    ScalingDirection,
    ScalingRequest,
    TaskGroupCount,
)
from jobscale.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def _ceil_percent(current_count: int, percent: int) -> int:
    # Integer ceiling of current_count * percent / 100
    return -(-current_count * percent // 100)


def calculate_delta(current_count: int, request: ScalingRequest) -> int:
    """Number of replicas to add or remove from a group of ``current_count``.

    Percentages are rounded up in both directions so that growth never
    under-provisions and the amount removed on shrink is deterministic.
    """
    if request.magnitude_kind == MagnitudeKind.COUNT:
        return request.magnitude
    return _ceil_percent(current_count, request.magnitude)


def calculate_scale_plan(
    groups: Iterable[TaskGroupCount], request: ScalingRequest
) -> List[GroupScalePlan]:
    """Compute the target count of every task group touched by ``request``.

    Args:
        groups: Live task groups of the job, in job order
        request: Validated scaling request

    Returns:
        List[GroupScalePlan]: One entry per selected group, in job order. Groups
        whose target equals their current count are included.

    Raises:
        NotFoundError: If ``request.group_filter`` names a group not in ``groups``
    """
    groups = list(groups)
    if request.group_filter is not None:
        selected = [g for g in groups if g.name == request.group_filter]
        if not selected:
            raise NotFoundError(
                f"task group not found: {request.group_filter} in job {request.job_id}"
            )
    else:
        selected = groups

    plan = []
    for group in selected:
        delta = calculate_delta(group.count, request)
        if request.direction == ScalingDirection.OUT:
            target = group.count + delta
        else:
            target = max(0, group.count - delta)
        logger.debug(
            f"Task group {group.name}: {group.count} -> {target} (delta {delta})"
        )
        plan.append(
            GroupScalePlan(
                group_name=group.name,
                current_count=group.count,
                target_count=target,
            )
        )
    return plan
