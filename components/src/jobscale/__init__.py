# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
jobscale - grow or shrink the task groups of a running job.

Architecture:
- validate_scaling_request turns raw input into an immutable ScalingRequest
- calculate_scale_plan computes per-group target counts from live counts
- ScalingExecutor submits all targets as one job update, retrying transient errors
- DeploymentMonitor polls the resulting evaluation to a terminal status
- trigger_scaling_event runs the whole pipeline against a SchedulerClient
"""

__all__ = [
    "DeploymentMonitor",
    "EvaluationStatus",
    "GroupScalePlan",
    "MagnitudeKind",
    "NomadSchedulerClient",
    "RolloutResult",
    "ScalingDirection",
    "ScalingExecutor",
    "ScalingOutcome",
    "ScalingRequest",
    "SchedulerClient",
    "TaskGroupCount",
    "TerminalStatus",
    "calculate_scale_plan",
    "trigger_scaling_event",
    "validate_scaling_request",
]

__version__ = "0.1.0"

from jobscale.deployment_monitor import DeploymentMonitor
from jobscale.nomad_client import NomadSchedulerClient
from jobscale.scale import trigger_scaling_event
from jobscale.scale_protocol import (
    EvaluationStatus,
    GroupScalePlan,
    MagnitudeKind,
    RolloutResult,
    ScalingDirection,
    ScalingOutcome,
    ScalingRequest,
    TaskGroupCount,
    TerminalStatus,
)
from jobscale.scaling_executor import ScalingExecutor
from jobscale.scheduler_client import SchedulerClient
from jobscale.utils.config_validator import validate_scaling_request
from jobscale.utils.scale_calculator import calculate_scale_plan
