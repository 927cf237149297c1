# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Optional

from jobscale.deployment_monitor import DeploymentMonitor
from jobscale.scale_protocol import ScalingOutcome, ScalingRequest, TerminalStatus
from jobscale.scaling_executor import ScalingExecutor
from jobscale.scheduler_client import SchedulerClient

logger = logging.getLogger(__name__)


async def trigger_scaling_event(
    request: ScalingRequest,
    client: SchedulerClient,
    executor: Optional[ScalingExecutor] = None,
    monitor: Optional[DeploymentMonitor] = None,
    logger: Optional[logging.Logger] = None,
) -> ScalingOutcome:
    """Submit ``request`` and wait for the rollout to reach a terminal status.

    Errors raised before or during submission propagate unchanged; once the
    change is submitted the outcome always carries a terminal status.
    """
    logger = logger or logging.getLogger(__name__)
    executor = executor or ScalingExecutor(client, logger=logger)
    monitor = monitor or DeploymentMonitor(client, logger=logger)

    outcome = await executor.execute(request)
    result = await monitor.wait(outcome.evaluation_id)

    log = logger.info if result.status == TerminalStatus.SUCCESS else logger.error
    log(f"Job {request.job_id} scaling finished: {result.message}")

    return outcome.model_copy(
        update={
            "terminal_status": result.status,
            "message": f"{outcome.message}; {result.message}",
        }
    )
