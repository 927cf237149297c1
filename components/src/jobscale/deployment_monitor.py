# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Watches a submitted evaluation until its rollout reaches a terminal status."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from jobscale.defaults import ScaleDefaults
from jobscale.scale_protocol import EvaluationStatus, RolloutResult, TerminalStatus
from jobscale.scheduler_client import SchedulerClient
from jobscale.utils.exceptions import CommunicationError

logger = logging.getLogger(__name__)

MONITOR_COMMUNICATION_ERROR = "monitor communication error"


class DeploymentMonitor:
    """Polls the scheduler for the status of an evaluation.

    States:
        PENDING / RUNNING: sleep ``poll_interval`` and poll again
        SUCCESS / FAILED / CANCELLED: reported by the scheduler, returned as-is
        TIMED_OUT: ``timeout`` elapsed first; no rollback is attempted and the
            rollout may still complete on the scheduler side

    Consecutive ``CommunicationError``s while polling are retried up to
    ``max_poll_failures`` and then reported as FAILED.
    """

    def __init__(
        self,
        client: SchedulerClient,
        poll_interval: float = ScaleDefaults.poll_interval,
        timeout: float = ScaleDefaults.timeout,
        max_poll_failures: int = ScaleDefaults.max_poll_failures,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        if max_poll_failures < 1:
            raise ValueError(
                f"max_poll_failures must be at least 1, got {max_poll_failures}"
            )
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.max_poll_failures = max_poll_failures
        self.sleep = sleep
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    async def wait(self, evaluation_id: str) -> RolloutResult:
        """Poll ``evaluation_id`` until a terminal status or the deadline.

        Args:
            evaluation_id: Handle returned by the scheduler on submission

        Returns:
            RolloutResult: Terminal status, number of polls and a summary
        """
        start = self.clock()
        polls = 0
        consecutive_failures = 0
        last_status: Optional[EvaluationStatus] = None

        self.logger.info(f"Monitoring evaluation {evaluation_id}")
        while True:
            polls += 1
            try:
                status = await self.client.poll_evaluation(evaluation_id)
            except CommunicationError as e:
                consecutive_failures += 1
                self.logger.warning(
                    f"Failed to poll evaluation {evaluation_id} "
                    f"({consecutive_failures}/{self.max_poll_failures}): {e}"
                )
                if consecutive_failures >= self.max_poll_failures:
                    return RolloutResult(
                        status=TerminalStatus.FAILED,
                        polls=polls,
                        message=f"{MONITOR_COMMUNICATION_ERROR}: {e}",
                    )
            else:
                consecutive_failures = 0
                if status != last_status:
                    self.logger.info(
                        f"Evaluation {evaluation_id} is {status.value}"
                    )
                    last_status = status
                if status.is_terminal:
                    return RolloutResult(
                        status=TerminalStatus.from_evaluation(status),
                        polls=polls,
                        message=f"Rollout of evaluation {evaluation_id} finished "
                        f"with status {status.value}",
                    )

            remaining = self.timeout - (self.clock() - start)
            if remaining <= 0:
                self.logger.warning(
                    f"Stopped watching evaluation {evaluation_id} after "
                    f"{self.timeout}s; the rollout may still be in progress"
                )
                return RolloutResult(
                    status=TerminalStatus.TIMED_OUT,
                    polls=polls,
                    message=f"Timed out after {self.timeout}s waiting for evaluation "
                    f"{evaluation_id}; the rollout may still be in progress",
                )

            # Last poll lands on the deadline rather than past it
            await self.sleep(min(self.poll_interval, remaining))
