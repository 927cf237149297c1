# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Submits a scaling request to the scheduler as one atomic job update."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from jobscale.defaults import ScaleDefaults
from jobscale.scale_protocol import GroupScalePlan, ScalingOutcome, ScalingRequest
from jobscale.scheduler_client import SchedulerClient
from jobscale.utils.exceptions import (
    CommunicationError,
    ConflictError,
    EmptyJobError,
    SchedulerError,
)
from jobscale.utils.scale_calculator import calculate_scale_plan

logger = logging.getLogger(__name__)


class ScalingExecutor:
    """Reads live group counts, computes the plan and submits it.

    A retry after a concurrent modification or a failed read starts from a
    fresh read of the job. Once a submission has been sent and its response
    lost, retries resend the same absolute target counts instead, so a change
    the scheduler already applied is never applied twice.
    """

    def __init__(
        self,
        client: SchedulerClient,
        max_attempts: int = ScaleDefaults.max_attempts,
        retry_backoff: float = ScaleDefaults.retry_backoff,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            client: Scheduler to read from and submit to
            max_attempts: Attempts before a conflict or communication error is fatal
            retry_backoff: Initial delay between attempts, doubled each time
            sleep: Coroutine used to wait between attempts
            logger: Logger for progress messages (defaults to the module logger)
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.client = client
        self.max_attempts = max_attempts
        self.retry_backoff = retry_backoff
        self.sleep = sleep
        self.logger = logger or logging.getLogger(__name__)

    async def _read_plan(self, request: ScalingRequest) -> List[GroupScalePlan]:
        groups = await self.client.read_groups(request.job_id)
        plan = calculate_scale_plan(groups, request)
        if not plan:
            raise EmptyJobError(request.job_id)

        for entry in plan:
            self.logger.info(
                f"Scaling task group {entry.group_name} of job {request.job_id} "
                f"from {entry.current_count} to {entry.target_count}"
            )
        return plan

    async def _submit(
        self, request: ScalingRequest, plan: List[GroupScalePlan]
    ) -> ScalingOutcome:
        evaluation_id = await self.client.submit_scale(request.job_id, plan)
        self.logger.info(
            f"Job {request.job_id} scaling submitted, evaluation ID: {evaluation_id}"
        )
        return ScalingOutcome(
            submitted=True,
            evaluation_id=evaluation_id,
            plan=plan,
            message=_summarize_plan(plan),
        )

    async def execute(self, request: ScalingRequest) -> ScalingOutcome:
        """Run the scaling request against the scheduler.

        Returns:
            ScalingOutcome: Submitted outcome carrying the evaluation ID

        Raises:
            NotFoundError: If the job or the filtered task group is missing
            EmptyJobError: If the job has no task groups
            ConflictError: If concurrent modifications persist past max_attempts,
                or the job changed after a submission whose result was lost
            SchedulerError: On rejection, or when communication keeps failing

            Errors raised after a submission whose result was lost carry
            ``change_submitted=True``.
        """
        self.logger.info(f"Starting {request.describe()}")

        # Plan of a submission whose response was lost; resent unchanged
        unconfirmed_plan: Optional[List[GroupScalePlan]] = None

        for attempt in range(self.max_attempts):
            try:
                if unconfirmed_plan is not None:
                    plan = unconfirmed_plan
                else:
                    plan = await self._read_plan(request)
                try:
                    return await self._submit(request, plan)
                except CommunicationError:
                    unconfirmed_plan = plan
                    raise
            except ConflictError as e:
                if unconfirmed_plan is not None:
                    # The change may be our own earlier submission
                    e.change_submitted = True
                    self.logger.error(
                        f"Job {request.job_id} changed after a submission whose "
                        f"result is unknown; not retrying: {e}"
                    )
                    raise
                self.logger.warning(
                    f"Job {request.job_id} was modified concurrently "
                    f"(attempt {attempt + 1}/{self.max_attempts}): {e}"
                )
                if attempt == self.max_attempts - 1:
                    raise
            except CommunicationError as e:
                self.logger.warning(
                    f"Scheduler communication failed "
                    f"(attempt {attempt + 1}/{self.max_attempts}): {e}"
                )
                if attempt == self.max_attempts - 1:
                    raise SchedulerError(
                        f"Failed to scale job {request.job_id} after "
                        f"{self.max_attempts} attempts. Last error: {e}",
                        change_submitted=unconfirmed_plan is not None,
                    ) from e
            except SchedulerError as e:
                e.change_submitted = unconfirmed_plan is not None
                raise

            backoff = self.retry_backoff * 2**attempt
            self.logger.info(f"Retrying in {backoff}s...")
            await self.sleep(backoff)

        # Unreachable: the last attempt either returns or raises
        raise AssertionError("retry loop exited without a result")


def _summarize_plan(plan: List[GroupScalePlan]) -> str:
    return ", ".join(
        f"{p.group_name}: {p.current_count}->{p.target_count}" for p in plan
    )
