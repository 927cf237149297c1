# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Interface to the cluster scheduler that owns the job definition."""

from abc import ABC, abstractmethod
from typing import List

from jobscale.scale_protocol import EvaluationStatus, GroupScalePlan, TaskGroupCount


class SchedulerClient(ABC):
    """Minimal set of scheduler operations needed to scale a job.

    Implementations translate transport failures into ``CommunicationError``
    so callers can retry them, and server-side rejections into
    ``ConflictError`` or ``SchedulerError``.
    """

    @abstractmethod
    async def read_groups(self, job_id: str) -> List[TaskGroupCount]:
        """Read the task groups of a job and their current counts.

        Raises:
            NotFoundError: If the job does not exist
            CommunicationError: On transient network failures
        """

    @abstractmethod
    async def submit_scale(self, job_id: str, plans: List[GroupScalePlan]) -> str:
        """Apply all target counts to the job in a single update.

        Returns:
            str: Evaluation ID of the accepted change

        Raises:
            ConflictError: If the job was modified concurrently
            SchedulerError: If the scheduler rejected the update
            CommunicationError: On transient network failures
        """

    @abstractmethod
    async def poll_evaluation(self, evaluation_id: str) -> EvaluationStatus:
        """Get the rollout status of an evaluation.

        Raises:
            CommunicationError: On transient network failures
        """
