# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Error taxonomy for scaling operations.

``change_submitted`` is False when the job on the scheduler was left
untouched, and True when a submission may have been applied but its result
was never confirmed.
"""


class JobScaleError(Exception):
    """Base class for all scaling errors"""

    def __init__(self, *args, change_submitted: bool = False):
        super().__init__(*args)
        self.change_submitted = change_submitted


class ValidationError(JobScaleError):
    """Bad or conflicting user input. Raised before any network call."""


class NotFoundError(JobScaleError):
    """The named job or task group does not exist"""


class EmptyJobError(JobScaleError):
    """Raised when the job has no task groups to scale"""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} has no task groups to scale")


class ConflictError(JobScaleError):
    """The scheduler rejected the submission due to a concurrent modification"""


class CommunicationError(JobScaleError):
    """Transient network or API failure talking to the scheduler"""


class SchedulerError(JobScaleError):
    """Non-retryable rejection by the scheduler"""
