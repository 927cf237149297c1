# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Data structures shared by the validator, calculator, executor and monitor."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScalingDirection(str, Enum):
    """Whether a scaling operation grows or shrinks the job"""

    OUT = "out"
    IN = "in"


class MagnitudeKind(str, Enum):
    COUNT = "count"
    PERCENT = "percent"


class EvaluationStatus(str, Enum):
    """Rollout status as reported by the scheduler"""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            EvaluationStatus.SUCCESS,
            EvaluationStatus.FAILED,
            EvaluationStatus.CANCELLED,
        )


class TerminalStatus(str, Enum):
    """Final status of a scaling operation.

    TIMED_OUT is imposed by the monitor and is not a scheduler state: the
    rollout may still be progressing when it is reported.
    """

    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"

    @classmethod
    def from_evaluation(cls, status: EvaluationStatus) -> "TerminalStatus":
        if not status.is_terminal:
            raise ValueError(f"Evaluation status {status.value} is not terminal")
        return cls(status.value)


class ScalingRequest(BaseModel):
    """Validated description of what to scale and by how much.

    Built by ``validate_scaling_request``; immutable once constructed.
    """

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(min_length=1)
    group_filter: Optional[str] = None
    direction: ScalingDirection
    magnitude_kind: MagnitudeKind
    magnitude: int = Field(gt=0)

    @property
    def count(self) -> int:
        return self.magnitude if self.magnitude_kind == MagnitudeKind.COUNT else 0

    @property
    def percent(self) -> int:
        return self.magnitude if self.magnitude_kind == MagnitudeKind.PERCENT else 0

    def describe(self) -> str:
        """Short human-readable summary used in log lines"""
        amount = (
            f"{self.magnitude}%"
            if self.magnitude_kind == MagnitudeKind.PERCENT
            else str(self.magnitude)
        )
        target = (
            f"task group {self.group_filter}" if self.group_filter else "all task groups"
        )
        return f"scale-{self.direction.value} job {self.job_id} ({target}) by {amount}"


class TaskGroupCount(BaseModel):
    """A task group and its replica count as read from the live job"""

    name: str
    count: int = Field(ge=0)


class GroupScalePlan(BaseModel):
    group_name: str
    current_count: int = Field(ge=0)
    target_count: int = Field(ge=0)

    @property
    def delta(self) -> int:
        return self.target_count - self.current_count


class RolloutResult(BaseModel):
    """Result of watching an evaluation until it reaches a terminal status"""

    status: TerminalStatus
    polls: int = 0
    message: str = ""


class ScalingOutcome(BaseModel):
    """Result of one scaling invocation"""

    submitted: bool
    evaluation_id: Optional[str] = None
    terminal_status: Optional[TerminalStatus] = None
    plan: List[GroupScalePlan] = Field(default_factory=list)
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.terminal_status == TerminalStatus.SUCCESS

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
