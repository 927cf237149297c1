# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Scripted scheduler and clock doubles for the scaling pipeline tests."""

import pytest

from jobscale.scale_protocol import TaskGroupCount
from jobscale.scheduler_client import SchedulerClient
from jobscale.utils.exceptions import NotFoundError


class ScriptedSchedulerClient(SchedulerClient):
    """In-memory scheduler with scripted failures.

    ``read_script`` holds exceptions raised by the first reads, ``submit_script``
    evaluation IDs or exceptions returned by successive submissions and
    ``poll_script`` statuses or exceptions for successive polls; the last poll
    entry repeats forever. Target counts are applied only when a submission
    succeeds.
    """

    def __init__(self, jobs=None, read_script=(), submit_script=(), poll_script=()):
        self.jobs = {job_id: dict(groups) for job_id, groups in (jobs or {}).items()}
        self.read_script = list(read_script)
        self.submit_script = list(submit_script)
        self.poll_script = list(poll_script)
        self.read_calls = []
        self.submit_calls = []
        self.poll_calls = []

    async def read_groups(self, job_id):
        self.read_calls.append(job_id)
        if self.read_script:
            raise self.read_script.pop(0)
        if job_id not in self.jobs:
            raise NotFoundError(f"job not found: {job_id}")
        return [
            TaskGroupCount(name=name, count=count)
            for name, count in self.jobs[job_id].items()
        ]

    async def submit_scale(self, job_id, plans):
        self.submit_calls.append((job_id, list(plans)))
        result = self.submit_script.pop(0) if self.submit_script else "eval-1"
        if isinstance(result, Exception):
            raise result
        for plan in plans:
            self.jobs[job_id][plan.group_name] = plan.target_count
        return result

    async def poll_evaluation(self, evaluation_id):
        self.poll_calls.append(evaluation_id)
        if len(self.poll_script) > 1:
            result = self.poll_script.pop(0)
        else:
            result = self.poll_script[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    """Monotonic clock that only advances when ``sleep`` is awaited"""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def make_client():
    return ScriptedSchedulerClient


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def web_jobs():
    return {"web": {"api": 4, "worker": 2}}
