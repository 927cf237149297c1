# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""SchedulerClient backed by the Nomad HTTP API."""

import asyncio
import copy
import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import aiohttp

from jobscale.defaults import ScaleDefaults
from jobscale.scale_protocol import EvaluationStatus, GroupScalePlan, TaskGroupCount
from jobscale.scheduler_client import SchedulerClient
from jobscale.utils.exceptions import (
    CommunicationError,
    ConflictError,
    NotFoundError,
    SchedulerError,
)

logger = logging.getLogger(__name__)

# Gateway errors are treated as transient, everything else >= 400 is a rejection
TRANSIENT_HTTP_STATUSES = {502, 503, 504}

EVALUATION_STATUSES = {
    "pending": EvaluationStatus.PENDING,
    "blocked": EvaluationStatus.PENDING,
    "failed": EvaluationStatus.FAILED,
    "canceled": EvaluationStatus.CANCELLED,
    "cancelled": EvaluationStatus.CANCELLED,
}

DEPLOYMENT_STATUSES = {
    "successful": EvaluationStatus.SUCCESS,
    "failed": EvaluationStatus.FAILED,
    "cancelled": EvaluationStatus.CANCELLED,
}


class NomadSchedulerClient(SchedulerClient):
    """Scales Nomad jobs by re-registering them with updated group counts.

    The job document read by ``read_groups`` is registered back with
    ``EnforceIndex`` set, so a modification made by someone else in between
    is rejected and surfaces as ``ConflictError``.
    """

    def __init__(
        self,
        address: str = ScaleDefaults.address,
        token: Optional[str] = None,
        request_timeout: float = ScaleDefaults.request_timeout,
    ):
        self.address = address.rstrip("/")
        self.token = token
        self.request_timeout = request_timeout
        self._jobs: Dict[str, Dict[str, Any]] = {}

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["X-Nomad-Token"] = self.token
        return headers

    async def _request(
        self, method: str, path: str, payload: Optional[dict] = None
    ) -> Tuple[int, str]:
        url = f"{self.address}{path}"
        logger.debug(f"{method} {url}")
        try:
            async with aiohttp.ClientSession(
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
            ) as session:
                async with session.request(method, url, json=payload) as response:
                    return response.status, await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CommunicationError(f"{method} {url} failed: {e!r}") from e

    @staticmethod
    def _decode(path: str, body: str) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise CommunicationError(f"Invalid JSON response from {path}: {e}") from e

    async def read_groups(self, job_id: str) -> List[TaskGroupCount]:
        path = f"/v1/job/{quote(job_id, safe='')}"
        status, body = await self._request("GET", path)
        if status == 404:
            raise NotFoundError(f"job not found: {job_id}")
        if status in TRANSIENT_HTTP_STATUSES:
            raise CommunicationError(f"GET {path} returned {status}: {body.strip()}")
        if status >= 400:
            raise SchedulerError(f"GET {path} returned {status}: {body.strip()}")

        job = self._decode(path, body)
        self._jobs[job_id] = job
        return [
            TaskGroupCount(name=group["Name"], count=group.get("Count") or 0)
            for group in job.get("TaskGroups") or []
        ]

    async def submit_scale(self, job_id: str, plans: List[GroupScalePlan]) -> str:
        if job_id not in self._jobs:
            await self.read_groups(job_id)
        # Registered copy; the cached document is dropped so the next read is fresh
        job = copy.deepcopy(self._jobs.pop(job_id))

        targets = {plan.group_name: plan.target_count for plan in plans}
        known_groups = {group["Name"] for group in job.get("TaskGroups") or []}
        missing = sorted(set(targets) - known_groups)
        if missing:
            raise SchedulerError(f"Job {job_id} has no task groups named {missing}")
        for group in job["TaskGroups"]:
            if group["Name"] in targets:
                group["Count"] = targets[group["Name"]]

        payload = {
            "Job": job,
            "EnforceIndex": True,
            "JobModifyIndex": job.get("JobModifyIndex", 0),
        }
        path = f"/v1/job/{quote(job_id, safe='')}"
        status, body = await self._request("POST", path, payload)
        if status == 409 or (status >= 400 and "modify index" in body.lower()):
            raise ConflictError(f"Job {job_id} was modified concurrently: {body.strip()}")
        if status in TRANSIENT_HTTP_STATUSES:
            raise CommunicationError(f"POST {path} returned {status}: {body.strip()}")
        if status >= 400:
            raise SchedulerError(
                f"Scheduler rejected update of job {job_id} ({status}): {body.strip()}"
            )

        evaluation_id = self._decode(path, body).get("EvalID")
        if not evaluation_id:
            raise SchedulerError(f"Scheduler returned no evaluation for job {job_id}")
        return evaluation_id

    async def _poll_json(self, path: str) -> Dict[str, Any]:
        # Any failure while polling is reported as transient; the monitor bounds retries
        status, body = await self._request("GET", path)
        if status >= 400:
            raise CommunicationError(f"GET {path} returned {status}: {body.strip()}")
        return self._decode(path, body)

    async def poll_evaluation(self, evaluation_id: str) -> EvaluationStatus:
        evaluation = await self._poll_json(
            f"/v1/evaluation/{quote(evaluation_id, safe='')}"
        )
        eval_status = evaluation.get("Status", "")
        if eval_status != "complete":
            return EVALUATION_STATUSES.get(eval_status, EvaluationStatus.PENDING)

        failed_allocs = evaluation.get("FailedTGAllocs") or {}
        if failed_allocs:
            logger.warning(
                f"Evaluation {evaluation_id} failed to place task groups: "
                f"{', '.join(sorted(failed_allocs))}"
            )
            return EvaluationStatus.FAILED

        # Batch and system jobs complete without a deployment
        deployment_id = evaluation.get("DeploymentID")
        if not deployment_id:
            return EvaluationStatus.SUCCESS

        deployment = await self._poll_json(
            f"/v1/deployment/{quote(deployment_id, safe='')}"
        )
        return DEPLOYMENT_STATUSES.get(
            deployment.get("Status", ""), EvaluationStatus.RUNNING
        )
