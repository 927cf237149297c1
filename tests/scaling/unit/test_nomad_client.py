# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for NomadSchedulerClient with the HTTP layer mocked out."""

import json
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from jobscale.nomad_client import NomadSchedulerClient
from jobscale.scale_protocol import EvaluationStatus, GroupScalePlan, TaskGroupCount
from jobscale.utils.exceptions import (
    CommunicationError,
    ConflictError,
    NotFoundError,
    SchedulerError,
)

pytestmark = [
    pytest.mark.pre_merge,
    pytest.mark.unit,
    pytest.mark.scaling,
]

WEB_JOB = {
    "ID": "web",
    "Type": "service",
    "JobModifyIndex": 7,
    "TaskGroups": [
        {"Name": "api", "Count": 4, "Tasks": [{"Name": "server"}]},
        {"Name": "worker", "Count": 2, "Tasks": [{"Name": "consumer"}]},
    ],
}


def plan(name, current, target):
    return GroupScalePlan(group_name=name, current_count=current, target_count=target)


@pytest.fixture
def client():
    return NomadSchedulerClient(address="http://nomad:4646/", token="secret")


def mock_responses(client, *responses):
    mock = AsyncMock(side_effect=list(responses))
    return patch.object(client, "_request", mock)


@pytest.mark.asyncio
async def test_read_groups(client):
    with mock_responses(client, (200, json.dumps(WEB_JOB))) as request:
        groups = await client.read_groups("web")

    assert groups == [
        TaskGroupCount(name="api", count=4),
        TaskGroupCount(name="worker", count=2),
    ]
    request.assert_awaited_once_with("GET", "/v1/job/web")


@pytest.mark.asyncio
async def test_read_groups_quotes_job_id(client):
    with mock_responses(client, (200, json.dumps({"TaskGroups": []}))) as request:
        assert await client.read_groups("batch/2024 run") == []

    request.assert_awaited_once_with("GET", "/v1/job/batch%2F2024%20run")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,error",
    [
        (404, NotFoundError),
        (503, CommunicationError),
        (500, SchedulerError),
        (429, SchedulerError),
    ],
)
async def test_read_groups_errors(client, status, error):
    with mock_responses(client, (status, "oops")):
        with pytest.raises(error):
            await client.read_groups("web")


@pytest.mark.asyncio
async def test_submit_registers_job_with_enforced_index(client):
    with mock_responses(
        client,
        (200, json.dumps(WEB_JOB)),
        (200, json.dumps({"EvalID": "eval-9", "JobModifyIndex": 8})),
    ) as request:
        await client.read_groups("web")
        evaluation_id = await client.submit_scale(
            "web", [plan("api", 4, 6), plan("worker", 2, 3)]
        )

    assert evaluation_id == "eval-9"
    method, path, payload = request.await_args_list[1].args
    assert (method, path) == ("POST", "/v1/job/web")
    assert payload["EnforceIndex"] is True
    assert payload["JobModifyIndex"] == 7
    assert [(g["Name"], g["Count"]) for g in payload["Job"]["TaskGroups"]] == [
        ("api", 6),
        ("worker", 3),
    ]
    # Untouched fields are sent back as read
    assert payload["Job"]["TaskGroups"][0]["Tasks"] == [{"Name": "server"}]


@pytest.mark.asyncio
async def test_submit_only_changes_planned_groups(client):
    with mock_responses(
        client,
        (200, json.dumps(WEB_JOB)),
        (200, json.dumps({"EvalID": "eval-1"})),
    ) as request:
        await client.submit_scale("web", [plan("worker", 2, 0)])

    assert [call.args[0] for call in request.await_args_list] == ["GET", "POST"]
    payload = request.await_args_list[1].args[2]
    assert [(g["Name"], g["Count"]) for g in payload["Job"]["TaskGroups"]] == [
        ("api", 4),
        ("worker", 0),
    ]


@pytest.mark.asyncio
async def test_submit_reads_job_again_after_submission(client):
    with mock_responses(
        client,
        (200, json.dumps(WEB_JOB)),
        (200, json.dumps({"EvalID": "eval-1"})),
        (200, json.dumps(WEB_JOB)),
        (200, json.dumps({"EvalID": "eval-2"})),
    ) as request:
        await client.read_groups("web")
        await client.submit_scale("web", [plan("api", 4, 5)])
        await client.submit_scale("web", [plan("api", 4, 5)])

    assert [call.args[0] for call in request.await_args_list] == [
        "GET",
        "POST",
        "GET",
        "POST",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,body,error",
    [
        (
            500,
            "Enforcing job modify index 7: job exists with conflicting job modify index: 8",
            ConflictError,
        ),
        (409, "conflict", ConflictError),
        (400, "Job validation failed: group count must be positive", SchedulerError),
        (502, "bad gateway", CommunicationError),
    ],
)
async def test_submit_errors(client, status, body, error):
    with mock_responses(client, (200, json.dumps(WEB_JOB)), (status, body)):
        await client.read_groups("web")
        with pytest.raises(error):
            await client.submit_scale("web", [plan("api", 4, 5)])


@pytest.mark.asyncio
async def test_submit_unknown_group(client):
    with mock_responses(client, (200, json.dumps(WEB_JOB))) as request:
        await client.read_groups("web")
        with pytest.raises(SchedulerError, match="cache"):
            await client.submit_scale("web", [plan("cache", 1, 2)])

    assert request.await_count == 1


@pytest.mark.asyncio
async def test_submit_without_evaluation(client):
    with mock_responses(client, (200, json.dumps(WEB_JOB)), (200, "{}")):
        with pytest.raises(SchedulerError, match="no evaluation"):
            await client.submit_scale("web", [plan("api", 4, 5)])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "evaluation,expected",
    [
        ({"Status": "pending"}, EvaluationStatus.PENDING),
        ({"Status": "blocked"}, EvaluationStatus.PENDING),
        ({"Status": "failed"}, EvaluationStatus.FAILED),
        ({"Status": "canceled"}, EvaluationStatus.CANCELLED),
        ({"Status": "complete"}, EvaluationStatus.SUCCESS),
        (
            {"Status": "complete", "FailedTGAllocs": {"api": {"NodesEvaluated": 3}}},
            EvaluationStatus.FAILED,
        ),
    ],
)
async def test_poll_evaluation_without_deployment(client, evaluation, expected):
    with mock_responses(client, (200, json.dumps(evaluation))) as request:
        assert await client.poll_evaluation("eval-1") == expected

    request.assert_awaited_once_with("GET", "/v1/evaluation/eval-1")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "deployment_status,expected",
    [
        ("running", EvaluationStatus.RUNNING),
        ("paused", EvaluationStatus.RUNNING),
        ("successful", EvaluationStatus.SUCCESS),
        ("failed", EvaluationStatus.FAILED),
        ("cancelled", EvaluationStatus.CANCELLED),
    ],
)
async def test_poll_evaluation_follows_deployment(client, deployment_status, expected):
    evaluation = {"Status": "complete", "DeploymentID": "dep-1"}
    with mock_responses(
        client,
        (200, json.dumps(evaluation)),
        (200, json.dumps({"ID": "dep-1", "Status": deployment_status})),
    ) as request:
        assert await client.poll_evaluation("eval-1") == expected

    assert request.await_args_list[1].args == ("GET", "/v1/deployment/dep-1")


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [(500, "internal error"), (404, ""), (200, "<html>")])
async def test_poll_failures_are_transient(client, response):
    with mock_responses(client, response):
        with pytest.raises(CommunicationError):
            await client.poll_evaluation("eval-1")


@pytest.mark.asyncio
async def test_network_errors_become_communication_errors(client):
    with patch(
        "jobscale.nomad_client.aiohttp.ClientSession",
        side_effect=aiohttp.ClientConnectionError("connection refused"),
    ):
        with pytest.raises(CommunicationError, match="connection refused"):
            await client.read_groups("web")


def test_headers_carry_token(client):
    assert client._headers()["X-Nomad-Token"] == "secret"
    assert "X-Nomad-Token" not in NomadSchedulerClient()._headers()


def test_address_is_normalized(client):
    assert client.address == "http://nomad:4646"
