# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
jobscale - scale a running job in or out

Usage:
    python -m jobscale scale-out --count 2 web
    python -m jobscale scale-in --percent 25 --task-group api web

Exits 0 only when the scheduler reports the rollout as successful.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from jobscale.deployment_monitor import DeploymentMonitor
from jobscale.nomad_client import NomadSchedulerClient
from jobscale.scale import trigger_scaling_event
from jobscale.scale_protocol import ScalingOutcome
from jobscale.scaling_executor import ScalingExecutor
from jobscale.utils.argparse_config import create_jobscale_parser
from jobscale.utils.config_validator import validate_scaling_request
from jobscale.utils.exceptions import JobScaleError
from jobscale.utils.logging import configure_jobscale_logging

logger = logging.getLogger("jobscale.cli")


async def run(args: argparse.Namespace) -> ScalingOutcome:
    request = validate_scaling_request(
        job_id=args.job_id,
        direction=args.direction,
        count=args.count,
        percent=args.percent,
        task_group=args.task_group,
    )
    client = NomadSchedulerClient(address=args.address, token=args.token)
    executor = ScalingExecutor(
        client,
        max_attempts=args.max_attempts,
        retry_backoff=args.retry_backoff,
        logger=logger,
    )
    monitor = DeploymentMonitor(
        client,
        poll_interval=args.poll_interval,
        timeout=args.timeout,
        logger=logger,
    )
    return await trigger_scaling_event(
        request, client, executor=executor, monitor=monitor, logger=logger
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_jobscale_parser()
    args = parser.parse_args(argv)

    try:
        configure_jobscale_logging(args.log_level, args.log_format)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        outcome = asyncio.run(run(args))
    except JobScaleError as e:
        state = (
            "a change was submitted but its outcome is unknown"
            if e.change_submitted
            else "nothing was changed"
        )
        logger.error(f"{type(e).__name__}: {e} ({state})")
        return 1

    if outcome.succeeded:
        logger.info(f"Job {args.job_id} scaled successfully: {outcome.message}")
    else:
        logger.error(
            f"Job {args.job_id} scaling ended with status "
            f"{outcome.terminal_status.value}: {outcome.message}"
        )
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
