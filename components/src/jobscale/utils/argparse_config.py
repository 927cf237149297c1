# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Argument parsing for the jobscale command."""

import argparse

from jobscale.defaults import LOG_FORMATS, LOG_LEVELS, ScaleDefaults
from jobscale.scale_protocol import ScalingDirection
from jobscale.utils.configuration import add_argument


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    general = parser.add_argument_group("general options")
    add_argument(
        general,
        flag_name="--address",
        env_var="NOMAD_ADDR",
        default=ScaleDefaults.address,
        help="Scheduler HTTP API address including port",
    )
    add_argument(
        general,
        flag_name="--token",
        env_var="NOMAD_TOKEN",
        default=None,
        help="ACL token sent with every scheduler request",
    )
    add_argument(
        general,
        flag_name="--log-level",
        env_var="JOBSCALE_LOG_LEVEL",
        default=ScaleDefaults.log_level,
        help=f"Log verbosity, one of {', '.join(LOG_LEVELS)}",
        arg_type=str.upper,
    )
    add_argument(
        general,
        flag_name="--log-format",
        env_var="JOBSCALE_LOG_FORMAT",
        default=ScaleDefaults.log_format,
        help=f"Log format, one of {', '.join(LOG_FORMATS)}",
        arg_type=str.upper,
    )

    scaling = parser.add_argument_group("scaling options")
    scaling.add_argument(
        "--count",
        type=int,
        default=0,
        help="Number of replicas to add or remove per task group. "
        "Only one of --count or --percent can be passed.",
    )
    scaling.add_argument(
        "--percent",
        type=int,
        default=0,
        help="Percentage by which to scale each task group. Counts are rounded "
        "up. Only one of --count or --percent can be passed.",
    )
    scaling.add_argument(
        "--task-group",
        default=None,
        help="Task group to scale. If not specified all task groups of the job "
        "are scaled.",
    )

    rollout = parser.add_argument_group("rollout options")
    rollout.add_argument(
        "--poll-interval",
        type=float,
        default=ScaleDefaults.poll_interval,
        help="Seconds between rollout status checks",
    )
    rollout.add_argument(
        "--timeout",
        type=float,
        default=ScaleDefaults.timeout,
        help="Seconds to wait for the rollout before giving up watching it",
    )
    rollout.add_argument(
        "--max-attempts",
        type=int,
        default=ScaleDefaults.max_attempts,
        help="Attempts to read and submit the job before failing",
    )
    rollout.add_argument(
        "--retry-backoff",
        type=float,
        default=ScaleDefaults.retry_backoff,
        help="Initial seconds between attempts, doubled after each failure",
    )

    parser.add_argument("job_id", help="ID of the job to scale")


def create_jobscale_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for jobscale.

    Returns:
        argparse.ArgumentParser: Parser with scale-out and scale-in subcommands
    """
    parser = argparse.ArgumentParser(
        prog="jobscale",
        description="Scale the task groups of a running job in or out",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Add two replicas to every task group of job "web"
  jobscale scale-out --count 2 web

  # Remove a quarter of the replicas of the "api" task group
  jobscale scale-in --percent 25 --task-group api web
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scale_out = subparsers.add_parser("scale-out", help="Scale a job out")
    scale_out.set_defaults(direction=ScalingDirection.OUT)
    _add_common_arguments(scale_out)

    scale_in = subparsers.add_parser("scale-in", help="Scale a job in")
    scale_in.set_defaults(direction=ScalingDirection.IN)
    _add_common_arguments(scale_in)

    return parser
