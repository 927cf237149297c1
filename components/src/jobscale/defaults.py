# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0


class ScaleDefaults:
    address = "http://localhost:4646"
    log_level = "INFO"
    log_format = "HUMAN"
    request_timeout = 30.0  # seconds, per HTTP call to the scheduler
    max_attempts = 3  # read/submit attempts before giving up
    retry_backoff = 1.0  # seconds, doubled after every failed attempt
    poll_interval = 5.0  # seconds between evaluation polls
    timeout = 600.0  # seconds before the monitor stops watching the rollout
    max_poll_failures = 3  # consecutive failed polls before reporting failure


LOG_LEVELS = ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]
LOG_FORMATS = ["HUMAN", "JSON"]
