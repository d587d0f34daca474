# topmark:header:start
#
#   project      : Faultline
#   file         : constants.py
#   file_relpath : src/faultline/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Faultline Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

FAULTLINE_VERSION: str = get_version("faultline")

# Environment overrides for the process-wide debug configuration:
ENV_LOG_LEVEL: str = "FAULTLINE_LOG_LEVEL"
ENV_ASSERTION_LEVEL: str = "FAULTLINE_ASSERTION_LEVEL"
ENV_DEBUGGING: str = "FAULTLINE_DEBUGGING"

# Level of Faultline's own (internal) Python logging:
ENV_PY_LOG_LEVEL: str = "FAULTLINE_PY_LOG_LEVEL"

DEBUG_FAILURE_PREFIX: str = "Debug Failure."
FALSE_EXPRESSION: str = "False expression"
VERBOSE_DEBUG_INFO_SEPARATOR: str = "\r\nVerbose Debug Information: "
UNEXPECTED_NODE: str = "Unexpected node."
ILLEGAL_VALUE: str = "Illegal value:"

# Prefix used for attributes installed by `Debug.enable_debug_info()`:
DEBUG_INFO_PREFIX: str = "_debug_"

STACK_FRAME_PREFIX: str = "    at "
