# topmark:header:start
#
#   project      : Faultline
#   file         : __init__.py
#   file_relpath : src/faultline/utils/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Small helpers shared across Faultline."""

from __future__ import annotations
