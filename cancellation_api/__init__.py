# SPDX-License-Identifier: Apache-2.0

"""
Credential cancellation tracker API.

Derives due dates, overdue and warning flags, row classifications and
report statistics for vehicle credential cancellation requests.
"""

from .constants import SERVICE_VERSION

__version__ = SERVICE_VERSION
