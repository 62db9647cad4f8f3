# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Application-wide defaults for the credential cancellation tracker.
"""

# Days allowed between correspondence and financial settlement
DEFAULT_SETTLEMENT_DAYS = 15

# Size of the "upcoming due date" window
DEFAULT_NOTIFY_BEFORE_DAYS = 3

# Bucket used for requests without a recognised company
UNSPECIFIED_COMPANY = "unspecified"

# Number of requests shown in the dashboard "recent" list
RECENT_REQUESTS_LIMIT = 5

SERVICE_NAME = "cancellation-tracker-api"
SERVICE_VERSION = "1.0.0"

DEFAULT_DEPARTMENT_NAME = "Ministry of Transport and Communications"
DEFAULT_SECTION_NAME = "Vehicle Affairs Section"
DEFAULT_BRANCH_NAME = "Credential Cancellation Unit"
