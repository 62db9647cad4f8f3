# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - response formatting shared by the routes.
"""

from .hal import HalFormatter, HalResponseBuilder, create_hal_formatter

__all__ = [
    "HalFormatter",
    "HalResponseBuilder",
    "create_hal_formatter"
]
