#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Logger for the REST FastAPI server that controls an SDCP projector.
"""

from __future__ import annotations

import logging

logger = logging.getLogger('sdcp_projector.rest_server')
