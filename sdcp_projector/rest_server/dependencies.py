# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
FastAPI dependencies that give route handlers access to the objects created at startup.
"""

from __future__ import annotations

from fastapi import Request

from ..internal_types import *
from .. import (
    SdcpProjectorClient,
    SdcpProjectorClientConfig,
    SdcpProjectorMonitor,
  )

def get_projector_client(request: Request) -> SdcpProjectorClient:
    return request.app.state.sdcp_client

def get_projector_monitor(request: Request) -> SdcpProjectorMonitor:
    return request.app.state.sdcp_monitor

def get_projector_config(request: Request) -> SdcpProjectorClientConfig:
    return request.app.state.sdcp_config

def get_raw_config(request: Request) -> JsonableDict:
    return request.app.state.raw_config
