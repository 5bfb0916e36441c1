# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
REST API routes for the SDCP projector server.

Route handlers are plain (non-async) functions; FastAPI runs them in its thread
pool, which suits the blocking client. A query the projector does not answer is
reported as 503 Service Unavailable.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..internal_types import *
from .. import (
    __version__ as pkg_version,
    SdcpProjectorClient,
    SdcpProjectorMonitor,
  )
from .dependencies import get_projector_client, get_projector_monitor
from .logger import logger

router = APIRouter(prefix="/v1")

def _require(value: Any, what: str) -> Any:
    if value is None:
        logger.debug(f"Projector did not return {what}")
        raise HTTPException(status_code=503, detail=f"Projector did not return {what}")
    return value

@router.get("/version")
def get_version() -> Dict[str, Any]:
    return {"version": pkg_version}

@router.get("/power_status")
def get_power_status(client: SdcpProjectorClient = Depends(get_projector_client)) -> Dict[str, Any]:
    power_status = _require(client.get_power_status(), "power status")
    return {"power_status": power_status.value, "power": power_status.is_powered}

@router.get("/model_name")
def get_model_name(client: SdcpProjectorClient = Depends(get_projector_client)) -> Dict[str, Any]:
    return {"model_name": _require(client.get_model_name(), "model name")}

@router.get("/lamp_timer")
def get_lamp_timer(client: SdcpProjectorClient = Depends(get_projector_client)) -> Dict[str, Any]:
    return {"lamp_hours": _require(client.get_lamp_timer(), "lamp timer")}

@router.get("/ip")
def get_ip(client: SdcpProjectorClient = Depends(get_projector_client)) -> Dict[str, Any]:
    return {"ip": str(_require(client.get_ip(), "IP address"))}

@router.post("/power/on")
def power_on(client: SdcpProjectorClient = Depends(get_projector_client)) -> Dict[str, Any]:
    return {"sent": client.send_power_command(True)}

@router.post("/power/off")
def power_off(client: SdcpProjectorClient = Depends(get_projector_client)) -> Dict[str, Any]:
    return {"sent": client.send_power_command(False)}

@router.get("/state")
def get_state(monitor: SdcpProjectorMonitor = Depends(get_projector_monitor)) -> Dict[str, Any]:
    return monitor.state.to_jsonable()
