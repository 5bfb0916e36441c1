#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls an SDCP projector.
"""

from __future__ import annotations

from fastapi import FastAPI

import os
import json

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from .. import (
    SdcpProjectorClient,
    SdcpProjectorClientConfig,
    SdcpProjectorMonitor,
  )

from .api import router as api_router

def load_raw_config() -> JsonableDict:
    """Loads the JSON config file named by SDCP_PROJECTOR_CONFIG, or
       ./sdcp_projector_config.json if it exists. Returns an empty dict if neither exists."""
    config_file = os.environ.get("SDCP_PROJECTOR_CONFIG", None)
    if config_file is None:
        if os.path.exists("sdcp_projector_config.json"):
            config_file = "sdcp_projector_config.json"
    if config_file is None:
        return {}
    with open(config_file, "r") as f:
        raw_config: JsonableDict = json.load(f)
    return raw_config

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """
    logger.info("Projector REST server starting up--initializing...")
    raw_config = load_raw_config()
    app.state.raw_config = raw_config
    sdcp_config = SdcpProjectorClientConfig.from_jsonable(raw_config)
    sdcp_config.validate()
    app.state.sdcp_config = sdcp_config
    sdcp_client = SdcpProjectorClient.from_config(sdcp_config)
    app.state.sdcp_client = sdcp_client
    sdcp_monitor = SdcpProjectorMonitor(
        sdcp_client,
        poll_interval_secs=sdcp_config.poll_interval_secs,
        slow_poll_every=sdcp_config.slow_poll_every,
      )
    app.state.sdcp_monitor = sdcp_monitor
    try:
        sdcp_monitor.start()
        logger.info(f"Serving API for projector at {sdcp_client}...")
        logger.info("Projector REST server initialization done; starting server...")
        yield
    finally:
        logger.info("Projector REST server shutting down--cleaning up...")
        sdcp_monitor.stop()
        sdcp_client.close()

proj_api = FastAPI(lifespan=fastapi_lifetime)
proj_api.include_router(api_router)
