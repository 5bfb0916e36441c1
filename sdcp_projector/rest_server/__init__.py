# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls an SDCP projector.
"""
from .app import proj_api, load_raw_config
from .dependencies import (
    get_projector_client,
    get_projector_monitor,
    get_projector_config,
    get_raw_config,
  )
