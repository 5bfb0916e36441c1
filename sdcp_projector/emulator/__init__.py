# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SDCP projector emulator.

Provides a simple emulation of an SDCP projector on TCP/IP.
"""

from .emulator_impl import SdcpProjectorEmulator
from .session import SdcpProjectorEmulatorSession
