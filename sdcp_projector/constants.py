# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by sdcp_projector"""

DEFAULT_PORT = 53484
"""The listen port number used by the projector for SDCP (PJTalk) control."""

DEFAULT_COMMUNITY = "SONY"
"""The factory default community token. Must be exactly 4 ASCII characters."""

CONNECT_TIMEOUT = 5.0
"""The timeout for connecting to the projector over TCP/IP, in seconds."""

DEFAULT_TIMEOUT = 2.0
"""The timeout for each read or write on an open connection, in seconds."""

DRAIN_TIMEOUT = 0.01
"""The read timeout used while discarding stale input before a GET command, in seconds.
   This only approximates "nothing left to read"; bytes that arrive later than this
   are not drained."""

POLL_INTERVAL = 5.0
"""The default interval between power status polls by the monitor, in seconds."""

INITIAL_POLL_DELAY = 1.0
"""The delay before the monitor's first poll, in seconds."""

SLOW_POLL_EVERY = 10
"""The monitor refreshes model name and lamp hours after this many successful
   power status polls."""
