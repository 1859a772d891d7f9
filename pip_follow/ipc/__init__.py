"""
Compositor IPC backends.

Modules:
- base: Abstract event/request connection pair
- niri: niri JSON socket backend
- sway: sway backend built on i3ipc.aio
"""

from .base import CompositorConnection
from .niri import NiriConnection
from .sway import SwayConnection

__all__ = [
    "CompositorConnection",
    "NiriConnection",
    "SwayConnection",
]
