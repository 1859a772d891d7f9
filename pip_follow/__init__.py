"""
pip-follow

Keeps a Picture-in-Picture style window on the focused workspace of a
Wayland compositor (niri or sway) by following workspace focus events.
"""

__version__ = "0.1.0"
__author__ = "NixOS Configuration Team"
