"""
Pydantic data models for pip-follow.

Compositor-neutral window descriptors, the events consumed by the tracker,
and the single command it emits.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field


WindowId = int
WorkspaceId = Union[int, str]


class WindowDescriptor(BaseModel):
    """Matchable attributes of a window at one point in time."""

    id: WindowId = Field(..., description="Compositor-assigned window ID")
    title: Optional[str] = Field(None, description="Window title")
    app_id: Optional[str] = Field(None, description="Wayland app_id or X11 window class")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": 2,
                "title": "Picture-in-Picture",
                "app_id": "firefox"
            }
        }
    }

    def label(self) -> str:
        """Title for log messages, falling back to the window ID."""
        return self.title if self.title is not None else str(self.id)


class WorkspaceActivated(BaseModel):
    """A workspace became active on some output."""

    workspace_id: WorkspaceId = Field(..., description="Workspace ID (niri) or name (sway)")
    focused: bool = Field(..., description="True if the workspace also gained global focus")

    model_config = {"frozen": True}


class WindowOpenedOrChanged(BaseModel):
    """A window was opened, or one of its attributes changed."""

    window: WindowDescriptor

    model_config = {"frozen": True}


class WindowClosed(BaseModel):
    """A window was closed."""

    id: WindowId

    model_config = {"frozen": True}


class UnrecognizedEvent(BaseModel):
    """Any compositor event the tracker does not consume."""

    kind: str = Field("unknown", description="Event name as reported by the compositor")

    model_config = {"frozen": True}


Event = Union[WorkspaceActivated, WindowOpenedOrChanged, WindowClosed, UnrecognizedEvent]


class MoveWindowCommand(BaseModel):
    """Move a window to a workspace."""

    window_id: WindowId
    workspace_id: WorkspaceId
    focus: bool = Field(False, description="Follow the window with input focus")

    model_config = {"frozen": True}
