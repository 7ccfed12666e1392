"""Pydantic models for glasses cloud webhook payloads."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GlassesWebhookEvent(BaseModel):
    """Session lifecycle or button event sent by the glasses cloud."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["session_request", "stop_request", "button_press"]
    session_id: str = Field(alias="sessionId")
    user_id: str = Field(alias="userId")
    reason: str | None = None
    button_id: str | None = Field(default=None, alias="buttonId")
    press_type: str | None = Field(default=None, alias="pressType")
