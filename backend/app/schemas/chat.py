from typing import Literal

from pydantic import BaseModel


class AgentMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class AssistantRequest(BaseModel):
    messages: list[AgentMessage] = []
