"""Chat-completions wire models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    """Speaker of a chat turn."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    """Single message sent to or received from the model."""
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str


class ChatRequest(BaseModel):
    """Request body for the chat-completions endpoint."""
    model: str
    messages: list[ChatTurn]
    temperature: float
    max_tokens: int
    stream: bool = False


class ChatChoiceMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None


class ChatChoice(BaseModel):
    message: ChatChoiceMessage = Field(default_factory=ChatChoiceMessage)
    finish_reason: Optional[str] = None


class ChatResponse(BaseModel):
    """Response body from the chat-completions endpoint."""
    choices: list[ChatChoice] = Field(default_factory=list)

    @property
    def first_content(self) -> str:
        """Content of the first choice, or an empty string when there is none."""
        if not self.choices:
            return ""
        return self.choices[0].message.content or ""
