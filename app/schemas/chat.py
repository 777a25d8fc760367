"""
Pydantic schemas for the chat assistant: dialog state, API payloads,
and the chat lead sink.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Speaker(str, Enum):
    BOT = "bot"
    USER = "user"


class ChatMessage(BaseModel):
    speaker: Speaker
    text: str


class DialogState(BaseModel):
    """Conversation state for one widget session."""
    transcript: list[ChatMessage] = Field(default_factory=list)
    step_index: int = 0
    collected_answers: dict[str, str] = Field(default_factory=dict)
    is_terminal: bool = False
    submitting: bool = False


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------


class OptionRequest(BaseModel):
    value: str = Field(..., examples=["yes"])


class DetailsRequest(BaseModel):
    """Answers to the details step, keyed as the form fields are named."""
    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field("", alias="companyName")
    user_name: str = Field("", alias="userName")
    phone_number: str = Field("", alias="phoneNumber")

    def answers(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class OptionView(BaseModel):
    value: str
    text: str


class FieldView(BaseModel):
    name: str
    label: str
    type: str
    required: bool


class StepView(BaseModel):
    id: str
    text: str
    kind: str
    options: list[OptionView] = Field(default_factory=list)
    fields: list[FieldView] = Field(default_factory=list)


class ChatSessionRead(BaseModel):
    """What the widget needs to render: transcript plus current controls."""
    session_id: str
    transcript: list[ChatMessage]
    is_terminal: bool
    submitting: bool
    controls_enabled: bool
    step: StepView | None = None


# ---------------------------------------------------------------------------
# Chat lead sink
# ---------------------------------------------------------------------------


class ChatLead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(..., alias="companyName")
    user_name: str = Field(..., alias="userName")
    phone_number: str = Field(..., alias="phoneNumber")


class ChatLeadResponse(BaseModel):
    success: bool
    error: str | None = None
