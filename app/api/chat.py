"""
Chat assistant endpoints for the lead-capture widget.

  POST   /sessions                  — start a conversation
  GET    /sessions/{id}             — current transcript and controls
  POST   /sessions/{id}/options     — click an option
  POST   /sessions/{id}/details     — submit the details form
  POST   /sessions/{id}/restart     — start over under the same id
  DELETE /sessions/{id}             — close the widget
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_chat_bot
from app.chat.bot import ChatBot, ChatSessionNotFoundError
from app.chat.engine import DialogEngine, DialogError, MissingAnswerError
from app.schemas.chat import (
    ChatSessionRead,
    DetailsRequest,
    DialogState,
    FieldView,
    OptionRequest,
    OptionView,
    StepView,
)

router = APIRouter()


def _session_view(session_id: str, state: DialogState, engine: DialogEngine) -> ChatSessionRead:
    step_view = None
    if not state.is_terminal:
        step = engine.current_step(state)
        step_view = StepView(
            id=step.id,
            text=step.text,
            kind="input" if step.is_input else "options",
            options=[OptionView(value=o.value, text=o.text) for o in step.options],
            fields=[
                FieldView(name=f.name, label=f.label, type=f.type, required=f.required)
                for f in step.fields
            ],
        )
    return ChatSessionRead(
        session_id=session_id,
        transcript=state.transcript,
        is_terminal=state.is_terminal,
        submitting=state.submitting,
        controls_enabled=not (state.is_terminal or state.submitting),
        step=step_view,
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat session not found")


@router.post("/sessions", response_model=ChatSessionRead, status_code=status.HTTP_201_CREATED)
async def start_session(bot: ChatBot = Depends(get_chat_bot)):
    session_id, state = await bot.start()
    return _session_view(session_id, state, bot.engine)


@router.get("/sessions/{session_id}", response_model=ChatSessionRead)
async def get_session(session_id: str, bot: ChatBot = Depends(get_chat_bot)):
    try:
        state = await bot.get_state(session_id)
    except ChatSessionNotFoundError:
        raise _not_found()
    return _session_view(session_id, state, bot.engine)


@router.post("/sessions/{session_id}/options", response_model=ChatSessionRead)
async def choose_option(
    session_id: str,
    payload: OptionRequest,
    bot: ChatBot = Depends(get_chat_bot),
):
    """Apply an option click. Choosing the confirm option submits the lead."""
    try:
        state = await bot.handle_option(session_id, payload.value)
    except ChatSessionNotFoundError:
        raise _not_found()
    except DialogError as exc:
        # includes ChatBusyError while a submission is in flight
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return _session_view(session_id, state, bot.engine)


@router.post("/sessions/{session_id}/details", response_model=ChatSessionRead)
async def submit_details(
    session_id: str,
    payload: DetailsRequest,
    bot: ChatBot = Depends(get_chat_bot),
):
    """Submit company name, contact name and phone number."""
    try:
        state = await bot.handle_details(session_id, payload.answers())
    except ChatSessionNotFoundError:
        raise _not_found()
    except MissingAnswerError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except DialogError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return _session_view(session_id, state, bot.engine)


@router.post("/sessions/{session_id}/restart", response_model=ChatSessionRead)
async def restart_session(session_id: str, bot: ChatBot = Depends(get_chat_bot)):
    state = await bot.restart(session_id)
    return _session_view(session_id, state, bot.engine)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session_id: str, bot: ChatBot = Depends(get_chat_bot)):
    await bot.clear_state(session_id)
