"""
Scripted dialog engine for the chat assistant.

Walks a fixed step list, collecting answers into a DialogState:

  - option step: advance, decline (terminal), back (to the input step),
    or submit (confirm step only)
  - input step:  validate required fields, record a summary, advance

Transitions are synchronous and return a new state. Submission is split
in two so the caller can persist ``submitting=True`` before the network
call: ``select_option`` marks the state, ``submit`` performs the call
and always leaves the conversation terminal.
"""

import logging
from collections.abc import Mapping
from typing import Protocol

from app.chat.steps import (
    DECLINE_MESSAGE,
    FAILURE_TEMPLATE,
    STEPS,
    SUCCESS_TEMPLATE,
    TRANSPORT_ERROR_TEMPLATE,
    OptionAction,
    Step,
    format_answers,
)
from app.chat.submitter import SubmissionOutcome
from app.schemas.chat import ChatMessage, DialogState, Speaker

logger = logging.getLogger(__name__)


class DialogError(Exception):
    """Raised for input the current dialog state cannot accept."""
    pass


class MissingAnswerError(DialogError):
    """A required field of an input step was left empty."""

    def __init__(self, fields: list[str]):
        super().__init__(f"Missing required fields: {', '.join(fields)}")
        self.fields = fields


class Submitter(Protocol):
    async def submit(self, answers: dict[str, str]) -> SubmissionOutcome: ...


def _bot(text: str) -> ChatMessage:
    return ChatMessage(speaker=Speaker.BOT, text=text)


def _user(text: str) -> ChatMessage:
    return ChatMessage(speaker=Speaker.USER, text=text)


class DialogEngine:
    """Drives one conversation through ``steps``."""

    def __init__(self, submitter: Submitter, steps: tuple[Step, ...] = STEPS):
        self.submitter = submitter
        self.steps = steps

    # ── Helpers ──────────────────────────────────────────────────────

    def current_step(self, state: DialogState) -> Step:
        return self.steps[state.step_index]

    def _input_step_index(self, before: int) -> int:
        for index in range(before - 1, -1, -1):
            if self.steps[index].is_input:
                return index
        raise DialogError("No input step to go back to")

    def _check_accepting(self, state: DialogState) -> None:
        if state.is_terminal:
            raise DialogError("Conversation has ended")
        if state.submitting:
            raise DialogError("Submission in progress")

    def _advance(self, state: DialogState) -> None:
        following = state.step_index + 1
        if following < len(self.steps):
            state.step_index = following
            state.transcript.append(_bot(self.steps[following].text))

    # ── Transitions ──────────────────────────────────────────────────

    def start(self) -> DialogState:
        """Fresh conversation with the first prompt shown."""
        return DialogState(transcript=[_bot(self.steps[0].text)])

    def select_option(self, state: DialogState, value: str) -> DialogState:
        """Apply an option click on the current option step."""
        self._check_accepting(state)
        step = self.current_step(state)
        if step.is_input:
            raise DialogError(f"Step {step.id!r} expects details, not an option")
        option = step.option(value)
        if option is None:
            raise DialogError(f"Unknown option {value!r} for step {step.id!r}")

        new = state.model_copy(deep=True)

        if option.action == OptionAction.BACK:
            # Drop the details summary and the confirm prompt
            new.transcript = new.transcript[:-2]
            new.step_index = self._input_step_index(state.step_index)
            return new

        new.transcript.append(_user(option.text))

        if option.action == OptionAction.DECLINE:
            new.transcript.append(_bot(DECLINE_MESSAGE))
            new.is_terminal = True
        elif option.action == OptionAction.SUBMIT:
            new.submitting = True
        else:
            self._advance(new)
        return new

    def submit_details(self, state: DialogState, answers: Mapping[str, str]) -> DialogState:
        """Apply a form submission on the current input step."""
        self._check_accepting(state)
        step = self.current_step(state)
        if not step.is_input:
            raise DialogError(f"Step {step.id!r} expects an option, not details")

        collected = {f.name: (answers.get(f.name) or "").strip() for f in step.fields}
        missing = [f.name for f in step.fields if f.required and not collected[f.name]]
        if missing:
            raise MissingAnswerError(missing)

        new = state.model_copy(deep=True)
        new.collected_answers.update(collected)
        new.transcript.append(_user(format_answers(new.collected_answers)))
        self._advance(new)
        return new

    async def submit(self, state: DialogState) -> DialogState:
        """
        Send the collected answers exactly once and finish the conversation.

        Success quotes the phone number back; failure carries the server's
        reason or the transport error text. No retry is offered.
        """
        if not state.submitting:
            raise DialogError("No submission pending")

        outcome = await self.submitter.submit(dict(state.collected_answers))

        if outcome.ok:
            text = SUCCESS_TEMPLATE.format(phoneNumber=state.collected_answers.get("phoneNumber", ""))
        elif outcome.transport_error:
            text = TRANSPORT_ERROR_TEMPLATE.format(error=outcome.error)
        else:
            text = FAILURE_TEMPLATE.format(error=outcome.error)

        logger.info("Chat lead submission finished (ok=%s)", outcome.ok)
        return self._finish(state, text)

    def abort_submission(self, state: DialogState, error: str) -> DialogState:
        """End a pending submission that could not be attempted."""
        return self._finish(state, TRANSPORT_ERROR_TEMPLATE.format(error=error))

    def _finish(self, state: DialogState, text: str) -> DialogState:
        new = state.model_copy(deep=True)
        new.transcript.append(_bot(text))
        new.submitting = False
        new.is_terminal = True
        return new
