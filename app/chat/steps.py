"""
Step definitions for the Eco Assistant lead-capture conversation.

initial (options) → userDetails (input) → confirm (options) → done

The step list is fixed configuration; the engine never mutates it.
"""

from dataclasses import dataclass
from enum import Enum


class OptionAction(str, Enum):
    ADVANCE = "advance"
    DECLINE = "decline"
    BACK = "back"
    SUBMIT = "submit"


@dataclass(frozen=True)
class Option:
    value: str
    text: str
    action: OptionAction = OptionAction.ADVANCE


@dataclass(frozen=True)
class InputField:
    name: str
    label: str
    type: str = "text"
    required: bool = True


@dataclass(frozen=True)
class Step:
    id: str
    text: str
    options: tuple[Option, ...] = ()
    fields: tuple[InputField, ...] = ()

    @property
    def is_input(self) -> bool:
        return bool(self.fields)

    def option(self, value: str) -> Option | None:
        for option in self.options:
            if option.value == value:
                return option
        return None


STEPS: tuple[Step, ...] = (
    Step(
        id="initial",
        text="Would you like to trade in Recycled Plastic?",
        options=(
            Option("yes", "Yes, I want to trade"),
            Option("explore", "Just exploring"),
            Option("no", "No, thanks", OptionAction.DECLINE),
        ),
    ),
    Step(
        id="userDetails",
        text="Please enter your details",
        fields=(
            InputField("companyName", "Company Name"),
            InputField("userName", "Your Name"),
            InputField("phoneNumber", "Phone Number", type="tel"),
        ),
    ),
    Step(
        id="confirm",
        text="Confirm submission?",
        options=(
            Option("confirm", "Yes, proceed", OptionAction.SUBMIT),
            Option("back", "No, go back", OptionAction.BACK),
        ),
    ),
)

DECLINE_MESSAGE = "Thanks for stopping by!"
SUCCESS_TEMPLATE = "✅ Alright! We'll contact you at {phoneNumber}."
FAILURE_TEMPLATE = "❌ Submission failed: {error}"
TRANSPORT_ERROR_TEMPLATE = "❌ Submission error: {error}"


def format_answers(answers: dict[str, str]) -> str:
    """User-side transcript entry summarising the submitted details."""
    return (
        f"Company: {answers.get('companyName', '')}\n"
        f"Name: {answers.get('userName', '')}\n"
        f"Phone: {answers.get('phoneNumber', '')}"
    )
