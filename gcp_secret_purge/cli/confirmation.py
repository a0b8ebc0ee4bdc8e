"""Two-step confirmation before destructive operations."""
import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

FIRST_PROMPT = "Do you want to proceed? [y/n] "
SECOND_PROMPT = "Are you sure? [y/n] "
DRY_RUN_HINT = "\nIf you're scared, you can use DRY_RUN\n"


class ConfirmationState(Enum):
    AWAIT_FIRST_CONFIRM = "await_first_confirm"
    AWAIT_SECOND_CONFIRM = "await_second_confirm"
    PROCEED = "proceed"
    ABORT = "abort"


_PROMPTS = {
    ConfirmationState.AWAIT_FIRST_CONFIRM: FIRST_PROMPT,
    ConfirmationState.AWAIT_SECOND_CONFIRM: SECOND_PROMPT,
}

_NEXT_STATE = {
    ConfirmationState.AWAIT_FIRST_CONFIRM: ConfirmationState.AWAIT_SECOND_CONFIRM,
    ConfirmationState.AWAIT_SECOND_CONFIRM: ConfirmationState.PROCEED,
}


class ConfirmationGate:
    """
    Ask twice before proceeding.

    Only the exact answer "y" advances; anything else, including
    "Y", " y" or end of input, aborts.
    """

    def __init__(self, input_fn: Optional[Callable[[str], str]] = None):
        self._input = input_fn or input
        self.state = ConfirmationState.AWAIT_FIRST_CONFIRM

    @property
    def done(self) -> bool:
        return self.state in (ConfirmationState.PROCEED, ConfirmationState.ABORT)

    def step(self, answer: str) -> ConfirmationState:
        """Feed one answer and return the new state."""
        if self.done:
            raise RuntimeError(f"Confirmation already finished with {self.state.name}")

        if answer == "y":
            self.state = _NEXT_STATE[self.state]
        else:
            self.state = ConfirmationState.ABORT
        logger.debug(f"Confirmation answer {answer!r} -> {self.state.name}")
        return self.state

    def run(self) -> bool:
        """
        Prompt until the gate reaches PROCEED or ABORT.

        Returns:
            True if both answers were "y"
        """
        while not self.done:
            try:
                answer = self._input(_PROMPTS[self.state])
            except EOFError:
                answer = ""
            self.step(answer)
        return self.state is ConfirmationState.PROCEED
