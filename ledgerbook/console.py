"""
Console I/O

All prompts go through one Console object so the recorder and the
session never call input() or print() directly. Tests replace it with
scripted answers.
"""

from typing import Callable, Optional, TypeVar


T = TypeVar("T")


class Console:
    """Blocking prompt/answer console."""

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ):
        self._input = input_func
        self._output = output_func

    def say(self, text: str = "") -> None:
        self._output(text)

    def ask(self, prompt: str) -> str:
        """Ask once and return the raw answer with the line ending removed."""
        return self._input(f"\n\t{prompt} ").rstrip("\r\n")

    def ask_choice(self, prompt: str, choices: dict[str, T]) -> T:
        """Ask until the answer is one of the choice keys."""
        while True:
            answer = self.ask(prompt).strip()
            if answer in choices:
                return choices[answer]
            self.say(f"\tPlease enter one of: {', '.join(choices)}")

    def ask_yes_no(self, prompt: str) -> bool:
        """1 means yes, 0 means no."""
        return self.ask_choice(prompt, {"1": True, "0": False})

    def ask_non_empty(self, prompt: str, retry_message: Optional[str] = None) -> str:
        while True:
            answer = self.ask(prompt).strip()
            if answer:
                return answer
            self.say(retry_message or "\tA value is required.")
