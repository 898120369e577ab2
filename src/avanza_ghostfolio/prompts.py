"""Operator prompts used for symbol, account and setup questions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence


class Prompter(ABC):
    """Abstract base class for interactive operator prompts."""

    @abstractmethod
    def choose(self, message: str, options: Sequence[str]) -> int | None:
        """Ask the operator to pick one of the options.

        :param message: Question shown above the options.
        :param options: Options to choose from.
        :returns: Index of the chosen option, or None if cancelled.
        """
        ...

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question.

        :param message: Question to ask.
        :param default: Answer used when the operator just presses enter.
        :returns: True for yes.
        """
        ...

    @abstractmethod
    def text(self, message: str) -> str | None:
        """Ask for free text.

        :param message: Question to ask.
        :returns: The entered text, or None if cancelled.
        """
        ...


class TerminalPrompter(Prompter):
    """Prompter reading answers from standard input.

    End of input or Ctrl-C counts as a cancel.
    """

    def choose(self, message: str, options: Sequence[str]) -> int | None:
        print(f"\n{message}")
        for idx, option in enumerate(options, start=1):
            print(f"{idx:3}. {option}")
        while True:
            answer = self._read("Choice (empty to cancel): ")
            if not answer:
                return None
            try:
                index = int(answer) - 1
            except ValueError:
                print("Invalid choice, enter a number.")
                continue
            if 0 <= index < len(options):
                return index
            print(f"Invalid choice, pick 1-{len(options)}.")

    def confirm(self, message: str, default: bool = False) -> bool:
        suffix = " [Y/n]: " if default else " [y/N]: "
        answer = self._read(message + suffix)
        if not answer:
            return default
        return answer.lower().startswith("y")

    def text(self, message: str) -> str | None:
        answer = self._read(f"{message}: ")
        return answer or None

    @staticmethod
    def _read(prompt: str) -> str | None:
        try:
            return input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None


class ScriptedPrompter(Prompter):
    """Prompter that replays pre-recorded answers.

    Used for scripting and tests. Every call consumes the next answer; running
    out of answers behaves like a cancel.

    :param answers: Answers in the order they will be asked for. ``choose``
        takes an int index, ``confirm`` a bool and ``text`` a str.
    """

    def __init__(self, answers: Iterable[int | bool | str | None] = ()) -> None:
        self._answers = list(answers)
        self.asked: list[str] = []

    def choose(self, message: str, options: Sequence[str]) -> int | None:
        self.asked.append(message)
        answer = self._next()
        if answer is None:
            return None
        return int(answer)

    def confirm(self, message: str, default: bool = False) -> bool:
        self.asked.append(message)
        answer = self._next()
        return default if answer is None else bool(answer)

    def text(self, message: str) -> str | None:
        self.asked.append(message)
        answer = self._next()
        return None if answer is None else str(answer)

    def _next(self) -> int | bool | str | None:
        if not self._answers:
            return None
        return self._answers.pop(0)
