from __future__ import annotations

from typing import Callable, Optional, Sequence


class ConsolePrompter:
    """Line-based prompter reading from stdin.

    `select` accepts comma separated indices, `all`, or an empty line for none.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        self._input = input_func
        self._output = output_func

    def ask(self, message: str, default: Optional[str] = None) -> str:
        suffix = f" ({default})" if default else ""
        answer = self._input(f"{message}{suffix} ").strip()
        return answer or (default or "")

    def select(self, message: str, choices: Sequence[str]) -> list[int]:
        while True:
            self._output(message)
            for i, choice in enumerate(choices):
                self._output(f"  [{i}] {choice}")
            answer = self._input("Indices (comma separated, 'all', empty for none): ")
            try:
                return self._parse_selection(answer, len(choices))
            except ValueError as e:
                self._output(str(e))

    @staticmethod
    def _parse_selection(answer: str, count: int) -> list[int]:
        answer = answer.strip().lower()
        if not answer:
            return []
        if answer == "all":
            return list(range(count))
        selected: list[int] = []
        for part in answer.split(","):
            part = part.strip()
            if not part.isdigit() or int(part) >= count:
                raise ValueError(f"Invalid selection: {part!r}")
            if int(part) not in selected:
                selected.append(int(part))
        return selected
