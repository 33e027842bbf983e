"""A four-character alphanumeric captcha code."""

from __future__ import annotations

import random
import string

from fluentkit.text_style import Font, default_family

__all__ = ["Captcha"]

_WEIGHT_BOLD = 700


class Captcha:
    """Generates a random code and checks answers against it."""

    WIDTH = 180
    HEIGHT = 80
    CODE_LENGTH = 4

    def __init__(self, ignore_case: bool = False, rng: random.Random | None = None) -> None:
        self.ignore_case = ignore_case
        self.font = Font(default_family(), 28, _WEIGHT_BOLD)
        self._rng = rng if rng is not None else random.Random()
        self._code = ""
        self.refresh()

    @property
    def code(self) -> str:
        return self._code

    def refresh(self) -> None:
        """Draw a new code of digits, capitals and small letters."""
        chars = []
        for _ in range(self.CODE_LENGTH):
            kind = self._rng.randrange(3)
            if kind == 0:
                chars.append(str(self._rng.randrange(10)))
            elif kind == 1:
                chars.append(string.ascii_uppercase[self._rng.randrange(26)])
            else:
                chars.append(string.ascii_lowercase[self._rng.randrange(26)])
        self._code = "".join(chars)

    def verify(self, code: str) -> bool:
        """Return True if ``code`` matches the current code."""
        if self.ignore_case:
            return self._code.upper() == code.upper()
        return self._code == code