"""Line writer that assembles G-code blocks and comments."""

import unicodedata
from typing import List


class BlockWriter:
    """
    Collect output lines for one post-processing run.

    Blocks are built from word tokens; empty tokens (modal words that did
    not change) are dropped. When sequence numbers are enabled each block
    is prefixed with ``N<number>``, starting at ``sequence_start`` and
    growing by ``sequence_increment``. Comments are never numbered.

    Args:
        separate_words: Join words with a space instead of nothing
        sequence_numbers: Prefix blocks with N numbers
        sequence_start: First N number
        sequence_increment: Step between N numbers
    """

    def __init__(
        self,
        separate_words: bool = True,
        sequence_numbers: bool = False,
        sequence_start: int = 10,
        sequence_increment: int = 1,
    ) -> None:
        if sequence_increment < 1:
            raise ValueError(f"sequence_increment must be >= 1, got {sequence_increment}")

        self.separate_words = separate_words
        self.sequence_numbers = sequence_numbers
        self.sequence_increment = sequence_increment
        self._next_sequence = sequence_start
        self._lines: List[str] = []

    @property
    def separator(self) -> str:
        return " " if self.separate_words else ""

    def write_block(self, *words: str) -> bool:
        """
        Write one block made of the non-empty ``words``.

        Returns:
            True if a line was written, False if every word was empty
        """
        tokens = [w for w in words if w]
        if not tokens:
            return False

        if self.sequence_numbers:
            tokens.insert(0, f"N{self._next_sequence}")
            self._next_sequence += self.sequence_increment

        self._lines.append(self.separator.join(tokens))
        return True

    def write_comment(self, text: str) -> None:
        """Write ``(text)`` on one line. See ``_clean`` for what is removed."""
        self._lines.append(f"({_clean(text)})")

    def write_message(self, text: str) -> None:
        """Write an operator message shown by the controller: ``(MSG, text)``."""
        self._lines.append(f"(MSG, {_clean(text)})")

    def write_line(self, line: str) -> None:
        """Write ``line`` verbatim."""
        self._lines.append(line)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def getvalue(self) -> str:
        """Return all lines as program text with a trailing newline."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

    def __len__(self) -> int:
        return len(self._lines)


def _clean(text: str) -> str:
    """Make ``text`` safe inside a one-line ASCII comment.

    Accents are stripped, other non-ASCII characters are dropped, control
    characters (line breaks included) become spaces and parentheses are
    removed.
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = "".join(" " if ord(c) < 32 or ord(c) == 127 else c for c in text)
    text = text.replace("(", "").replace(")", "")
    return " ".join(text.split())
