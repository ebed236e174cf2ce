"""Leftover-text handling after field extraction."""

from dataclasses import dataclass, field


def normalize_remainder(text: str) -> str:
    """Trim every line, drop blank lines, rejoin with single newlines.

    Idempotent: normalizing the output again returns it unchanged.
    """
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


@dataclass(frozen=True)
class Excision:
    """A removed value and where it sat in the buffer at removal time."""

    value: str
    offset: int


@dataclass
class RemainderBuffer:
    """Working copy of OCR text that extracted values are cut out of.

    Each removal deletes only the first literal occurrence of the value in
    the buffer as it stands at that moment. Later occurrences of the same
    text are left alone, and a value no longer present (e.g. because an
    earlier removal consumed it) is a no-op.
    """

    text: str
    excisions: list[Excision] = field(default_factory=list)

    def remove_first(self, value: str) -> int | None:
        """Remove the first occurrence of ``value``; return its offset or None."""
        if not value:
            return None
        offset = self.text.find(value)
        if offset < 0:
            return None
        self.text = self.text[:offset] + self.text[offset + len(value) :]
        self.excisions.append(Excision(value=value, offset=offset))
        return offset

    def normalized(self) -> str:
        return normalize_remainder(self.text)
