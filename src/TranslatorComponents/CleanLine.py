from dataclasses import dataclass


@dataclass
class CleanLine:
    """A source line with comments masked out and surrounding whitespace removed.

    `content` defaults to the stripped raw line; the trimmer passes the masked
    text when the line held a comment.
    """

    raw_line: str
    line_number: int
    content: str | None = None

    def __post_init__(self):
        if self.content is None:
            self.content = self.raw_line.strip()

    def __str__(self) -> str:
        return f"{self.line_number}: {self.content}"
