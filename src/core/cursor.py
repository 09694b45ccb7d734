"""
Line-tracking character scanner used by the time log parser.
"""


class Cursor:
    """
    Walks a string one character at a time.

    `char` is the current character ("" once `eof` is set) and `line` is
    the 1-based line number of the current character. The cursor never
    raises; the parser decides what a given position means.
    """

    def __init__(self, text: str, line: int = 1):
        self.text = text
        self.pos = 0
        self.line = line
        self.eof = not text
        self.char = text[0] if text else ""

    def next(self):
        """Consume the current character."""
        if self.eof:
            return
        if self.char == "\n":
            self.line += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.eof = True
            self.char = ""
        else:
            self.char = self.text[self.pos]

    def match(self, chars: str) -> bool:
        """Check whether the current character is one of `chars`."""
        return not self.eof and self.char in chars

    def eat(self, chars: str):
        """Consume a run of characters from `chars`."""
        while self.match(chars):
            self.next()

    def eat_until(self, chars: str):
        """Skip forward until a character from `chars` (not consumed)."""
        while not self.eof and self.char not in chars:
            self.next()

    def read_until(self, chars: str) -> str:
        """Collect characters until one from `chars` (not consumed)."""
        start = self.pos
        self.eat_until(chars)
        return self.text[start:self.pos]

    def read_match_limit(self, chars: str, limit: int) -> tuple[bool, str]:
        """
        Consume up to `limit` characters from `chars`.

        Returns whether at least one character was consumed, plus the
        consumed text.
        """
        start = self.pos
        count = 0
        while count < limit and self.match(chars):
            self.next()
            count += 1
        return count > 0, self.text[start:self.pos]
