import re
import string
from dataclasses import dataclass
from enum import Enum

import numpy as np

WORD_LENGTH = 5
ALPHABET = string.ascii_lowercase

_WORD_RE = re.compile(r"^[a-z]{5}$")


# ----------------------------
# Errors
# ----------------------------
class WordleHelperError(ValueError):
    pass


class MalformedWord(WordleHelperError):
    def __init__(self, word):
        self.word = word
        super().__init__(f"{word!r} is not a {WORD_LENGTH}-letter alphabetic word")


class InvalidResponse(WordleHelperError):
    def __init__(self, response, char=None, position=None):
        self.response = response
        self.char = char
        self.position = position
        if char is None:
            msg = f"invalid response {response!r}: expected {WORD_LENGTH} codes"
        else:
            msg = f"invalid response {response!r} (code {char!r} at position {position})"
        super().__init__(msg)


# ----------------------------
# Words and responses
# ----------------------------
class Feedback(Enum):
    ABSENT = "N"
    WRONG_POSITION = "W"
    CORRECT = "C"


# N/W/C letters, or 0/1/2 pattern digits
_CODES = {
    "N": Feedback.ABSENT,
    "W": Feedback.WRONG_POSITION,
    "C": Feedback.CORRECT,
    "0": Feedback.ABSENT,
    "1": Feedback.WRONG_POSITION,
    "2": Feedback.CORRECT,
}


def validate_word(word):
    w = word.strip().lower()
    if not _WORD_RE.match(w):
        raise MalformedWord(word)
    return w


def parse_response(response):
    """
    Decode a response into a tuple of Feedback values.

    Strings are case-insensitive; a sequence of Feedback members is also accepted.
    """
    if len(response) != WORD_LENGTH:
        raise InvalidResponse(response)
    codes = []
    for i, r in enumerate(response):
        if isinstance(r, Feedback):
            codes.append(r)
            continue
        code = _CODES.get(str(r).upper())
        if code is None:
            raise InvalidResponse(response, r, i)
        codes.append(code)
    return tuple(codes)


def format_response(codes):
    return "".join(c.value for c in codes)


def response_for(answer, guess):
    """Feedback the game gives for `guess` when the hidden word is `answer`, as N/W/C."""
    n = len(answer)
    result = [Feedback.ABSENT] * n
    answer_chars = list(answer)
    guess_chars = list(guess)
    for i in range(n):
        if guess_chars[i] == answer_chars[i]:
            result[i] = Feedback.CORRECT
            answer_chars[i] = None
            guess_chars[i] = None
    for i in range(n):
        if guess_chars[i] is not None:
            ch = guess_chars[i]
            if ch in answer_chars:
                result[i] = Feedback.WRONG_POSITION
                answer_chars[answer_chars.index(ch)] = None
    return format_response(result)


# ----------------------------
# Letter frequencies
# ----------------------------
def letter_occurrences(words):
    """Count of each letter a-z over every position of every word."""
    o = np.zeros(len(ALPHABET), dtype=np.int64)
    for w in words:
        for ch in w:
            o[ord(ch) - ord("a")] += 1
    return o


def normalized_frequencies(words):
    counts = letter_occurrences(words)
    top = counts.max()
    if top == 0:
        return np.zeros(len(ALPHABET), dtype=np.float64)
    return counts / top


# ----------------------------
# Knowledge
# ----------------------------
class Knowledge:
    """
    What has been learned about the hidden word so far.

    present_constraints maps a letter known to be in the word (but not yet
    placed) to one flag per position; False means the letter was shown to be
    in the wrong spot there.
    """

    def __init__(self):
        self.attempt_count = 0
        self.absent_letters = set()
        self.present_constraints = {}
        self.placed_letters = [None] * WORD_LENGTH

    @property
    def is_solved(self):
        return all(p is not None for p in self.placed_letters)

    @property
    def known_letters(self):
        placed = {p for p in self.placed_letters if p is not None}
        return placed | set(self.present_constraints)

    def __str__(self):
        pattern = "".join(p or "_" for p in self.placed_letters)
        present = ", ".join(
            f"{letter} (not {' '.join(str(i + 1) for i, ok in enumerate(flags) if not ok)})"
            for letter, flags in sorted(self.present_constraints.items())
        )
        absent = "".join(sorted(self.absent_letters))
        known = "".join(sorted(self.known_letters))
        return (
            f"attempts: {self.attempt_count}\n"
            f"placed:   {pattern}\n"
            f"present:  {present or '-'}\n"
            f"known:    {known or '-'}\n"
            f"absent:   {absent or '-'}"
        )


def apply_feedback(knowledge, guess, response):
    """
    Update `knowledge` after `guess` received `response`.

    Everything is validated before the first mutation, so a bad guess or
    response leaves `knowledge` untouched.
    """
    guess = validate_word(guess)
    codes = parse_response(response)

    knowledge.attempt_count += 1
    for i, (g, r) in enumerate(zip(guess, codes)):
        if r is Feedback.ABSENT:
            knowledge.absent_letters.add(g)
        elif r is Feedback.WRONG_POSITION:
            flags = knowledge.present_constraints.get(g, (True,) * WORD_LENGTH)
            knowledge.present_constraints[g] = tuple(
                ok and j != i for j, ok in enumerate(flags)
            )
        else:
            knowledge.placed_letters[i] = g
            # placement supersedes what we knew about where it was not;
            # a doubled letter loses its other present info here
            knowledge.present_constraints.pop(g, None)
    return knowledge


# ----------------------------
# Filtering
# ----------------------------
def is_possible(word, knowledge):
    if knowledge.absent_letters.intersection(word):
        return False

    for known, letter in zip(knowledge.placed_letters, word):
        if known is not None and known != letter:
            return False

    for present_letter, in_places in knowledge.present_constraints.items():
        if present_letter not in word:
            return False
        for i, letter in enumerate(word):
            if letter == present_letter and not in_places[i]:
                return False

    return True


def filter_candidates(words, knowledge):
    """Drop impossible words from `words` in place. Returns how many were removed."""
    before = len(words)
    words[:] = [w for w in words if is_possible(w, knowledge)]
    return before - len(words)


# ----------------------------
# Ranking
# ----------------------------
def information_gained_heuristic(words, knowledge):
    """
    Score function favouring words whose distinct letters are common in `words`.

    Frequencies come from the current candidates so the scoring follows the
    shrinking search space. `knowledge` is not consulted yet.
    """
    normfreq = normalized_frequencies(words)

    def score(word):
        letters = sorted({ord(ch) - ord("a") for ch in word})
        return float(np.linalg.norm(normfreq[letters]))

    return score


def rank_candidates(words, knowledge):
    words.sort(key=information_gained_heuristic(words, knowledge), reverse=True)
    return words


# ----------------------------
# Session
# ----------------------------
class SessionStatus(Enum):
    OPEN = "open"
    NARROWED = "narrowed"
    SOLVED = "solved"
    EXHAUSTED = "exhausted"


@dataclass
class Round:
    attempt: int
    guess: str
    response: str
    remaining: int
    top: str
    status: str


class Session:
    """Candidate list and knowledge for one game. Words are validated on the way in."""

    def __init__(self, words):
        self.candidates = [validate_word(w) for w in words]
        self.knowledge = Knowledge()
        self.history = []

    @property
    def attempt_count(self):
        return self.knowledge.attempt_count

    @property
    def status(self):
        if self.knowledge.is_solved:
            return SessionStatus.SOLVED
        if not self.candidates:
            return SessionStatus.EXHAUSTED
        if len(self.candidates) == 1:
            return SessionStatus.NARROWED
        return SessionStatus.OPEN

    def rank(self):
        return rank_candidates(self.candidates, self.knowledge)

    def feedback(self, guess, response):
        apply_feedback(self.knowledge, guess, response)
        filter_candidates(self.candidates, self.knowledge)
        self.rank()
        self.history.append(Round(
            attempt=self.knowledge.attempt_count,
            guess=validate_word(guess),
            response=format_response(parse_response(response)),
            remaining=len(self.candidates),
            top=self.candidates[0] if self.candidates else "",
            status=self.status.value,
        ))
        return self.status

    def top(self, n=5):
        return self.candidates[:n]

    def frequencies(self):
        return letter_occurrences(self.candidates)
