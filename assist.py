import argparse
import csv
import os

from wordle_helper import (
    ALPHABET,
    MalformedWord,
    Session,
    SessionStatus,
    WordleHelperError,
    response_for,
    validate_word,
)

DEFAULT_DICTIONARY = "/usr/share/dict/words"
# proper nouns that slip through a lowercased system dictionary
DEFAULT_EXCLUSIONS = ["milan"]
BAR_WIDTH = 40


def wordle_dictionary(path=DEFAULT_DICTIONARY, exclusions=DEFAULT_EXCLUSIONS):
    """
    All Wordle words have no special characters and are five letters long.

    The list is normalized to lowercase and keeps the order of the file.
    """
    excluded = {w.strip().lower() for w in exclusions}
    words = []
    seen = set()
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                try:
                    w = validate_word(line)
                except MalformedWord:
                    continue
                if w in excluded or w in seen:
                    continue
                seen.add(w)
                words.append(w)
    except FileNotFoundError:
        print(f"Could not find {path}")
        raise
    if not words:
        raise ValueError(f"No words loaded from {path}")
    return words


# ----------------------------
# Display
# ----------------------------
def prettylist(words):
    if len(words) <= 1:
        return "".join(words)
    if len(words) == 2:
        return f"{words[0]} and {words[1]}"
    return ", ".join(words[:-1]) + ", and " + words[-1]


def letter_barplot(counts, n=5, width=BAR_WIDTH):
    order = sorted(range(len(ALPHABET)), key=lambda i: -counts[i])[:n]
    top = int(counts[order[0]]) if order else 0
    lines = []
    for i in order:
        c = int(counts[i])
        bar = "#" * (round(width * c / top) if top else 0)
        lines.append(f"{ALPHABET[i]} |{bar} {c}")
    return "\n".join(lines)


def show_state(session, top_n=5, verbose=False):
    print(f"# Iteration {session.attempt_count}:")
    if verbose:
        print(session.knowledge)

    cands = session.candidates
    if not cands:
        print("no words left")
        print()
        return

    print(letter_barplot(session.frequencies()))
    n = min(top_n, len(cands))
    print(f"top {n} word list (out of {len(cands)} total): {prettylist(session.top(n))}")
    print()


# ----------------------------
# Session logs
# ----------------------------
def next_log_path(log_dir):
    os.makedirs(log_dir, exist_ok=True)
    nums = []
    for fn in os.listdir(log_dir):
        if not (fn.startswith("session_") and fn.endswith(".csv")):
            continue
        core = fn[len("session_"):-len(".csv")]
        try:
            nums.append(int(core))
        except ValueError:
            continue
    next_num = max(nums) + 1 if nums else 0
    return os.path.join(log_dir, f"session_{next_num}.csv")


def write_session_log(session, log_dir):
    path = next_log_path(log_dir)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["attempt", "guess", "response", "remaining", "top", "status"])
        for r in session.history:
            writer.writerow([r.attempt, r.guess, r.response, r.remaining, r.top, r.status])
    return path


# ----------------------------
# Drivers
# ----------------------------
def parse_replay(items):
    """Turn `guess:response` (or bare `guess`) items into (guess, response) pairs."""
    pairs = []
    for item in items:
        parts = item.split(":")
        if len(parts) == 1:
            pairs.append((parts[0], None))
        elif len(parts) == 2 and parts[1]:
            pairs.append((parts[0], parts[1]))
        else:
            raise ValueError(f"Bad replay item {item!r}, expected guess:response")
    return pairs


def _report_end(status):
    if status is SessionStatus.SOLVED:
        print("Solved!")
    elif status is SessionStatus.EXHAUSTED:
        print("No candidates remain; something inconsistent.")


def run_replay(session, pairs, answer=None, top_n=5, verbose=False):
    session.rank()
    show_state(session, top_n, verbose)  # best starting words

    for guess, response in pairs:
        if response is None:
            if answer is None:
                raise ValueError(f"No response given for {guess} and no answer to score against")
            response = response_for(validate_word(answer), validate_word(guess))
        status = session.feedback(guess, response)
        show_state(session, top_n, verbose)
        if status in (SessionStatus.SOLVED, SessionStatus.EXHAUSTED):
            _report_end(status)
            break
    return session.status


def mode_manual_assist(session, max_guesses=6, top_n=5, verbose=False):
    session.rank()
    while True:
        show_state(session, top_n, verbose)

        if session.attempt_count >= max_guesses:
            print("Reached max guesses (Wordle would be lost)")

        line = input("Enter guess + response (N/W/C per letter) OR q: ").strip()
        if line.lower() == "q":
            return session.status
        parts = line.split()
        if len(parts) != 2:
            print("Format: guess response")
            continue
        guess, response = parts
        try:
            status = session.feedback(guess, response)
        except WordleHelperError as e:
            print(f"Invalid input: {e}")
            continue

        if status in (SessionStatus.SOLVED, SessionStatus.EXHAUSTED):
            show_state(session, top_n, verbose)
            _report_end(status)
            return status


def main(argv=None):
    parser = argparse.ArgumentParser(description="Narrow down and rank Wordle candidates from feedback.")
    parser.add_argument("--dictionary", default=DEFAULT_DICTIONARY)
    parser.add_argument("--exclude", nargs="*", default=DEFAULT_EXCLUSIONS)
    parser.add_argument("--top", type=int, default=5)
    parser.add_argument("--max-guesses", type=int, default=6)
    parser.add_argument("--replay", nargs="+", default=None, metavar="GUESS:RESPONSE")
    parser.add_argument("--answer", default=None, help="score bare replay guesses against this word")
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    words = wordle_dictionary(args.dictionary, args.exclude)
    session = Session(words)

    if args.replay:
        try:
            run_replay(session, parse_replay(args.replay), args.answer, args.top, args.verbose)
        except ValueError as e:
            parser.error(str(e))
    else:
        mode_manual_assist(session, args.max_guesses, args.top, args.verbose)

    if args.log_dir and session.history:
        path = write_session_log(session, args.log_dir)
        print(f"Session log saved to {path}")
    return session.status


if __name__ == "__main__":
    main()
