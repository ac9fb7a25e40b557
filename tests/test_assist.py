import csv
import os

import pytest

import assist
from wordle_helper import Session, SessionStatus, letter_occurrences

WORDS = ["rhino", "inset", "admin", "panic", "magic"]
SCENARIO = ["rhino:NNWWN", "inset:WWNNN", "admin:WNNCW", "panic:CCCCC"]


@pytest.fixture
def dictionary(tmp_path):
    path = tmp_path / "words"
    path.write_text("\n".join(["Rhino", "inset", "admin", "panic", "magic"]) + "\n", encoding="utf-8")
    return str(path)


def _feed_input(monkeypatch, lines):
    it = iter(lines)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


# ----------------------------
# Dictionary
# ----------------------------
def test_wordle_dictionary_filters_and_normalizes(tmp_path):
    path = tmp_path / "words"
    path.write_text("Rhino\nmilan\npanic\npanic\nab\nrhinos\nrh-no\nAdmin\n\n", encoding="utf-8")
    assert assist.wordle_dictionary(str(path)) == ["rhino", "panic", "admin"]
    assert assist.wordle_dictionary(str(path), exclusions=[]) == ["rhino", "milan", "panic", "admin"]


def test_wordle_dictionary_missing_file(tmp_path, capsys):
    with pytest.raises(FileNotFoundError):
        assist.wordle_dictionary(str(tmp_path / "nope"))
    assert "Could not find" in capsys.readouterr().out


def test_wordle_dictionary_without_five_letter_words(tmp_path):
    path = tmp_path / "words"
    path.write_text("ab\nabcdef\n", encoding="utf-8")
    with pytest.raises(ValueError):
        assist.wordle_dictionary(str(path))


# ----------------------------
# Display
# ----------------------------
def test_prettylist():
    assert assist.prettylist([]) == ""
    assert assist.prettylist(["panic"]) == "panic"
    assert assist.prettylist(["admin", "panic"]) == "admin and panic"
    assert assist.prettylist(["inset", "admin", "panic"]) == "inset, admin, and panic"


def test_letter_barplot():
    chart = assist.letter_barplot(letter_occurrences(["sense"]), n=3, width=10)
    assert chart.splitlines() == [
        "e |########## 2",
        "s |########## 2",
        "n |##### 1",
    ]


def test_show_state(capsys):
    session = Session(WORDS)
    session.rank()
    assist.show_state(session, top_n=3, verbose=True)
    out = capsys.readouterr().out
    assert "# Iteration 0:" in out
    assert "top 3 word list (out of 5 total)" in out
    assert "placed:   _____" in out


def test_show_state_without_candidates(capsys):
    assist.show_state(Session([]))
    assert "no words left" in capsys.readouterr().out


# ----------------------------
# Replay driver
# ----------------------------
def test_parse_replay():
    assert assist.parse_replay(["rhino:NNWWN", "panic"]) == [("rhino", "NNWWN"), ("panic", None)]
    for bad in ["rhino:", "rhino:NNWWN:x"]:
        with pytest.raises(ValueError):
            assist.parse_replay([bad])


def test_run_replay_scenario(capsys):
    session = Session(WORDS)
    status = assist.run_replay(session, assist.parse_replay(SCENARIO))
    out = capsys.readouterr().out
    assert status is SessionStatus.SOLVED
    assert "# Iteration 4:" in out
    assert "Solved!" in out
    assert session.candidates == ["panic"]


def test_run_replay_scores_against_answer():
    session = Session(WORDS)
    pairs = assist.parse_replay(["rhino", "inset", "admin", "panic"])
    assert assist.run_replay(session, pairs, answer="panic") is SessionStatus.SOLVED
    assert [r.response for r in session.history] == ["NNWWN", "WWNNN", "WNNCW", "CCCCC"]


def test_run_replay_needs_response_or_answer():
    with pytest.raises(ValueError):
        assist.run_replay(Session(WORDS), [("rhino", None)])


def test_run_replay_stops_when_exhausted(capsys):
    session = Session(["panic"])
    status = assist.run_replay(session, [("magic", "CNNNN"), ("rhino", "NNNNN")])
    assert status is SessionStatus.EXHAUSTED
    assert len(session.history) == 1
    assert "No candidates remain" in capsys.readouterr().out


# ----------------------------
# Interactive driver
# ----------------------------
def test_manual_assist_reprompts_on_bad_input(monkeypatch, capsys):
    _feed_input(monkeypatch, ["rhino", "rhino NNXWN", "rhino NNWWN", "q"])
    session = Session(WORDS)
    status = assist.mode_manual_assist(session)
    out = capsys.readouterr().out
    assert status is SessionStatus.OPEN
    assert "Format: guess response" in out
    assert "Invalid input:" in out
    assert session.attempt_count == 1


def test_manual_assist_until_solved(monkeypatch, capsys):
    _feed_input(monkeypatch, [s.replace(":", " ") for s in SCENARIO])
    status = assist.mode_manual_assist(Session(WORDS))
    assert status is SessionStatus.SOLVED
    assert "Solved!" in capsys.readouterr().out


def test_manual_assist_warns_after_max_guesses(monkeypatch, capsys):
    _feed_input(monkeypatch, ["rhino NNWWN", "q"])
    assist.mode_manual_assist(Session(WORDS), max_guesses=1)
    assert "Reached max guesses" in capsys.readouterr().out


# ----------------------------
# Session logs and CLI
# ----------------------------
def test_write_session_log_numbers_files(tmp_path):
    session = Session(WORDS)
    assist.run_replay(session, assist.parse_replay(SCENARIO))
    log_dir = str(tmp_path / "logs")

    first = assist.write_session_log(session, log_dir)
    second = assist.write_session_log(session, log_dir)
    assert os.path.basename(first) == "session_0.csv"
    assert os.path.basename(second) == "session_1.csv"

    with open(first, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["guess"] for r in rows] == ["rhino", "inset", "admin", "panic"]
    assert [int(r["remaining"]) for r in rows] == [3, 2, 1, 1]
    assert rows[-1]["response"] == "CCCCC"
    assert rows[-1]["status"] == "solved"


def test_main_replay_writes_log(dictionary, tmp_path, capsys):
    log_dir = tmp_path / "logs"
    status = assist.main(["--dictionary", dictionary, "--replay", *SCENARIO, "--log-dir", str(log_dir)])
    assert status is SessionStatus.SOLVED
    assert (log_dir / "session_0.csv").exists()
    assert "Session log saved to" in capsys.readouterr().out


def test_main_rejects_bad_replay(dictionary):
    with pytest.raises(SystemExit) as exc:
        assist.main(["--dictionary", dictionary, "--replay", "rhino:NNQWN"])
    assert exc.value.code == 2
