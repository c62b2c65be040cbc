"""Practice layer: routes tool calls to the parser and the exercise session."""

from __future__ import annotations

import json
import logging
import shlex

from lilykeys.errors import LilyKeysError, StateError, ValidationError
from lilykeys.exercise.session import ExerciseSession
from lilykeys.model.score import VOICES, ParsedScore
from lilykeys.parser.document import load_document, parse_document
from lilykeys.serialization.serialize import serialize
from lilykeys.server.formatter import (
    format_metadata,
    format_note,
    format_notes,
    format_result,
    format_status,
)

logger = logging.getLogger(__name__)

_SESSION_HELP = "load PATH | source TEXT | reset | goto N | export PATH"
_QUERY_HELP = "status | notes upper | notes lower | metadata | score"


class PracticeLayer:
    """Holds the loaded score and its exercise session."""

    def __init__(self) -> None:
        self.score: ParsedScore | None = None
        self.session: ExerciseSession | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute_session(self, action: str) -> str:
        """Run a session action and return a formatted result."""
        parts = action.strip().split(None, 1)
        command = parts[0].lower() if parts else ""
        args = parts[1].strip() if len(parts) > 1 else ""
        try:
            if command == "load":
                return self._load(load_document(_single_arg(args, "load")), args)
            if command == "source":
                if not args:
                    raise ValidationError("source needs notation text")
                return self._load(parse_document(args), "inline source")
            if command == "reset":
                self._require_session().reset()
                return format_result(True, "exercise reset")
            if command == "goto":
                return self._goto(args)
            if command == "export":
                return self._export(_single_arg(args, "export"))
        except LilyKeysError as exc:
            return format_result(False, str(exc))
        return format_result(False, f"Unknown session action '{command}'", _SESSION_HELP)

    def execute_play(self, notes: list[int]) -> list[str]:
        """Check played MIDI note numbers in order, one result line each."""
        if self.session is None:
            return [format_result(False, "No score loaded", "piano_session 'load PATH'")]
        session = self.session
        results: list[str] = []
        for midi_number in notes:
            expected = (
                f"upper:{format_note(session.current_upper_note)} "
                f"lower:{format_note(session.current_lower_note)}"
            )
            if session.is_complete:
                results.append(format_result(False, f"{midi_number} ignored, exercise complete"))
            elif session.check_note(midi_number):
                results.append(format_result(True, f"{midi_number} matched"))
            else:
                results.append(format_result(False, f"{midi_number} wrong, expected {expected}"))
        results.append(format_status(session))
        return results

    def execute_query(self, q: str) -> str:
        """Run a read-only query and return formatted output."""
        if self.score is None or self.session is None:
            return format_result(False, "No score loaded", "piano_session 'load PATH'")
        command, _, args = q.strip().partition(" ")
        command = command.lower()
        if command == "status":
            return format_status(self.session)
        if command == "notes":
            name = args.strip().lower() or "upper"
            try:
                return format_notes(name, self.score.voice(name))
            except ValidationError as exc:
                return format_result(False, str(exc))
        if command == "metadata":
            return format_metadata(self.score.metadata)
        if command == "score":
            return json.dumps(self.score.to_dict(), ensure_ascii=False)
        return format_result(False, f"Unknown query '{command}'", _QUERY_HELP)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _load(self, score: ParsedScore, origin: str) -> str:
        self.score = score
        self.session = ExerciseSession.from_score(score)
        counts = ", ".join(f"{len(score.voice(name))} {name}" for name in VOICES)
        logger.info("Loaded %s (%s)", origin, counts)
        return format_result(
            True, f"loaded {format_metadata(score.metadata)}: {counts} notes"
        )

    def _require_session(self) -> ExerciseSession:
        if self.session is None:
            raise StateError("No score loaded")
        return self.session

    def _goto(self, args: str) -> str:
        session = self._require_session()
        try:
            position = int(args)
        except ValueError:
            raise ValidationError(f"goto needs a note number, got '{args}'") from None
        if not session.go_to_note(position - 1):
            raise ValidationError(
                f"Note {position} out of range (1-{session.total_notes})"
            )
        return format_result(True, f"at note {position}")

    def _export(self, path: str) -> str:
        if self.score is None:
            raise StateError("No score loaded")
        serialize(self.score, path)
        return format_result(True, f"exported to {path}")


def _single_arg(args: str, command: str) -> str:
    try:
        parts = shlex.split(args)
    except ValueError as exc:
        raise ValidationError(f"{command}: {exc}") from None
    if len(parts) != 1:
        raise ValidationError(f"{command} needs exactly one path")
    return parts[0]
