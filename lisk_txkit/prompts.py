"""Interactive prompting for asset fields and passphrases."""

from __future__ import annotations

import getpass
import logging
from dataclasses import dataclass
from typing import Any, Callable

from .schema import FieldKind, FieldSpec, SchemaDescriptor
from .transform import transform_asset

logger = logging.getLogger(__name__)

INPUT = "input"
CONFIRM = "confirm"
ASK_AGAIN = "askAgain"


class PromptError(ValueError):
    """Raised when interactive input cannot be accepted."""


@dataclass(frozen=True)
class Question:
    type: str
    name: str
    message: str


Ask = Callable[[Question], Any]


def _group_label(spec: FieldSpec) -> str:
    schema = spec.items.schema if spec.is_repeated_group else spec.schema
    assert schema is not None
    return f"{spec.name}({', '.join(schema.field_names)})"


def _field_question(spec: FieldSpec) -> Question:
    if spec.is_repeated_group or spec.kind is FieldKind.OBJECT:
        label = _group_label(spec)
    elif spec.kind is FieldKind.ARRAY:
        label = f"{spec.name}(comma separated values (a,b))"
    else:
        label = spec.name
    return Question(type=INPUT, name=spec.name, message=f"Please enter: {label}: ")


def _again_question(spec: FieldSpec) -> Question:
    return Question(
        type=CONFIRM, name=ASK_AGAIN, message=f"Want to enter another {_group_label(spec)}"
    )


def prepare_questions(schema: SchemaDescriptor) -> list[Question]:
    """Return the prompts for ``schema`` in field order.

    A repeated group contributes its input question followed by one
    ``askAgain`` confirmation.
    """

    questions: list[Question] = []
    for spec in schema.fields:
        questions.append(_field_question(spec))
        if spec.is_repeated_group:
            questions.append(_again_question(spec))
    return questions


def console_ask(question: Question) -> Any:
    try:
        if question.type == CONFIRM:
            return input(f"{question.message} [y/N]: ").strip().lower().startswith("y")
        return input(question.message)
    except EOFError as exc:
        raise PromptError(f"Input ended before '{question.name}' was answered") from exc


def prompt_asset(schema: SchemaDescriptor, ask: Ask = console_ask) -> dict[str, Any]:
    """Ask for every field of ``schema`` one at a time and transform the answers.

    Repeated groups are re-asked until the ``askAgain`` confirmation is
    declined; each accepted pass appends one item.
    """

    answers: dict[str, Any] = {}
    for spec in schema.fields:
        question = _field_question(spec)
        if not spec.is_repeated_group:
            answers[spec.name] = ask(question)
            continue
        again = _again_question(spec)
        entries: list[str] = []
        while True:
            entries.append(ask(question))
            if not ask(again):
                break
        logger.debug("Collected %d entries for %s", len(entries), spec.name)
        answers[spec.name] = entries
    return transform_asset(schema, answers)


def prompt_passphrase(
    read_secret: Callable[[str], str] = getpass.getpass, *, confirm: bool = True
) -> str:
    """Read a passphrase without echo, asking twice when ``confirm`` is set."""

    passphrase = read_secret("Please enter passphrase: ")
    if not passphrase:
        raise PromptError("Passphrase must not be empty")
    if confirm and read_secret("Please re-enter passphrase: ") != passphrase:
        raise PromptError("Passphrase was not successfully repeated")
    return passphrase
