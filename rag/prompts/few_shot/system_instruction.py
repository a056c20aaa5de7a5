"""System instruction builder for feedback-guided replies.

The persona block is fixed. Highly rated exchanges are appended verbatim as
``User: ...`` / ``Assistant: ...`` pairs; with no examples that whole section
is left out rather than rendered empty.
"""
from __future__ import annotations

from typing import Iterable, Protocol

EXAMPLE_DELIMITER = "\n---\n"


class ExampleLike(Protocol):
    prompt: str
    response: str


def format_example(example: ExampleLike) -> str:
    return f"User: {example.prompt}\nAssistant: {example.response}"


def build_system_instruction(*, examples: Iterable[ExampleLike]) -> str:
    rendered = [format_example(ex) for ex in examples]
    examples_block = ""
    if rendered:
        examples_block = (
            "\nHere are some examples of responses that were HIGHLY RATED by the "
            "user in the past. Try to emulate this style:\n"
            + EXAMPLE_DELIMITER.join(rendered)
        )
    return (
        "You are a helpful AI assistant that learns from feedback. \n"
        "Current Reinforcement Learning State:\n"
        "We have identified that users prefer responses that are concise, "
        "accurate, and empathetic.\n"
        f"{examples_block}\n"
        "\n"
        "Always strive to improve based on these patterns."
    )
