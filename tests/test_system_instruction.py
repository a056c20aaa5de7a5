from api.features.examples.dtos import ExampleDTO
from rag.prompts.few_shot.system_instruction import build_system_instruction

EXPECTED_WITHOUT_EXAMPLES = (
    "You are a helpful AI assistant that learns from feedback. \n"
    "Current Reinforcement Learning State:\n"
    "We have identified that users prefer responses that are concise, accurate, and empathetic.\n"
    "\n"
    "\n"
    "Always strive to improve based on these patterns."
)


def test_examples_section_absent_without_examples():
    instruction = build_system_instruction(examples=[])

    assert instruction == EXPECTED_WITHOUT_EXAMPLES
    assert "HIGHLY RATED" not in instruction
    assert "User:" not in instruction


def test_examples_rendered_verbatim_with_delimiter():
    examples = [
        ExampleDTO(prompt="Hi", response="Hello!"),
        ExampleDTO(prompt="How are you?", response="Great, thanks.\nAnd you?"),
    ]

    instruction = build_system_instruction(examples=examples)

    assert instruction == (
        "You are a helpful AI assistant that learns from feedback. \n"
        "Current Reinforcement Learning State:\n"
        "We have identified that users prefer responses that are concise, accurate, and empathetic.\n"
        "\n"
        "Here are some examples of responses that were HIGHLY RATED by the user in the past. "
        "Try to emulate this style:\n"
        "User: Hi\nAssistant: Hello!\n"
        "---\n"
        "User: How are you?\nAssistant: Great, thanks.\nAnd you?\n"
        "\n"
        "Always strive to improve based on these patterns."
    )


def test_example_order_is_preserved():
    examples = [ExampleDTO(prompt=f"q{i}", response=f"a{i}") for i in range(3)]

    instruction = build_system_instruction(examples=examples)

    assert instruction.index("User: q0") < instruction.index("User: q1") < instruction.index("User: q2")
