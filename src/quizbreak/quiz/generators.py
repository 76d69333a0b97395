"""Question generators for the math and phonetics quizzes."""

import random

from quizbreak.config import constants
from quizbreak.quiz.catalog import PhoneticsCatalog
from quizbreak.quiz.models import Choice, Question, QuizConfig


def generate_choices(
    target: int,
    low: int,
    high: int,
    rng: random.Random,
    count: int = constants.MATH_CHOICE_COUNT,
) -> list[int]:
    """Return `count` distinct numbers including `target`, shuffled.

    Distractors are drawn uniformly from [low, high]. When the range cannot
    supply enough distinct values, fewer choices are returned.
    """
    pool_size = len(set(range(low, high + 1)) | {target})
    count = min(count, pool_size)

    choices = {target}
    while len(choices) < count:
        choices.add(rng.randint(low, high))

    result = sorted(choices)
    rng.shuffle(result)
    return result


def math_item_id(difficulty: int) -> str:
    return f"math-diff-{difficulty}"


def generate_math_question(difficulty: int, rng: random.Random) -> Question:
    """Generate a math question for the given difficulty level (1-3).

    Level 1 asks to find a single digit, level 2 adds two numbers from 1-5 and
    level 3 multiplies two numbers from 1-5.
    """
    if difficulty <= 1:
        answer = rng.randint(0, 9)
        values = generate_choices(answer, 0, 9, rng)
        prompt = f"Find the number {answer}"
        audio_cue = prompt
    elif difficulty == 2:
        a, b = rng.randint(1, 5), rng.randint(1, 5)
        answer = a + b
        values = generate_choices(answer, 2, 10, rng)
        prompt = f"{a} + {b} = ?"
        audio_cue = f"What is {a} plus {b}?"
    else:
        a, b = rng.randint(1, 5), rng.randint(1, 5)
        answer = a * b
        values = generate_choices(answer, 1, 25, rng)
        prompt = f"{a} × {b} = ?"
        audio_cue = f"What is {a} times {b}?"

    return Question(
        item_id=math_item_id(min(max(difficulty, 1), 3)),
        prompt=prompt,
        audio_cue=audio_cue,
        choices=tuple(Choice(key=str(value), label=str(value)) for value in values),
        answer_key=str(answer),
    )


def generate_phonetics_question(
    catalog: PhoneticsCatalog, options_count: int, rng: random.Random
) -> Question | None:
    """Generate a "find the sound" question.

    Returns:
        The question, or None if the catalog is empty.
    """
    target = catalog.random_item(rng)
    if target is None:
        return None

    items = catalog.choices_for(target, options_count, rng)
    return Question(
        item_id=target.id,
        prompt="Find the sound",
        audio_cue=target.audio_cue,
        choices=tuple(
            Choice(key=item.id, label=item.symbol, color_hint=item.color_hint)
            for item in items
        ),
        answer_key=target.id,
    )


def generate_question(
    config: QuizConfig, catalog: PhoneticsCatalog, rng: random.Random
) -> Question | None:
    if config.quiz_type == "math":
        return generate_math_question(config.level, rng)
    return generate_phonetics_question(catalog, config.level, rng)
