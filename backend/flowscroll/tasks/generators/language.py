"""
Language and geography generators.

All multiple-choice tasks share one contract: `options` is shuffled,
contains the correct answer exactly once, and `correct_index` points to it.
When a tier filter leaves nothing to draw from, the full pool is used.
"""

import logging
import random

from flowscroll.content.geography import COUNTRIES, COUNTRY_SHAPES, flag_emoji
from flowscroll.content.words import (
    CATEGORIES,
    FALLBACK_RHYMES,
    FALLBACK_SENTENCES,
    FALLBACK_SYNONYMS,
    get_relation_index,
)
from flowscroll.tasks.models import GeneratedContent, TaskType

logger = logging.getLogger(__name__)

GEO_DISTRACTORS = 3


def _shuffled(options: list[str], answer: str, rng: random.Random) -> tuple[list[str], int]:
    rng.shuffle(options)
    return options, options.index(answer)


def _odd_one_out(level: float, rng: random.Random) -> GeneratedContent:
    tier = 1
    if level > 3:
        tier = 2
    if level > 7:
        tier = 3

    eligible = [name for name, category in CATEGORIES.items() if category.tier == tier]
    if not eligible:
        logger.warning(f"No odd-one-out categories at tier {tier}, using all")
        eligible = list(CATEGORIES)
    base_name = rng.choice(eligible)
    base_words = CATEGORIES[base_name].words

    num_options = 3 if level <= 2 else 4
    chosen = rng.sample(base_words, num_options - 1)

    # Some words belong to several categories (Orange, Gold), so the chosen
    # words can fit more than one theme; the odd word must fit none of them.
    covering = [c.words for c in CATEGORIES.values() if all(w in c.words for w in chosen)]
    odd_pool = {
        name: [w for w in category.words if not any(w in theme for theme in covering)]
        for name, category in CATEGORIES.items()
        if name != base_name
    }
    odd_names = [name for name, pool in odd_pool.items() if pool]
    odd_name = rng.choice(odd_names)
    odd_word = rng.choice(odd_pool[odd_name])

    options, odd_index = _shuffled([*chosen, odd_word], odd_word, rng)

    return GeneratedContent(
        question="Which one doesn't fit?",
        content={
            "options": options,
            "odd_index": odd_index,
            "correct_index": odd_index,
            "hint": f"One is {odd_name}, the others are {base_name}.",
        },
        solution=odd_index,
    )


def _connect(level: float, rng: random.Random) -> GeneratedContent:
    index = get_relation_index()

    mode = "antonym" if level <= 2 else rng.choice(("synonym", "antonym"))
    target_tier = 1
    if level > 3:
        target_tier = 2
    if level > 8:
        target_tier = 3

    of_mode = [r for r in index.relations if r.kind == mode]
    pool = [r for r in of_mode if abs(index.by_id[r.target_id].tier - target_tier) <= 1]
    if not pool:
        logger.warning(f"No {mode} relations near tier {target_tier}, using all")
        pool = of_mode

    relation = rng.choice(pool)
    target = index.by_id[relation.target_id]
    answer = index.by_id[relation.partner_id]

    # Other partners of the target would also be correct answers.
    excluded = {target.id, answer.id} | index.partners_of(target.id, mode)
    excluded |= {r.target_id for r in of_mode if r.partner_id == target.id}
    num_options = 4 if level > 4 else 3
    candidates = [w for w in index.words if w.id not in excluded and w.pos == target.pos]
    if len(candidates) < num_options - 1:
        candidates = [w for w in index.words if w.id not in excluded]

    distractors = [w.text for w in rng.sample(candidates, num_options - 1)]
    options, correct_index = _shuffled([answer.text, *distractors], answer.text, rng)

    return GeneratedContent(
        question="Connect the words",
        content={
            "mode": mode,
            "target": target.text,
            "options": options,
            "correct_index": correct_index,
            "answer": answer.text,
        },
        solution=correct_index,
    )


def _flag(level: float, rng: random.Random) -> GeneratedContent:
    max_tier = 1
    if level > 3:
        max_tier = 2
    if level > 6:
        max_tier = 3
    if level > 8:
        max_tier = 4

    pool = [c for c in COUNTRIES if c.tier <= max_tier] or list(COUNTRIES)
    target = rng.choice(pool)
    others = [c.name for c in COUNTRIES if c.name != target.name]
    options, correct_index = _shuffled([target.name, *rng.sample(others, GEO_DISTRACTORS)], target.name, rng)

    return GeneratedContent(
        question="Which country is this?",
        content={
            "flag": flag_emoji(target.code),
            "options": options,
            "correct_index": correct_index,
            "country_name": target.name,
        },
        solution=correct_index,
    )


def _map(level: float, rng: random.Random) -> GeneratedContent:
    max_tier = 2 if level > 4 else 1
    pool = [s for s in COUNTRY_SHAPES if s.tier <= max_tier] or list(COUNTRY_SHAPES)
    target = rng.choice(pool)

    all_names = dict.fromkeys([*(s.name for s in COUNTRY_SHAPES), *(c.name for c in COUNTRIES)])
    others = [name for name in all_names if name != target.name]
    options, correct_index = _shuffled([target.name, *rng.sample(others, GEO_DISTRACTORS)], target.name, rng)

    return GeneratedContent(
        question="Which border is this?",
        content={
            "path": target.path,
            "view_box": target.view_box,
            "options": options,
            "correct_index": correct_index,
            "country_name": target.name,
        },
        solution=correct_index,
    )


def _fallback(task_type: TaskType, rng: random.Random) -> GeneratedContent:
    if task_type == TaskType.LANG_SYNONYM:
        content = dict(rng.choice(FALLBACK_SYNONYMS))
    elif task_type == TaskType.LANG_RHYME:
        content = dict(rng.choice(FALLBACK_RHYMES))
    elif task_type == TaskType.LANG_SENTENCE:
        content = dict(rng.choice(FALLBACK_SENTENCES))
    else:
        content = {}
    return GeneratedContent(question="Solve the task", content=content, solution=None)


_BUILDERS = {
    TaskType.LANG_ODD_ONE_OUT: _odd_one_out,
    TaskType.LANG_CONNECT: _connect,
    TaskType.LANG_FLAG: _flag,
    TaskType.LANG_MAP: _map,
}


def generate_language(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    builder = _BUILDERS.get(task_type)
    if builder is None:
        return _fallback(task_type, rng)
    return builder(level, rng)


def validate_sentence(word1: str, word2: str, sentence: str) -> bool:
    """A free-text sentence counts if it uses both words and is not trivially short."""
    lowered = sentence.lower()
    return word1.lower() in lowered and word2.lower() in lowered and len(sentence) > 8
