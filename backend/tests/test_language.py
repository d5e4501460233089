from __future__ import annotations

import random
import threading

import pytest

from flowscroll.content import words
from flowscroll.content.geography import COUNTRIES, COUNTRY_SHAPES, flag_emoji
from flowscroll.content.words import CATEGORIES, build_relation_index, get_relation_index
from flowscroll.tasks.generation import generate
from flowscroll.tasks.generators.language import validate_sentence
from flowscroll.tasks.models import TaskType

MULTIPLE_CHOICE = (TaskType.LANG_ODD_ONE_OUT, TaskType.LANG_CONNECT, TaskType.LANG_FLAG, TaskType.LANG_MAP)


@pytest.mark.parametrize("task_type", MULTIPLE_CHOICE)
def test_options_unique_and_index_points_at_answer(task_type: TaskType, rng: random.Random) -> None:
    for level in (1, 2, 3, 4.5, 6, 8, 9.5, 12):
        for _ in range(25):
            content = generate(task_type, level, rng)
            options = content.content["options"]
            index = content.content["correct_index"]
            assert len(options) == len(set(options))
            assert content.solution == index
            assert 0 <= index < len(options)


def test_odd_one_out_word_is_outside_base_category(rng: random.Random) -> None:
    for level in (1, 5, 9):
        for _ in range(50):
            content = generate(TaskType.LANG_ODD_ONE_OUT, level, rng).content
            options = content["options"]
            odd = options[content["odd_index"]]
            others = [w for i, w in enumerate(options) if i != content["odd_index"]]
            shared = [
                c for c in CATEGORIES.values()
                if all(w in c.words for w in others)
            ]
            assert shared
            assert all(odd not in c.words for c in shared)


def test_odd_one_out_option_count(rng: random.Random) -> None:
    assert len(generate(TaskType.LANG_ODD_ONE_OUT, 2, rng).content["options"]) == 3
    assert len(generate(TaskType.LANG_ODD_ONE_OUT, 2.5, rng).content["options"]) == 4


def test_connect_antonym_only_at_low_levels(rng: random.Random) -> None:
    modes = {generate(TaskType.LANG_CONNECT, 2, rng).content["mode"] for _ in range(30)}
    assert modes == {"antonym"}
    assert len(generate(TaskType.LANG_CONNECT, 4, rng).content["options"]) == 3
    assert len(generate(TaskType.LANG_CONNECT, 5, rng).content["options"]) == 4


def test_connect_answer_is_a_partner_and_distractors_are_not(rng: random.Random) -> None:
    index = get_relation_index()
    for level in (1, 5, 10):
        for _ in range(40):
            content = generate(TaskType.LANG_CONNECT, level, rng).content
            target_id = index.id_by_text[content["target"]]
            answer_id = index.id_by_text[content["answer"]]
            partners = index.partners_of(target_id, content["mode"])
            assert answer_id in partners
            assert content["options"][content["correct_index"]] == content["answer"]
            for option in content["options"]:
                if option == content["answer"]:
                    continue
                assert index.id_by_text[option] not in partners
                assert option != content["target"]


def test_flag_content(rng: random.Random) -> None:
    low_names = {c.name for c in COUNTRIES if c.tier == 1}
    for _ in range(30):
        content = generate(TaskType.LANG_FLAG, 1, rng).content
        assert content["country_name"] in low_names
        assert len(content["options"]) == 4
        assert content["options"][content["correct_index"]] == content["country_name"]
    assert flag_emoji("DE") == "\U0001F1E9\U0001F1EA"


def test_map_tier_unlocks_above_four(rng: random.Random) -> None:
    tier_one = {s.name for s in COUNTRY_SHAPES if s.tier == 1}
    seen_low = {generate(TaskType.LANG_MAP, 4, rng).content["country_name"] for _ in range(40)}
    assert seen_low <= tier_one
    content = generate(TaskType.LANG_MAP, 5, rng).content
    assert content["path"].startswith("M")
    assert content["view_box"] == "0 0 100 100"


def test_legacy_language_types_use_fallback_pools(rng: random.Random) -> None:
    synonym = generate(TaskType.LANG_SYNONYM, 3, rng)
    assert "synonyms" in synonym.content
    rhyme = generate(TaskType.LANG_RHYME, 3, rng)
    assert "rhymes" in rhyme.content
    sentence = generate(TaskType.LANG_SENTENCE, 3, rng)
    assert {"word1", "word2"} <= set(sentence.content)
    assert sentence.solution is None


def test_validate_sentence() -> None:
    assert validate_sentence("Sun", "Ice", "The sun melted the ice.")
    assert not validate_sentence("Sun", "Ice", "sun ice")
    assert not validate_sentence("Sun", "Ice", "The sun was bright today.")


def test_relation_index_drops_unknown_partners() -> None:
    index = build_relation_index()
    known = set(index.by_id)
    for relation in index.relations:
        assert relation.target_id in known
        assert relation.partner_id in known
        assert relation.target_id != relation.partner_id
    assert "wealthy" in index.id_by_text
    assert "affluent" not in index.id_by_text


def test_relation_index_built_once_under_concurrency(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(words, "_relation_index", None)
    calls = []
    original = words.build_relation_index

    def counting_build(*args, **kwargs):
        calls.append(1)
        return original(*args, **kwargs)

    monkeypatch.setattr(words, "build_relation_index", counting_build)

    results = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(get_relation_index())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert all(r is results[0] for r in results)
