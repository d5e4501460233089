from __future__ import annotations

import json

from conftest import make_result

from flowscroll.storage.profile_store import ProfileStore
from flowscroll.tasks.models import TaskType
from flowscroll.tasks.profile import new_user_stats


def test_missing_profile_is_created_fresh(store: ProfileStore) -> None:
    stats = store.load("newbie")
    assert stats.user_id == "newbie"
    assert stats.levels["MATH_ADDITION"] == 2
    assert not store.exists("newbie")


def test_save_and_load_round_trip(store: ProfileStore) -> None:
    stats = new_user_stats("alice")
    stats.levels["LANG_FLAG"] = 4.25
    stats.confidence["LANG_FLAG"] = 0.35
    stats.history.append(make_result(TaskType.LANG_FLAG, time_spent_ms=2100))
    stats.total_time_ms = 2100

    path = store.save(stats)
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["userId"] == "alice"
    assert raw["history"][0]["timeSpentMs"] == 2100

    loaded = store.load("alice")
    assert loaded == stats


def test_old_profile_file_is_migrated(store: ProfileStore) -> None:
    store.root.mkdir(parents=True)
    store.path_for("legacy").write_text(json.dumps({"userId": "legacy", "levels": {"MATH_ADDITION": 6}}), encoding="utf-8")
    stats = store.load("legacy")
    assert stats.levels["MATH_ADDITION"] == 6
    assert stats.levels["LANG_CONNECT"] == 1
    assert stats.confidence == {}


def test_corrupt_file_recovers(store: ProfileStore) -> None:
    store.root.mkdir(parents=True)
    store.path_for("broken").write_text("{not json", encoding="utf-8")
    stats = store.load("broken")
    assert stats.user_id == "broken"
    assert stats.history == []


def test_path_is_sanitized(store: ProfileStore) -> None:
    path = store.path_for("../../etc/passwd")
    assert path.parent == store.root
    assert "/" not in path.name
    assert store.path_for("..").parent == store.root


def test_no_user_id_gives_anonymous_profile(store: ProfileStore) -> None:
    assert store.load(None).user_id
    assert store.load("").user_id


def test_similar_ids_do_not_share_a_file(store: ProfileStore) -> None:
    stats = new_user_stats("a/b")
    stats.levels["LANG_FLAG"] = 9.5
    store.save(stats)

    assert store.path_for("a/b") != store.path_for("a_b")
    assert store.load("a_b").levels["LANG_FLAG"] == 1
    assert store.load("a/b").levels["LANG_FLAG"] == 9.5


def test_file_of_another_user_is_not_served(store: ProfileStore) -> None:
    store.root.mkdir(parents=True)
    store.path_for("bob").write_text(
        json.dumps({"userId": "carol", "levels": {"LANG_FLAG": 7.5}}), encoding="utf-8"
    )
    stats = store.load("bob")
    assert stats.user_id == "bob"
    assert stats.levels["LANG_FLAG"] == 1
