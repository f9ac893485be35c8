import os
import tempfile

import pytest

from sciconnect.directory import (
    CauseNotFound,
    DirectoryError,
    ExpertNotFound,
    build_directory,
    load_directory,
    save_directory,
    seed_directory,
)


def test_find_cause_for_every_listed_cause():
    store = seed_directory()
    for cause in store.list_causes():
        assert store.find_cause(cause.id).id == cause.id


def test_find_cause_unknown_id():
    store = seed_directory()
    with pytest.raises(CauseNotFound):
        store.find_cause("c99")


def test_describe_cause_falls_back_to_empty_view():
    store = seed_directory()
    view = store.describe_cause("nope")
    assert view.cause_id == "nope"
    assert view.name == ""
    assert not view.found

    known = store.describe_cause("c5")
    assert known.name == "Reforestation"
    assert known.impact == "$10 plants 5 trees"


def test_find_expert_and_causes_for():
    store = seed_directory()
    expert = store.find_expert("s1")
    assert [c.id for c in store.causes_for(expert)] == ["c1", "c2"]
    with pytest.raises(ExpertNotFound):
        store.find_expert("s42")


def test_seed_catalog_shape():
    store = seed_directory()
    assert [e.id for e in store.list_experts()] == ["s1", "s2", "s3", "s4"]
    assert len(store.list_causes()) == 8


def test_unknown_personality_rejected():
    with pytest.raises(DirectoryError):
        build_directory(
            [{"id": "x", "name": "Dr. X", "personality": "ABCD"}],
            [],
        )


def test_load_directory_from_yaml():
    store = seed_directory()
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "directory.yml")
        save_directory(path, store)
        loaded = load_directory(path)

    assert loaded.list_experts() == store.list_experts()
    assert loaded.list_causes() == store.list_causes()


def test_load_directory_without_path_uses_seed():
    assert len(load_directory(None).list_experts()) == 4
