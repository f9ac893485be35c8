from sciconnect.directory import seed_directory
from sciconnect.filters import TagIndex, apply_filter, update_query, update_tag
from sciconnect.models import ALL_TAGS, PERSONALITY_TYPES, FilterState


def _experts():
    return seed_directory().list_experts()


def test_no_filter_returns_everything_in_order():
    experts = _experts()
    assert apply_filter(experts, FilterState()) == list(experts)


def test_query_matches_field():
    result = apply_filter(_experts(), FilterState(query="climate"))
    assert [e.field for e in result] == ["Climate Science"]


def test_tag_filter():
    result = apply_filter(_experts(), FilterState(tag="ENFP"))
    assert [e.id for e in result] == ["s2"]


def test_query_is_case_insensitive_across_name_field_bio():
    experts = _experts()
    assert [e.id for e in apply_filter(experts, FilterState(query="PATEL"))] == ["s1"]
    assert [e.id for e in apply_filter(experts, FilterState(query="biotech"))] == ["s4"]
    assert [e.id for e in apply_filter(experts, FilterState(query="memory"))] == ["s2"]


def test_query_and_tag_combine():
    experts = _experts()
    assert apply_filter(experts, FilterState(query="climate", tag="INTJ")) == []
    assert [e.id for e in apply_filter(experts, FilterState(query="dr.", tag="INFJ"))] == ["s3"]


def test_result_is_ordered_subset():
    experts = list(_experts())
    for tag in (ALL_TAGS, *PERSONALITY_TYPES):
        for query in ("", "s", "dr", "e"):
            result = apply_filter(experts, FilterState(query=query, tag=tag))
            positions = [experts.index(e) for e in result]
            assert positions == sorted(positions)


def test_tag_index_matches_full_scan():
    experts = _experts()
    index = TagIndex(experts)
    for tag in (ALL_TAGS, *PERSONALITY_TYPES):
        for query in ("", "climate", "studies", "zzz"):
            state = FilterState(query=query, tag=tag)
            assert index.apply(state) == apply_filter(experts, state)


def test_state_updates_are_pure():
    state = FilterState()
    queried = update_query(state, "neuro")
    tagged = update_tag(queried, "enfp")
    assert state == FilterState()
    assert queried.query == "neuro"
    assert tagged.tag == "ENFP"
    assert update_tag(tagged, "XXXX").tag == ALL_TAGS
    assert update_query(tagged, None).query == ""
