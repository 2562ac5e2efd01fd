"""
Tests for relationship normalization
"""
import pytest

from causal_sage.extraction import RelationshipNormalizer, load_json
from causal_sage.schema import Polarity, Relationship


@pytest.fixture
def normalizer(config):
    return RelationshipNormalizer(config)


def test_structured_shape_is_humanized(normalizer):
    data = {
        "causalRelationships": [
            {"subject": "scheduleProgress", "predicate": "increase", "object": "work_remaining"},
            {"subject": "Fatigue", "predicate": "NEGATIVE", "object": "Productivity"},
        ]
    }
    result = normalizer.normalize(data)

    assert result.valid
    assert result.shape == "structured"
    assert [(r.subject, r.predicate, r.object) for r in result.relationships] == [
        ("schedule progress", Polarity.INCREASE, "work remaining"),
        ("fatigue", Polarity.NEGATIVE, "productivity"),
    ]
    assert result.relationships[0].text == "schedule progress -->(+) work remaining"


@pytest.mark.parametrize(
    "entry",
    [
        {"subject": "", "predicate": "positive", "object": "b"},
        {"subject": "a", "predicate": "positive", "object": "  "},
        {"subject": "a", "predicate": "causes", "object": "b"},
        {"subject": "a", "object": "b"},
        "a -->(+) b",
    ],
)
def test_structured_shape_rejects_bad_entries(normalizer, entry):
    result = normalizer.normalize({"causalRelationships": [entry]})
    assert not result.valid


def test_keyed_shape_keeps_keys_reasoning_and_quoted_snippet(normalizer):
    source = "When death rate goes up, population decreases."
    data = {
        "1": {
            "reasoning": "Because higher death reduces population",
            "causal relationship": "death rate -->(-) population",
            "relevant text": "When death rate goes up, population decreases.",
        },
        "7": {"relationship": "births -->(+) population", "relevant text": "Made up sentence."},
    }
    result = normalizer.normalize(data, source)

    assert result.valid
    assert result.shape == "keyed"
    assert list(result.entries) == ["1", "7"]
    first, second = result.relationships
    assert first.predicate is Polarity.NEGATIVE
    assert first.reasoning == "Because higher death reduces population"
    assert first.source_snippet == source
    assert second.predicate is Polarity.POSITIVE
    assert second.source_snippet is None


@pytest.mark.parametrize(
    "relationship",
    ["--> positive", "death rate -->", "death rate causes population", ""],
)
def test_keyed_shape_without_both_sides_is_malformed(normalizer, relationship):
    result = normalizer.normalize({"1": {"causal relationship": relationship}})
    assert not result.valid


def test_keyed_shape_leaves_missing_marker_unresolved(normalizer):
    result = normalizer.normalize({"1": {"causal relationship": "overtime --> fatigue"}})
    assert result.valid
    rel = result.relationships[0]
    assert rel.predicate is None
    assert rel.text == "overtime -->(+) fatigue"


def test_empty_object_is_valid_and_empty(normalizer):
    result = normalizer.normalize({})
    assert result.valid
    assert result.relationships == []


def test_cause_effect_array_under_any_key(normalizer):
    data = {
        "relationships": [
            {"cause": "overtimeHours", "effect": "fatigue", "sign": "+"},
            {"cause": "fatigue", "effect": "productivity", "direction": "decrease"},
            {"cause": "fatigue", "effect": "morale", "sign": "unclear"},
        ]
    }
    result = normalizer.normalize(data)

    assert result.valid
    assert result.shape == "cause_effect"
    assert [r.text for r in result.relationships] == [
        "overtime hours -->(+) fatigue",
        "fatigue -->(-) productivity",
        "fatigue -->(+) morale",
    ]
    assert result.relationships[2].predicate is None


def test_cause_effect_top_level_array(normalizer):
    result = normalizer.normalize([{"cause": "a", "effect": "b", "sign": "negative"}])
    assert result.shape == "cause_effect"
    assert result.relationships[0].predicate is Polarity.NEGATIVE


def test_cause_effect_missing_effect_is_malformed(normalizer):
    result = normalizer.normalize([{"cause": "a", "sign": "positive"}])
    assert not result.valid


def test_string_list_shape(normalizer):
    data = {"merged": ["death rate -->(-) population", "death rate -->(+) funeral costs"]}
    result = normalizer.normalize(data)
    assert result.valid
    assert result.shape == "strings"
    assert [r.text for r in result.relationships] == [
        "death rate -->(-) population",
        "death rate -->(+) funeral costs",
    ]


def test_self_loops_are_dropped_without_invalidating(normalizer):
    data = {
        "1": {"causal relationship": "Population -->(+) population."},
        "2": {"causal relationship": "births -->(+) population"},
    }
    result = normalizer.normalize(data)
    assert result.valid
    assert list(result.entries) == ["2"]


def test_unknown_shape_is_malformed(normalizer):
    assert not normalizer.normalize({"answer": "none"}).valid
    assert not normalizer.normalize("just a string").valid
    assert not normalizer.normalize(42).valid


@pytest.mark.parametrize("predicate", [Polarity.POSITIVE, Polarity.NEGATIVE])
def test_formatted_relationship_round_trips(normalizer, predicate):
    original = Relationship(subject="Death Rate", predicate=predicate, object="population")
    line = f"1. {original.text}"

    parsed = normalizer.normalize(load_json('{"1": {"causal relationship": "%s"}}' % line))
    rel = parsed.relationships[0]

    assert (rel.subject, rel.predicate, rel.object) == ("death rate", predicate, "population")


def test_relationship_model_rejects_degenerate_edges():
    with pytest.raises(ValueError):
        Relationship(subject="a", object="A.")
    with pytest.raises(ValueError):
        Relationship(subject="", object="b")


def test_final_relationships_under_step_key(normalizer):
    data = {
        "Step 1": {"Similar Variables": [["death rate", "mortality rate"]]},
        "Step 2": {
            "Final Relationships": [
                {"relationship": "death rate -->(-) population"},
                "death rate -->(+) funeral costs",
            ]
        },
    }
    result = normalizer.normalize(data)

    assert result.valid
    assert result.shape == "final"
    assert [r.text for r in result.relationships] == [
        "death rate -->(-) population",
        "death rate -->(+) funeral costs",
    ]


def test_final_relationships_with_bad_entry_is_malformed(normalizer):
    data = {"Step 2": {"Final Relationships": [{"relationship": "--> positive"}]}}
    result = normalizer.normalize(data)
    assert result.shape == "final"
    assert not result.valid


def test_relationship_objects_under_any_key(normalizer):
    data = {
        "relationships": [
            {"causal relationship": "overtime -->(+) fatigue", "reasoning": "long hours tire people"},
            {"relationship": "fatigue -->(-) productivity"},
        ]
    }
    result = normalizer.normalize(data)

    assert result.valid
    assert result.shape == "strings"
    assert result.relationships[0].reasoning == "long hours tire people"
    assert result.relationships[1].predicate is Polarity.NEGATIVE


def test_empty_array_is_valid_and_empty(normalizer):
    result = normalizer.normalize([])
    assert result.valid
    assert result.relationships == []
