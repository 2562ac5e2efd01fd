"""
Tests for polarity verification
"""
import pytest

from causal_sage.schema import Polarity, Relationship
from causal_sage.verification import PolarityVerifier, resolve_polarity
from causal_sage.verification.polarity import lexical_polarity, scan_option_digits


@pytest.fixture
def relationship():
    return Relationship(subject="death rate", predicate=Polarity.POSITIVE, object="population")


@pytest.mark.parametrize(
    "response, expected",
    [
        ('{"answers": [1, 2]}', Polarity.POSITIVE),
        ('{"answers": [3, 4]}', Polarity.NEGATIVE),
        ('{"answers": [2, 3]}', Polarity.POSITIVE),
        ('{"answers": "4"}', Polarity.NEGATIVE),
        ('```json\n{"answers": [3]}\n```', Polarity.NEGATIVE),
    ],
)
def test_structured_answers(response, expected, relationship):
    polarity, method = resolve_polarity(response, relationship)
    assert polarity is expected
    assert method == "answers"


@pytest.mark.parametrize(
    "response, expected",
    [
        ("The correct options are [3, 4].", Polarity.NEGATIVE),
        ("Option 1 holds, and so does 2.", Polarity.POSITIVE),
        ("answers: 4", Polarity.NEGATIVE),
    ],
)
def test_digit_scan_when_not_json(response, expected, relationship):
    polarity, method = resolve_polarity(response, relationship)
    assert polarity is expected
    assert method == "digits"


def test_scan_option_digits_prefers_list():
    assert scan_option_digits("See [3, 4] not 1") == ["3", "4"]
    assert scan_option_digits("nothing here") == []


def test_lexical_heuristic_on_reasoning():
    rel = Relationship(
        subject="death rate",
        object="population",
        reasoning="More deaths mean the population will decline",
    )
    # "more" and "decline" both present -> inconclusive -> default
    assert resolve_polarity("I cannot tell.", rel) == (Polarity.POSITIVE, "default")

    rel = rel.model_copy(update={"reasoning": "Deaths reduce the population"})
    assert resolve_polarity("I cannot tell.", rel) == (Polarity.NEGATIVE, "lexical")

    rel = rel.model_copy(update={"reasoning": None, "source_snippet": "Fertilizer helps crops rise."})
    assert resolve_polarity("no idea", rel) == (Polarity.POSITIVE, "lexical")


def test_lexical_polarity_matches_word_starts():
    assert lexical_polarity("furthermore the outcome") is None
    assert lexical_polarity("prices fall") is Polarity.NEGATIVE


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Fatigue lowers productivity", Polarity.NEGATIVE),
        ("Subsidies are reducing costs", Polarity.NEGATIVE),
        ("Sales declined after the recall", Polarity.NEGATIVE),
        ("Advertising boosts sales", Polarity.POSITIVE),
        ("Training improved morale", Polarity.POSITIVE),
        ("Demand raised prices", Polarity.POSITIVE),
        ("Temperatures are rising", Polarity.POSITIVE),
    ],
)
def test_lexical_polarity_handles_inflections(text, expected):
    assert lexical_polarity(text) is expected


def test_inflected_reasoning_resolves_lexically():
    rel = Relationship(subject="fatigue", object="productivity", reasoning="Fatigue lowers productivity")
    assert resolve_polarity("no idea", rel) == (Polarity.NEGATIVE, "lexical")


@pytest.mark.parametrize("response", ["", "no idea", '{"answers": []}', '{"verdict": "unclear"}', "5 6 7 8 9"])
def test_always_returns_a_definite_polarity(response):
    rel = Relationship(subject="a", object="b")
    polarity, method = resolve_polarity(response, rel)
    assert polarity is Polarity.POSITIVE
    assert method == "default"


def test_verify_corrects_predicate_and_sends_four_options(config, make_reasoner, relationship):
    reasoner = make_reasoner('{"answers": [3, 4]}')
    verified = PolarityVerifier(config, reasoner).verify(relationship)

    assert verified.predicate is Polarity.NEGATIVE
    assert verified.subject == "death rate"
    assert relationship.predicate is Polarity.POSITIVE

    system = reasoner.calls[0][0].content
    assert "1. increasing death rate increases population" in system
    assert "4. decreasing death rate increases population" in system
    assert "death rate -->(+) population" in reasoner.calls[0][1].content


def test_verify_resolves_directional_aliases(config, make_reasoner):
    rel = Relationship(subject="overtime", predicate=Polarity.INCREASE, object="fatigue")
    verified = PolarityVerifier(config, make_reasoner('{"answers": [1]}')).verify(rel)
    assert verified.predicate is Polarity.POSITIVE


def test_verify_all_calls_reasoner_once_per_relationship(config, make_reasoner):
    rels = [
        Relationship(subject="a", object="b"),
        Relationship(subject="b", object="c"),
    ]
    reasoner = make_reasoner('{"answers": [1]}', '{"answers": [4]}')
    verified = PolarityVerifier(config, reasoner).verify_all(rels)
    assert [r.predicate for r in verified] == [Polarity.POSITIVE, Polarity.NEGATIVE]
    assert len(reasoner.calls) == 2
