import pytest

from paramsheet.extraction.matching import match_score, token_set_ratio


@pytest.mark.parametrize(
    "a, b",
    [
        ("Voltage Supply for Modulation", "Voltage Supply (Modulation)"),
        ("Front Axle Load", "Rear Axle Load [kg]"),
        ("Spring Rate", "Spring rate of the return spring"),
        ("Brake Line Pressure", ""),
    ],
)
def test_token_set_ratio_is_commutative(a, b) -> None:
    assert token_set_ratio(a, b) == token_set_ratio(b, a)


@pytest.mark.parametrize("label", ["Inner Diameter", "Supply Voltage", "Time to lock AEB"])
def test_token_set_ratio_of_label_with_itself_is_perfect(label) -> None:
    assert token_set_ratio(label, label) == 100


def test_bracketed_words_still_match_prose() -> None:
    assert token_set_ratio("Voltage Supply for Modulation", "Voltage Supply (Modulation)") >= 88


def test_partial_containment_is_averaged() -> None:
    # {spring, rate} inside {spring, rate, return}: (2/2 + 2/3) / 2
    assert token_set_ratio("Spring Rate", "Return Spring Rate") == pytest.approx(83.333, abs=0.01)


def test_empty_normalized_side_scores_zero() -> None:
    assert token_set_ratio("Please check", "Check") == 0
    assert token_set_ratio(None, "Voltage") == 0


def test_embedded_identifier_forces_a_perfect_match() -> None:
    assert match_score("Completely unrelated", "p1_1", "see P1_1 (legacy)") == 100


def test_exact_normalized_match_scores_perfect() -> None:
    assert match_score("Supply Voltage", None, "  supply-voltage [V]") == 100


def test_fuzzy_fallback_without_identifier() -> None:
    assert match_score("Front Axle Load", "x_9", "Rear Axle Load") == pytest.approx(66.666, abs=0.01)
