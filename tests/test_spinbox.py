import pytest

from gempp.spinbox import ScienceSpinBox, ValidatorState, is_intermediate_value_helper


def test_helper_in_range_returns_number():
    assert is_intermediate_value_helper(5, 0, 10) == 5


def test_helper_finds_number_containing_digits():
    found = is_intermediate_value_helper(2, 10, 30)
    assert 10 <= found <= 30
    assert "2" in str(found)


def test_helper_without_candidate_returns_none():
    assert is_intermediate_value_helper(7, 10, 12) is None


def test_text_round_trip():
    box = ScienceSpinBox()
    text = box.text_from_value(123.5)
    assert "e" in text
    assert box.value_from_text(text) == 123.5


def test_text_uses_display_decimals():
    assert ScienceSpinBox(decimals=2).text_from_value(1500.0) == "1.50e+03"


def test_other_delimiter_round_trip():
    box = ScienceSpinBox(delimiter=",", thousand=".")
    text = box.text_from_value(2.5)
    assert "," in text and "." not in text
    assert box.value_from_text(text) == 2.5


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", ValidatorState.INTERMEDIATE),
        ("-", ValidatorState.INTERMEDIATE),
        ("+.", ValidatorState.INTERMEDIATE),
        ("1.5", ValidatorState.ACCEPTABLE),
        ("2.5e+03", ValidatorState.ACCEPTABLE),
        ("abc", ValidatorState.INVALID),
        (",5", ValidatorState.INVALID),
        ("1,,000", ValidatorState.INVALID),
        ("1,000", ValidatorState.INTERMEDIATE),
        ("1. 5", ValidatorState.INVALID),
    ],
)
def test_validate_default_range(text, expected):
    assert ScienceSpinBox().validate(text) is expected


def test_empty_text_invalid_when_range_is_single_value():
    assert ScienceSpinBox(minimum=3, maximum=3).validate("") is ValidatorState.INVALID


def test_out_of_range_above_is_invalid():
    assert ScienceSpinBox(minimum=5, maximum=100).validate("200") is ValidatorState.INVALID


def test_below_range_may_be_intermediate():
    assert ScienceSpinBox(minimum=5, maximum=100).validate("2") is ValidatorState.INTERMEDIATE


def test_invalid_text_interprets_as_minimum():
    box = ScienceSpinBox(minimum=5, maximum=100)
    assert box.value_from_text("abc") == 5.0


def test_invalid_text_interprets_as_maximum_when_not_positive():
    box = ScienceSpinBox(minimum=-100, maximum=-5)
    assert box.value_from_text("abc") == -5.0


def test_double_delimiter_at_cursor_is_skipped():
    value, state = ScienceSpinBox().validate_and_interpret("1..5", 2)
    assert state is ValidatorState.ACCEPTABLE
    assert value == 1.5


def test_prefix_is_accepted():
    box = ScienceSpinBox(prefix="$")
    assert box.validate("$1.5") is ValidatorState.ACCEPTABLE
    assert box.value_from_text("$4.0") == 4.0


def test_stripped_moves_cursor():
    box = ScienceSpinBox(prefix="$", suffix=" kg")
    assert box.stripped("$ 12 kg", 7) == ("12", 6)


def test_fixup_removes_thousands():
    assert ScienceSpinBox().fixup("1,234,567") == "1234567"


def test_validation_is_stable_across_calls():
    box = ScienceSpinBox(minimum=5, maximum=100)
    first = box.validate_and_interpret("42")
    assert box.validate_and_interpret("42") == first
    assert first == (42.0, ValidatorState.ACCEPTABLE)


def test_step_up_then_down_returns_to_value():
    box = ScienceSpinBox()
    box.value = 2.0
    box.step_up()
    assert box.value > 2.0
    box.step_down()
    assert box.value == pytest.approx(2.0)


def test_step_by_matches_step_direction():
    stepped, reference = ScienceSpinBox(), ScienceSpinBox()
    stepped.value = reference.value = 3.0
    stepped.step_by(-4)
    reference.step_down()
    assert stepped.value == reference.value
    stepped.step_by(2)
    reference.step_up()
    assert stepped.value == reference.value


def test_value_is_clamped():
    box = ScienceSpinBox(minimum=0, maximum=10)
    box.value = 50
    assert box.value == 10
    box.value = -3
    assert box.value == 0


def test_minus_dot_rejected_for_positive_range():
    assert ScienceSpinBox(minimum=5, maximum=100).is_intermediate_value("-.5") is False


def test_empty_delimiter_rejected():
    with pytest.raises(ValueError):
        ScienceSpinBox(delimiter="")