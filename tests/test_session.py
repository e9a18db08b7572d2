import pytest

from calcengine import CalculatorSession, Err, Ok, Settings
from calcengine.session import ERROR_MARKER


def press_all(session, keys):
    for key in keys:
        session.press(key)


@pytest.fixture
def session():
    return CalculatorSession()


def test_defaults(session):
    assert session.precision == 2
    assert session.display == ""
    assert not session.scientific_mode
    assert not session.history_visible


def test_precision_default_comes_from_settings():
    assert CalculatorSession(settings=Settings(precision=4)).precision == 4


def test_keypad_builds_buffer(session):
    press_all(session, ["1", "2", "+", "3"])
    assert session.buffer == "12+3"
    assert session.display == "12+3"


def test_equals_records_success(session):
    press_all(session, ["7", "/", "2"])
    assert session.equals() == Ok("3.50")
    assert session.display == "3.50"
    assert session.ledger.list() == [("7/2", "3.50")]


def test_equals_key(session):
    press_all(session, ["2", "+", "2", "="])
    assert session.result == "4.00"


def test_failed_evaluation_is_not_recorded(session):
    press_all(session, ["5", "/", "0"])
    assert session.equals() == Err()
    assert session.display == ERROR_MARKER
    assert session.ledger.list() == []


def test_empty_buffer_is_an_error(session):
    assert session.equals() == Err()
    assert session.ledger.list() == []


def test_typing_after_result_shows_input(session):
    press_all(session, ["1", "+", "1", "="])
    session.press("+")
    assert session.display == "1+1+"


@pytest.mark.parametrize("key", ["C", "AC"])
def test_clear_keys(session, key):
    press_all(session, ["9", "=", key])
    assert session.buffer == ""
    assert session.result == ""
    assert len(session.ledger) == 1


def test_scientific_keys_need_scientific_mode(session):
    with pytest.raises(ValueError):
        session.press("sqrt")
    assert session.toggle_scientific() is True
    press_all(session, ["sqrt", "(", "1", "6", ")"])
    session.set_precision(0)
    assert session.equals() == Ok("4")


def test_unknown_key(session):
    with pytest.raises(ValueError):
        session.press("x")


def test_toggle_precision(session):
    assert session.toggle_precision() == 4
    assert session.toggle_precision() == 2
    session.set_precision(7)
    assert session.toggle_precision() == 2


def test_set_precision_validates(session):
    with pytest.raises(ValueError):
        session.set_precision(-1)
    assert session.precision == 2


def test_history_keeps_precision_of_its_evaluation(session):
    session.set_buffer("1/3")
    session.equals()
    session.toggle_precision()
    session.equals()
    assert session.ledger.list() == [("1/3", "0.3333"), ("1/3", "0.33")]


def test_history_panel(session):
    assert session.toggle_history() is True
    session.set_buffer("2*3")
    session.equals()
    session.clear_history()
    assert session.ledger.list() == []
    assert session.toggle_history() is False


def test_reuse_last_entry(session):
    session.reuse_last_result()
    assert session.buffer == ""
    session.set_buffer("2*3")
    session.equals()
    session.reuse_last_result()
    assert session.buffer == "6.00"
    assert session.display == "6.00"
    session.reuse_last_expression()
    assert session.buffer == "2*3"


def test_max_expression_length_from_settings():
    session = CalculatorSession(settings=Settings(max_expression_length=3))
    session.set_buffer("1+1+1")
    assert session.equals() == Err()


def test_invalid_precision_rejected():
    with pytest.raises(ValueError):
        CalculatorSession(precision=101)


def test_long_expression_is_recorded(session):
    session.set_buffer("+".join(["1"] * 1000))
    assert session.equals() == Ok("1000.00")
    assert session.ledger.latest().result == "1000.00"


def test_precision_up_to_one_hundred(session):
    session.set_precision(100)
    session.set_buffer("1/4")
    assert session.equals() == Ok("0.25" + "0" * 98)
