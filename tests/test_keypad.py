from honeybear.keypad import MAX_DIGITS, KeypadState


def _noop(*_args):
    return None


def test_digits_shown():
    pad = KeypadState(_noop, _noop)
    for digit in "123":
        pad.add_digit(digit)
    assert pad.label == "123"
    assert pad.typed == "123"


def test_digits_hidden():
    pad = KeypadState(_noop, _noop, hide_typed=True)
    for digit in "42":
        pad.add_digit(digit)
    assert pad.label == "**"
    assert pad.typed == "42"


def test_limit():
    pad = KeypadState(_noop, _noop)
    for _ in range(MAX_DIGITS + 4):
        pad.add_digit("7")
    assert len(pad.typed) == MAX_DIGITS
    assert len(pad.label) == MAX_DIGITS


def test_submit_passes_value_and_clears():
    received = []
    pad = KeypadState(received.append, _noop, hide_typed=True)
    for digit in "1234":
        pad.add_digit(digit)
    pad.submit()
    assert received == ["1234"]
    assert pad.typed == ""
    assert pad.label == ""


def test_cancel_calls_callback():
    calls = []
    pad = KeypadState(_noop, lambda: calls.append("cancel"))
    pad.add_digit("5")
    pad.cancel()
    assert calls == ["cancel"]
    assert pad.typed == "5"