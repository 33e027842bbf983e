import random
import string

from fluentkit.captcha import Captcha


class _FixedRandom:
    def __init__(self, values):
        self._values = iter(values)

    def randrange(self, stop):
        value = next(self._values)
        assert 0 <= value < stop
        return value


def test_code_is_four_alphanumerics():
    captcha = Captcha()
    allowed = set(string.ascii_letters + string.digits)
    for _ in range(50):
        captcha.refresh()
        assert len(captcha.code) == Captcha.CODE_LENGTH
        assert set(captcha.code) <= allowed


def test_worked_example_from_choices():
    rng = _FixedRandom([1, 0, 2, 1, 0, 7, 1, 25])
    captcha = Captcha(rng=rng)
    assert captcha.code == "Ab7Z"


def test_same_seed_same_code():
    first = Captcha(rng=random.Random(3))
    second = Captcha(rng=random.Random(3))
    assert first.code == second.code


def test_verify_exact_match():
    captcha = Captcha(rng=_FixedRandom([1, 0, 2, 1, 0, 7, 1, 25]))
    assert captcha.verify(captcha.code) is True
    assert captcha.verify(captcha.code.swapcase()) is False
    assert captcha.verify("") is False


def test_verify_ignore_case():
    captcha = Captcha(ignore_case=True, rng=_FixedRandom([1, 0, 2, 1, 0, 7, 1, 25]))
    assert captcha.verify(captcha.code.swapcase()) is True
    assert captcha.verify(captcha.code.lower()) is True


def test_refresh_changes_code_from_source():
    rng = _FixedRandom([0, 1, 0, 2, 0, 3, 0, 4, 0, 5, 0, 6, 0, 7, 0, 8])
    captcha = Captcha(rng=rng)
    before = captcha.code
    captcha.refresh()
    assert captcha.code.isdigit() and before.isdigit()
    assert captcha.code != before