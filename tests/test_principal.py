import pytest

from animevote.errors import AuthRequiredError
from animevote.services.principal import principal_key


def test_member_id_key():
    assert principal_key(42, None) == "m:42"


def test_cookie_key():
    assert principal_key(None, "abc") == "c:abc"


def test_member_wins_over_cookie():
    assert principal_key(7, "abc") == "m:7"


def test_member_id_zero_is_still_a_member():
    assert principal_key(0, None) == "m:0"


@pytest.mark.parametrize("cookie_id", [None, "", "   ", "\t"])
def test_no_identity_requires_auth(cookie_id):
    with pytest.raises(AuthRequiredError):
        principal_key(None, cookie_id)
