import pytest

from app.services.passwords import hash_password, verify_password


def test_hash_and_verify():
    digest = hash_password("CorrectHorseBatteryStaple1!")

    assert digest != "CorrectHorseBatteryStaple1!"
    assert verify_password("CorrectHorseBatteryStaple1!", digest)
    assert not verify_password("wrong", digest)


@pytest.mark.parametrize("password", ["", "   "])
def test_blank_password_cannot_be_hashed(password):
    with pytest.raises(ValueError):
        hash_password(password)


def test_blank_inputs_never_verify():
    digest = hash_password("something-long")

    assert verify_password("", digest) is False
    assert verify_password("something-long", "") is False


def test_long_passwords_are_accepted():
    digest = hash_password("x" * 255)

    assert verify_password("x" * 255, digest)
