import pytest

from vault_core.errors import InvalidEncoding, Reason, ValidationError
from vault_core.validation import validate


def test_valid_entry():
    assert validate("Example", "JBSWY3DPEHPK3PXP") is None


@pytest.mark.parametrize("name", ["", "   ", None])
def test_empty_name(name):
    with pytest.raises(ValidationError) as excinfo:
        validate(name, "JBSWY3DPEHPK3PXP")
    assert excinfo.value.reason is Reason.EMPTY_NAME


@pytest.mark.parametrize("secret", ["", "  \t", None])
def test_empty_secret_is_checked_before_decoding(secret):
    with pytest.raises(ValidationError) as excinfo:
        validate("Example", secret)
    assert excinfo.value.reason is Reason.EMPTY_SECRET


def test_name_is_checked_first():
    with pytest.raises(ValidationError) as excinfo:
        validate("", "")
    assert excinfo.value.reason is Reason.EMPTY_NAME


@pytest.mark.parametrize("secret", ["1", "JBSW1Y3D", "====", "A", "JBSWY3DPEHPK3PXß", "ß"])
def test_invalid_or_zero_length_secret(secret):
    with pytest.raises(ValidationError) as excinfo:
        validate("Example", secret)
    assert excinfo.value.reason is Reason.INVALID_ENCODING
    assert isinstance(excinfo.value.cause, InvalidEncoding)
    assert str(excinfo.value).startswith("key format error: ")


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        validate("Example", "1")
    assert Reason.EMPTY_SECRET.value == "EmptySecret"
