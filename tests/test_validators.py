import pytest

from rootstock_mcp.errors import InvalidAddressError, InvalidAmountError
from rootstock_mcp.tools import validators

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
BAD_CHECKSUM = "0x5aaeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def test_address_validation():
    assert validators.is_valid_address(CHECKSUMMED)
    assert validators.is_valid_address(CHECKSUMMED.lower())
    assert validators.is_valid_address("0x" + "AB" * 20)
    assert not validators.is_valid_address("invalid")
    assert not validators.is_valid_address("0x1234")
    assert not validators.is_valid_address("5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")
    assert not validators.is_valid_address(None)


def test_address_checksum_strictness():
    assert not validators.is_valid_address(BAD_CHECKSUM)
    assert validators.is_valid_address(BAD_CHECKSUM, strict=False)


def test_normalize_address_returns_checksum_and_names_field():
    assert validators.normalize_address(CHECKSUMMED.lower(), "toAddress") == CHECKSUMMED
    with pytest.raises(InvalidAddressError) as excinfo:
        validators.normalize_address("0xnothex", "toAddress")
    assert excinfo.value.field == "toAddress"
    assert "toAddress" in excinfo.value.message


def test_to_atomic_units():
    assert validators.to_atomic_units("2.5", 18) == 2_500_000_000_000_000_000
    assert validators.to_atomic_units("1", 6) == 1_000_000
    assert validators.to_atomic_units(".5", 1) == 5
    assert validators.to_atomic_units("0.000001", 6) == 1
    assert validators.to_atomic_units("100", 0) == 100


@pytest.mark.parametrize("amount", ["", ".", "abc", "-1", "1e18", "1,5", "1.2.3", " "])
def test_to_atomic_units_rejects_non_numeric(amount):
    with pytest.raises(InvalidAmountError):
        validators.to_atomic_units(amount, 18)


def test_to_atomic_units_rejects_precision_overflow():
    with pytest.raises(InvalidAmountError) as excinfo:
        validators.to_atomic_units("0.1234567", 6)
    assert excinfo.value.field == "amount"


def test_to_atomic_units_rejects_values_beyond_uint256():
    with pytest.raises(InvalidAmountError):
        validators.to_atomic_units(str(2**256), 0)


def test_from_atomic_units():
    assert validators.from_atomic_units(1_500_000_000_000_000_000, 18) == "1.5"
    assert validators.from_atomic_units(0, 18) == "0"
    assert validators.from_atomic_units(1, 18) == "0.000000000000000001"
    assert validators.from_atomic_units(42, 0) == "42"
    assert validators.from_atomic_units(-25, 1) == "-2.5"
    assert validators.from_atomic_units(60_000_000, 9) == "0.06"


@pytest.mark.parametrize(
    "amount,decimals",
    [("1.5", 18), ("0.000001", 6), ("123456789", 0), ("42.42", 2), ("0", 8)],
)
def test_atomic_units_round_trip(amount, decimals):
    assert validators.from_atomic_units(validators.to_atomic_units(amount, decimals), decimals) == amount


def test_parse_uint256():
    assert validators.parse_uint256("42", "propertyId") == 42
    assert validators.parse_uint256(str(2**256 - 1), "propertyId") == 2**256 - 1
    for bad in ("-1", "1.5", "abc", str(2**256), True, None):
        with pytest.raises(InvalidAmountError):
            validators.parse_uint256(bad, "propertyId")
