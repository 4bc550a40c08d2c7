import pytest

from src.time_tracker.time_tracker.common.validators import parse_role
from src.time_tracker.time_tracker.core.enums import Role
from src.time_tracker.time_tracker.core.exceptions import ValidationError


@pytest.mark.parametrize("value", [Role.ADMIN, "admin", "ADMIN"])
def test_parse_role_accepts_enum_and_text(value):
    assert parse_role(value) is Role.ADMIN


def test_parse_role_keeps_every_role_member():
    assert [parse_role(r) for r in Role] == list(Role)


@pytest.mark.parametrize("value", ["intern", None, 3])
def test_parse_role_rejects_unknown_values(value):
    with pytest.raises(ValidationError):
        parse_role(value)
