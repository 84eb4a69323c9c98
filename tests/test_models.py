import pytest
from sqlalchemy import DateTime

from wecare.db.models import Account, AccountHistory, Appointment, NurseListing, NurseReview


TIMESTAMP_COLUMNS = [
    (Account, "created_at"),
    (Account, "updated_at"),
    (AccountHistory, "date"),
    (NurseListing, "created_at"),
    (NurseListing, "updated_at"),
    (NurseReview, "created_at"),
    (Appointment, "created_at"),
    (Appointment, "updated_at"),
    (Appointment, "rated_at"),
]


@pytest.mark.parametrize("model, column", TIMESTAMP_COLUMNS)
def test_timestamp_columns_are_timezone_aware(model, column):
    col_type = model.__table__.c[column].type
    assert isinstance(col_type, DateTime)
    assert col_type.timezone is True


def test_timestamp_defaults_carry_utc_offset():
    account = Account(email="a@x.com", password_hash="x")
    assert account.created_at.utcoffset() is not None
    assert account.updated_at.utcoffset().total_seconds() == 0


def test_rated_at_defaults_to_none():
    assert Appointment.__table__.c["rated_at"].nullable
