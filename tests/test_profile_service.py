from dataclasses import replace
from datetime import date, timedelta
import io

import pytest
from PIL import Image

from wecare.application.ports.account_repo import AccountDto
from wecare.application.services.profile_service import ProfileService
from wecare.domain.booking import Actor, Role
from wecare.exceptions import NotFoundError, ValidationError


class FakeAccounts:
    def __init__(self):
        self.accounts = {
            "p1": AccountDto(id="p1", name="Pat", email="p@x.com", role="patient", password_hash="x"),
            "n1": AccountDto(id="n1", name="Nina", email="n@x.com", role="nurse", password_hash="x"),
        }

    def get_by_id(self, account_id):
        return self.accounts.get(account_id)

    def update_profile_fields(self, account_id, fields):
        if account_id not in self.accounts:
            return None
        self.accounts[account_id] = replace(self.accounts[account_id], **fields)
        return self.accounts[account_id]

    def list_history(self, account_id):
        return []


class FakeDirectory:
    def __init__(self):
        self.synced = []

    def sync_display_fields(self, account_id, changes):
        self.synced.append((account_id, changes))


class FakeStorage:
    def __init__(self):
        self.saved = []

    def save_bytes(self, subdir, filename, data):
        self.saved.append((subdir, filename, len(data)))
        return f"/uploads/{subdir}/{filename}"


def png_bytes(fmt="PNG"):
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 10, 10)).save(buf, format=fmt)
    return buf.getvalue()


PATIENT = Actor("p1", Role.PATIENT)
NURSE = Actor("n1", Role.NURSE)


@pytest.fixture
def svc():
    return ProfileService(account_repo=FakeAccounts(), directory=FakeDirectory(), storage_repo=FakeStorage())


def test_update_profile_validates_and_updates(svc):
    out = svc.update_profile(PATIENT, {"name": " Pat Doe ", "dob": "1990-05-01", "city": "Pune", "role": "admin"})
    assert out.name == "Pat Doe"
    assert out.dob == date(1990, 5, 1)
    assert out.city == "Pune"
    assert out.role == "patient"
    assert svc.directory.synced == []


def test_update_profile_field_errors(svc):
    future = (date.today() + timedelta(days=3)).isoformat()
    with pytest.raises(ValidationError) as exc:
        svc.update_profile(PATIENT, {"name": "  ", "gender": "robot", "dob": future})
    assert set(exc.value.fields) == {"name", "gender", "dob"}


def test_update_profile_bad_dob_format(svc):
    with pytest.raises(ValidationError) as exc:
        svc.update_profile(PATIENT, {"dob": "01/05/1990"})
    assert "dob" in exc.value.fields


def test_nurse_profile_edit_syncs_listing(svc):
    svc.update_profile(NURSE, {"name": "Nina R", "specialization": "Wound Care"})
    account_id, changes = svc.directory.synced[0]
    assert account_id == "n1"
    assert changes["name"] == "Nina R"
    assert changes["specialization"] == "Wound Care"


def test_update_profile_unknown_account(svc):
    with pytest.raises(NotFoundError):
        svc.update_profile(Actor("ghost", Role.PATIENT), {"city": "X"})


def test_upload_profile_image(svc):
    out = svc.upload_profile_image(PATIENT, "my photo.png", "image/png", png_bytes())
    assert out.profile_image == "/uploads/profile/p1_my_photo.png"
    assert svc.storage_repo.saved[0][0] == "profile"


def test_upload_rejects_non_image(svc):
    with pytest.raises(ValidationError):
        svc.upload_profile_image(PATIENT, "x.png", "image/png", b"not an image at all")


def test_upload_rejects_wrong_type_and_size(svc):
    with pytest.raises(ValidationError):
        svc.upload_profile_image(PATIENT, "x.gif", "image/gif", png_bytes())
    with pytest.raises(ValidationError):
        svc.upload_profile_image(PATIENT, "x.png", "image/png", png_bytes(), max_size=10)
