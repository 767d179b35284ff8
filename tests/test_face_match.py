import pytest

from app.core.clock import utc_now
from app.models import Attendance
from app.services.face_match_service import (
    NO_REGISTERED_PHOTO,
    USER_NOT_FOUND,
    COMPARE_FAILED,
    PROVIDER_ERROR,
    NO_MATCH
)
from app.core.exceptions import ProviderError
from tests.conftest import make_user, make_group, make_department, make_attendance

COMPARE_URL = "/api/v1/face-match/compare"
CAPTURE = "https://i.ibb.co/capture/now.jpg"
PHOTO = "https://i.ibb.co/photo/aisyah.jpg"

# about 5 km north of 3.1,101.6
FAR_AWAY = {"latitude": 3.145, "longitude": 101.6}
NEARBY = {"latitude": 3.1005, "longitude": 101.6}


def compare_body(user, location=None):
    return {
        "capturedImageUrl": CAPTURE,
        "userId": user.user_id if user else "missing-user",
        "location": location or NEARBY
    }


def checked_in_today(db, user):
    return make_attendance(db, user, status="present", check_in_time=utc_now(), location="3.1,101.6")


def test_user_without_photo_is_not_matched(client, db, facepp):
    user = make_user(db, photo_url=None)

    response = client.post(COMPARE_URL, json=compare_body(user))

    assert response.status_code == 200
    assert response.json() == {"matched": False, "message": NO_REGISTERED_PHOTO}
    assert facepp.calls == []


def test_check_in_match_returns_user_and_confidence(client, db, facepp):
    user = make_user(db, first_name="Aisyah", middle_name="", last_name="Rahman")
    facepp.results[PHOTO] = {"confidence": 85}

    response = client.post(COMPARE_URL, json=compare_body(user))

    assert response.status_code == 200
    assert response.json() == {
        "matched": True,
        "user": {"user_id": user.user_id, "name": "Aisyah Rahman"},
        "confidence": 85
    }
    assert facepp.calls == [(CAPTURE, PHOTO)]


def test_check_out_outside_group_geofence_is_rejected(client, db, facepp):
    group = make_group(db, location="3.1,101.6", radius=200)
    user = make_user(db, group_id=group.group_id)
    checked_in_today(db, user)
    facepp.results[PHOTO] = {"confidence": 90}

    response = client.post(COMPARE_URL, json=compare_body(user, FAR_AWAY))

    body = response.json()
    assert response.status_code == 200
    assert body["matched"] is False
    assert "away (allowed: 200m)" in body["message"]


def test_check_out_inside_geofence_is_matched(client, db, facepp):
    group = make_group(db, location="3.1,101.6", radius=200)
    user = make_user(db, group_id=group.group_id)
    checked_in_today(db, user)
    facepp.results[PHOTO] = {"confidence": 90}

    response = client.post(COMPARE_URL, json=compare_body(user, NEARBY))

    assert response.json()["matched"] is True


def test_check_out_without_assigned_location_is_allowed_anywhere(client, db, facepp):
    user = make_user(db)
    checked_in_today(db, user)
    facepp.results[PHOTO] = {"confidence": 90}

    response = client.post(COMPARE_URL, json=compare_body(user, {"latitude": -33.86, "longitude": 151.2}))

    assert response.json()["matched"] is True


def test_group_radius_applies_even_when_department_is_stricter(client, db, facepp):
    group = make_group(db, location="3.1,101.6", radius=800)
    department = make_department(db, location=None, radius=50)
    user = make_user(db, group_id=group.group_id, department_id=department.department_id)
    checked_in_today(db, user)
    facepp.results[PHOTO] = {"confidence": 90}

    # roughly 560 m from the group location
    response = client.post(COMPARE_URL, json=compare_body(user, {"latitude": 3.105, "longitude": 101.6}))

    assert response.json()["matched"] is True


def test_check_in_skips_geofence(client, db, facepp):
    group = make_group(db, location="3.1,101.6", radius=200)
    user = make_user(db, group_id=group.group_id)
    facepp.results[PHOTO] = {"confidence": 90}

    response = client.post(COMPARE_URL, json=compare_body(user, FAR_AWAY))

    assert response.json()["matched"] is True


@pytest.mark.parametrize("confidence, matched", [(70, False), (70.0001, True), (69.9, False), (99, True)])
def test_confidence_threshold_is_strict(client, db, facepp, confidence, matched):
    user = make_user(db)
    facepp.results[PHOTO] = {"confidence": confidence}

    body = client.post(COMPARE_URL, json=compare_body(user)).json()

    assert body["matched"] is matched
    if not matched:
        assert body["message"] == NO_MATCH


@pytest.mark.parametrize("missing, error", [
    ("capturedImageUrl", "No image URL provided"),
    ("userId", "No user ID provided"),
    ("location", "No location provided"),
])
def test_missing_input_is_rejected(client, db, facepp, missing, error):
    user = make_user(db)
    body = compare_body(user)
    del body[missing]

    response = client.post(COMPARE_URL, json=body)

    assert response.status_code == 400
    assert response.json() == {"error": error}


@pytest.mark.parametrize("location", [
    {"latitude": 3.1},
    {"longitude": 101.6},
    {"latitude": "abc", "longitude": 101.6},
    {"latitude": 3.1, "longitude": None},
    "3.1,101.6",
])
def test_incomplete_location_is_rejected(client, db, facepp, location):
    user = make_user(db)
    body = compare_body(user)
    body["location"] = location

    response = client.post(COMPARE_URL, json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "No location provided"}
    assert facepp.calls == []


def test_missing_credentials_is_configuration_error(client, db, facepp):
    facepp.configured = False
    user = make_user(db)

    response = client.post(COMPARE_URL, json=compare_body(user))

    assert response.status_code == 500
    assert response.json() == {"error": "Face++ API credentials not configured"}


def test_unknown_user_is_not_matched(client, db, facepp):
    response = client.post(COMPARE_URL, json=compare_body(None))

    assert response.status_code == 200
    assert response.json() == {"matched": False, "message": USER_NOT_FOUND}


def test_provider_failure_is_soft(client, db, facepp):
    user = make_user(db)
    facepp.results[PHOTO] = ProviderError("Face++ request failed")

    response = client.post(COMPARE_URL, json=compare_body(user))

    assert response.status_code == 200
    assert response.json() == {"matched": False, "message": COMPARE_FAILED}


def test_provider_error_message_is_soft(client, db, facepp):
    user = make_user(db)
    facepp.results[PHOTO] = {"error_message": "INVALID_IMAGE_URL"}

    response = client.post(COMPARE_URL, json=compare_body(user))

    assert response.status_code == 200
    assert response.json() == {"matched": False, "message": PROVIDER_ERROR}


def test_unexpected_error_is_soft(client, db, facepp):
    user = make_user(db)
    facepp.results[PHOTO] = RuntimeError("connection reset")

    response = client.post(COMPARE_URL, json=compare_body(user))

    assert response.status_code == 200
    assert response.json() == {"matched": False, "message": COMPARE_FAILED}


def test_compare_does_not_write_attendance(client, db, facepp):
    user = make_user(db)
    facepp.results[PHOTO] = {"confidence": 95}

    client.post(COMPARE_URL, json=compare_body(user))

    assert db.query(Attendance).count() == 0
