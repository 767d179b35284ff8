from datetime import datetime, time

from app.core import clock
from app.core.exceptions import ProviderError
from app.api.v1.endpoints import face_match as face_match_endpoints
from app.models import Attendance
from tests.conftest import make_user, make_group, make_attendance

SCAN_URL = "/api/v1/face-match/scan"
CAPTURE = "https://i.ibb.co/capture/kiosk.jpg"
PHOTO = "https://i.ibb.co/photo/aisyah.jpg"
OFFICE = {"latitude": 3.1, "longitude": 101.6}


def at_local(hour, minute):
    """UTC moment for a local wall-clock time on the current local day"""
    day = clock.local_today()
    return datetime(day.year, day.month, day.day, hour, minute) - clock.local_offset()


def scan_body(location=None, url=CAPTURE):
    return {"capturedImageUrl": url, "userLocation": location or OFFICE}


def office_user(db, **fields):
    group = make_group(db, location="3.1,101.6", radius=200, start_time=time(9, 0), end_time=time(17, 0))
    return make_user(db, group_id=group.group_id, **fields)


def test_untrusted_image_host_is_rejected(client, db, facepp):
    response = client.post(SCAN_URL, json=scan_body(url="https://evil.example.com/face.jpg"))

    assert response.status_code == 400
    assert response.json() == {"error": "Image URL from untrusted domain"}


def test_out_of_range_coordinates_fail_validation(client, db, facepp):
    response = client.post(SCAN_URL, json=scan_body({"latitude": 91, "longitude": 101.6}))

    assert response.status_code == 422


def test_missing_credentials_is_configuration_error(client, db, facepp):
    facepp.configured = False

    response = client.post(SCAN_URL, json=scan_body())

    assert response.status_code == 500
    assert response.json() == {"error": "Face++ API credentials not configured"}


def test_no_registered_users(client, db, facepp):
    make_user(db, photo_url=None)

    response = client.post(SCAN_URL, json=scan_body())

    assert response.status_code == 404
    assert response.json() == {"error": "No registered users found"}


def test_unrecognised_face(client, db, facepp):
    office_user(db)
    facepp.results[PHOTO] = {"confidence": 40, "thresholds": {"1e-3": 62.327}}

    response = client.post(SCAN_URL, json=scan_body())

    assert response.status_code == 200
    assert response.json() == {"matched": False, "message": "User not found"}


def test_provider_threshold_is_used_when_present(client, db, facepp):
    office_user(db)
    facepp.results[PHOTO] = {"confidence": 65, "thresholds": {"1e-3": 70}}

    assert client.post(SCAN_URL, json=scan_body()).json()["matched"] is False


def test_default_threshold_without_provider_thresholds(client, db, facepp):
    office_user(db)
    facepp.results[PHOTO] = {"confidence": 65}

    assert client.post(SCAN_URL, json=scan_body()).json()["matched"] is True


def test_check_in_before_start_creates_present_row(client, db, facepp, frozen_now):
    user = office_user(db)
    facepp.results[PHOTO] = {"confidence": 88}
    frozen_now(at_local(8, 30))

    response = client.post(SCAN_URL, json=scan_body())

    body = response.json()
    assert response.status_code == 200
    assert body["matched"] is True
    assert body["action"] == "check-in"
    assert body["status"] == "present"
    assert body["user"] == {"user_id": user.user_id, "name": "Aisyah Rahman"}

    record = db.query(Attendance).one()
    assert record.status == "present"
    assert record.location == "3.1,101.6"
    assert record.check_in_time is not None


def test_late_check_in_updates_the_absent_row(client, db, facepp, frozen_now):
    user = office_user(db)
    absent = make_attendance(db, user)
    facepp.results[PHOTO] = {"confidence": 88}
    frozen_now(at_local(9, 15))

    body = client.post(SCAN_URL, json=scan_body()).json()

    assert body["action"] == "check-in"
    assert body["status"] == "late"
    db.expire_all()
    record = db.query(Attendance).one()
    assert record.attendance_id == absent.attendance_id
    assert record.status == "late"


def test_check_out_before_end_is_early_out(client, db, facepp, frozen_now):
    user = office_user(db)
    make_attendance(db, user, status="present", check_in_time=at_local(8, 55))
    facepp.results[PHOTO] = {"confidence": 88}
    frozen_now(at_local(16, 0))

    body = client.post(SCAN_URL, json=scan_body()).json()

    assert body["action"] == "check-out"
    assert body["status"] == "early_out"
    db.expire_all()
    assert db.query(Attendance).one().check_out_time is not None


def test_check_out_after_end_keeps_late(client, db, facepp, frozen_now):
    user = office_user(db)
    make_attendance(db, user, status="late", check_in_time=at_local(9, 20))
    facepp.results[PHOTO] = {"confidence": 88}
    frozen_now(at_local(17, 30))

    body = client.post(SCAN_URL, json=scan_body()).json()

    assert body["action"] == "check-out"
    assert body["status"] == "late"


def test_location_mismatch_records_nothing(client, db, facepp):
    user = office_user(db, first_name="Farid", last_name="Hakim")
    facepp.results[PHOTO] = {"confidence": 88}

    response = client.post(SCAN_URL, json=scan_body({"latitude": 3.2, "longitude": 101.6}))

    body = response.json()
    assert response.status_code == 200
    assert body["matched"] is True
    assert body["error"] == "Location mismatch"
    assert body["action"] == "check-in"
    assert body["message"].endswith("Farid Hakim")
    assert db.query(Attendance).count() == 0
    assert user.user_id == body["user"]["user_id"]


def test_provider_failure_for_one_user_is_skipped(client, db, facepp):
    make_user(db, photo_url="https://i.ibb.co/photo/other.jpg", first_name="Other")
    user = make_user(db)
    facepp.results["https://i.ibb.co/photo/other.jpg"] = ProviderError("Face++ request failed")
    facepp.results[PHOTO] = {"confidence": 90}

    body = client.post(SCAN_URL, json=scan_body()).json()

    assert body["matched"] is True
    assert body["user"]["user_id"] == user.user_id


def test_concurrent_change_is_a_conflict(client, db, facepp, monkeypatch):
    user = office_user(db)
    make_attendance(db, user, status="present", check_in_time=clock.utc_now())
    facepp.results[PHOTO] = {"confidence": 88}
    repo = face_match_endpoints.face_match_service.attendance_service.attendance_repo
    monkeypatch.setattr(repo, "mark_check_out", lambda *args, **kwargs: False)

    response = client.post(SCAN_URL, json=scan_body())

    assert response.status_code == 409
    assert "error" in response.json()


def test_second_first_check_in_of_the_day_is_a_conflict(client, db, facepp, monkeypatch):
    user = office_user(db)
    facepp.results[PHOTO] = {"confidence": 88}
    assert client.post(SCAN_URL, json=scan_body()).json()["action"] == "check-in"

    # Both requests read "no row yet" before either inserted
    attendance = face_match_endpoints.face_match_service.attendance_service
    monkeypatch.setattr(attendance, "get_today_record", lambda db, user_id: None)

    response = client.post(SCAN_URL, json=scan_body())

    assert response.status_code == 409
    assert response.json() == {"error": "Attendance was already checked in. Please try again."}
    rows = db.query(Attendance).filter(Attendance.user_id == user.user_id).all()
    assert len(rows) == 1
    assert rows[0].attendance_date == clock.local_today()


def test_malformed_assigned_location_is_reported_not_raised(client, db, facepp):
    group = make_group(db, location="not-a-location", radius=200, start_time=time(9, 0))
    make_user(db, group_id=group.group_id)
    facepp.results[PHOTO] = {"confidence": 88}

    response = client.post(SCAN_URL, json=scan_body())

    body = response.json()
    assert response.status_code == 200
    assert body["matched"] is True
    assert body["action"] == "check-in"
    assert body["error"] == "Location unverifiable"
    assert body["message"] == "Unable to verify your assigned location. Please check with admin."
    assert db.query(Attendance).count() == 0
