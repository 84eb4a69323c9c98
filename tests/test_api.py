from datetime import date, timedelta
import io

from PIL import Image


def tomorrow():
    return (date.today() + timedelta(days=1)).isoformat()


def book(client, patient, nurse_id, service_type="Consultation", price=500):
    res = client.post(
        "/appointments",
        json={
            "nurseId": nurse_id,
            "serviceType": service_type,
            "servicePrice": price,
            "appointmentDate": tomorrow(),
            "appointmentTime": "10:00 AM",
            "paymentMethod": "cash",
            "insuranceCoverage": False,
        },
        headers=patient["headers"],
    )
    assert res.status_code == 201, res.text
    return res.json()


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
    assert body["auth"]["secret_key_configured"] is True


def test_signup_login_and_me(client, api):
    patient = api.signup("Alice", "alice@example.com")
    assert patient["account"]["role"] == "patient"
    assert "passwordHash" not in patient["account"]
    assert patient["nurseId"] is None

    res = client.post("/auth/login", json={"email": "ALICE@example.com", "password": "password123"})
    assert res.status_code == 200
    assert res.cookies.get("access_token")
    token = res.json()["accessToken"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"


def test_cookie_authenticates_without_header(client, api):
    api.signup("Alice", "alice@example.com")
    res = client.get("/auth/me")
    assert res.status_code == 200

    client.post("/auth/logout")
    client.cookies.clear()
    res = client.get("/auth/me")
    assert res.status_code == 401
    assert res.json()["success"] is False


def test_signup_errors(client, api):
    api.signup("Alice", "alice@example.com")
    dup = client.post("/auth/signup", json={"name": "A", "email": "alice@example.com", "password": "password123"})
    assert dup.status_code == 409

    bad = client.post("/auth/signup", json={"name": "B", "email": "b@example.com", "password": "password123", "role": "admin"})
    assert bad.status_code == 400
    assert "role" in bad.json()["fields"]


def test_login_failures_are_rate_limited(client, api):
    api.signup("Alice", "alice@example.com")
    statuses = [
        client.post("/auth/login", json={"email": "alice@example.com", "password": "wrong-password"}).status_code
        for _ in range(11)
    ]
    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429


def test_nurse_signup_creates_listing(client, api):
    nurse = api.signup("Priya", "priya@example.com", role="nurse")
    assert nurse["nurseId"]

    res = client.get(f"/nurses/{nurse['nurseId']}", headers=nurse["headers"])
    assert res.status_code == 200
    body = res.json()
    assert body["rating"] == 4.5
    assert body["licenseNumber"] == "PENDING"
    assert body["reviews"] == []


def test_book_accept_complete_rate(client, api):
    patient = api.signup("Pat", "pat@example.com")
    nurse = api.signup("Nina", "nina@example.com", role="nurse")
    admin = api.admin()

    appt = book(client, patient, nurse["nurseId"])
    assert appt["status"] == "pending"
    assert appt["nurseName"] == "Nina"

    pending = client.get("/appointments/nurse/pending", headers=nurse["headers"]).json()
    assert [a["id"] for a in pending] == [appt["id"]]

    res = client.put(f"/appointments/{appt['id']}/accept", headers=nurse["headers"])
    assert res.status_code == 200
    assert res.json()["status"] == "confirmed"

    res = client.put(f"/appointments/{appt['id']}/complete", headers=admin["headers"])
    assert res.json()["status"] == "completed"

    res = client.post(f"/appointments/{appt['id']}/rate", json={"rating": 4, "feedback": "Kind and punctual"}, headers=patient["headers"])
    assert res.status_code == 200
    assert res.json()["rating"] == 4

    listing = client.get(f"/nurses/{nurse['nurseId']}", headers=patient["headers"]).json()
    assert listing["rating"] == 4.0
    assert listing["reviewCount"] == 1
    assert listing["reviews"][0]["reviewerName"] == "Pat"

    again = client.post(f"/appointments/{appt['id']}/rate", json={"rating": 5}, headers=patient["headers"])
    assert again.status_code == 409


def test_cancel_then_accept_is_invalid_state(client, api):
    patient = api.signup("Pat", "pat@example.com")
    nurse = api.signup("Nina", "nina@example.com", role="nurse")
    appt = book(client, patient, nurse["nurseId"])

    res = client.put(f"/appointments/{appt['id']}/cancel", headers=patient["headers"])
    assert res.json()["status"] == "cancelled"

    res = client.put(f"/appointments/{appt['id']}/accept", headers=nurse["headers"])
    assert res.status_code == 409
    body = res.json()
    assert body["success"] is False
    assert body["currentStatus"] == "cancelled"


def test_other_patient_cannot_cancel(client, api):
    patient = api.signup("Pat", "pat@example.com")
    intruder = api.signup("Eve", "eve@example.com")
    nurse = api.signup("Nina", "nina@example.com", role="nurse")
    appt = book(client, patient, nurse["nurseId"])

    res = client.put(f"/appointments/{appt['id']}/cancel", headers=intruder["headers"])
    assert res.status_code == 403
    assert appt["id"] not in res.text

    res = client.get(f"/appointments/{appt['id']}", headers=patient["headers"])
    assert res.json()["status"] == "pending"


def test_rate_before_completion_is_rejected(client, api):
    patient = api.signup("Pat", "pat@example.com")
    nurse = api.signup("Nina", "nina@example.com", role="nurse")
    appt = book(client, patient, nurse["nurseId"])

    res = client.post(f"/appointments/{appt['id']}/rate", json={"rating": 5}, headers=patient["headers"])
    assert res.status_code == 409
    assert res.json()["currentStatus"] == "pending"


def test_booking_validation_errors(client, api):
    patient = api.signup("Pat", "pat@example.com")
    nurse = api.signup("Nina", "nina@example.com", role="nurse")

    res = client.post("/appointments", json={"nurseId": nurse["nurseId"], "serviceType": "Emergency", "servicePrice": 500}, headers=patient["headers"])
    assert res.status_code == 400
    assert set(res.json()["fields"]) == {"servicePrice", "appointmentDate", "appointmentTime"}

    res = client.post("/appointments", json={"nurseId": "missing", "serviceType": "Consultation", "servicePrice": 500,
                                             "appointmentDate": tomorrow(), "appointmentTime": "9"}, headers=patient["headers"])
    assert res.status_code == 404


def test_unknown_appointment_is_not_found(client, api):
    nurse = api.signup("Nina", "nina@example.com", role="nurse")
    res = client.put("/appointments/does-not-exist/accept", headers=nurse["headers"])
    assert res.status_code == 404


def test_nurse_directory_management(client, api):
    nurse = api.signup("Nina", "nina@example.com", role="nurse")
    patient = api.signup("Pat", "pat@example.com")

    res = client.put("/nurses/me", json={"hourlyRate": "650", "experience": "7 years"}, headers=nurse["headers"])
    assert res.status_code == 200
    assert res.json()["hourlyRate"] == "650"

    assert client.get("/nurses/me", headers=patient["headers"]).status_code == 403

    listed = client.get("/nurses", headers=patient["headers"]).json()
    assert [n["id"] for n in listed] == [nurse["nurseId"]]

    client.put("/nurses/me/availability", json={"isActive": False}, headers=nurse["headers"])
    assert client.get("/nurses", headers=patient["headers"]).json() == []

    res = client.get("/nurses?sort=cheapest", headers=patient["headers"])
    assert res.status_code == 400


def test_profile_update_history_and_image(client, api):
    patient = api.signup("Pat", "pat@example.com")
    nurse = api.signup("Nina", "nina@example.com", role="nurse")

    res = client.put("/profile", json={"city": "Pune", "dob": "1990-02-03", "emergencyContact": "Sam"}, headers=patient["headers"])
    assert res.status_code == 200
    assert res.json()["city"] == "Pune"
    assert res.json()["emergencyContact"] == "Sam"

    book(client, patient, nurse["nurseId"])
    history = client.get("/profile/history", headers=patient["headers"]).json()
    assert history[0]["category"] == "appointment"

    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color=(0, 128, 255)).save(buf, format="PNG")
    res = client.post("/profile/image", files={"image": ("me.png", buf.getvalue(), "image/png")}, headers=patient["headers"])
    assert res.status_code == 200
    url = res.json()["profileImage"]
    assert url.startswith("/uploads/profile/")
    assert client.get(url).status_code == 200


def test_nurse_name_change_updates_listing_not_snapshot(client, api):
    patient = api.signup("Pat", "pat@example.com")
    nurse = api.signup("Nina", "nina@example.com", role="nurse")
    appt = book(client, patient, nurse["nurseId"])

    client.put("/profile", json={"name": "Nina Rao", "specialization": "Wound Care"}, headers=nurse["headers"])

    listing = client.get(f"/nurses/{nurse['nurseId']}", headers=patient["headers"]).json()
    assert listing["name"] == "Nina Rao"
    assert listing["specialization"] == "Wound Care"
    snapshot = client.get(f"/appointments/{appt['id']}", headers=patient["headers"]).json()
    assert snapshot["nurseName"] == "Nina"


def test_run_launches_uvicorn_with_configured_bind(monkeypatch):
    import uvicorn
    from wecare import main
    from wecare.config import settings

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
    monkeypatch.setattr(settings, "PORT", 9100)
    monkeypatch.setattr(settings, "WORKERS", 2)

    main.run()

    target, kwargs = calls[0]
    assert target == "wecare.main:app"
    assert kwargs["host"] == settings.HOST
    assert kwargs["port"] == 9100
    assert kwargs["workers"] == 2
    assert kwargs["log_level"] == settings.LOG_LEVEL.lower()
