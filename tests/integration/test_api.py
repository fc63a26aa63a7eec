from faker import Faker
from fastapi.testclient import TestClient

from services.registry_service.app.api.dependencies import get_member_service
from services.registry_service.app.main import app

fake = Faker()


def record_body(national_id: str, **overrides) -> dict:
    body = {
        "full_name": fake.name(),
        "national_id": national_id,
        "status": "Retiree",
        "is_active_member": True,
        "birth_date": "10/05/1960",
        "phone": "0412-1234567",
    }
    body.update(overrides)
    return body


def create(client, national_id: str, **overrides) -> dict:
    response = client.post("/records", json=record_body(national_id, **overrides))
    assert response.status_code == 201, response.text
    return response.json()["record"]


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_record_workflow(client):
    """
    Tests the full lifecycle of a record: create, get, update, list and delete.
    """
    created = create(client, "V-12.345.678")
    assert created["national_id"] == "V-12345678"
    assert created["birth_date"] == "1960-05-10"
    assert created["status"] == "Retiree"

    response = client.get(f"/records/{created['id']}")
    assert response.status_code == 200
    assert response.json()["record"]["id"] == created["id"]

    response = client.put(
        f"/records/{created['id']}",
        json=record_body("V-12345678", status="Survivor", deceased_name="Pedro", death_date="01/01/2020"),
    )
    assert response.status_code == 200
    assert response.json()["record"]["death_date"] == "2020-01-01"

    response = client.delete(f"/records/{created['id']}")
    assert response.status_code == 200
    assert "message" in response.json()

    response = client.get("/records")
    assert response.status_code == 200
    assert response.json() == {"rows": []}


def test_correlation_id_header(client):
    response = client.get("/records", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_list_is_ordered_by_national_id_number(client):
    for national_id in ["V-9.000.000", "E-10.000.000", "V-500"]:
        create(client, national_id)

    rows = client.get("/records").json()["rows"]
    assert [r["national_id"] for r in rows] == ["V-500", "V-9000000", "E-10000000"]


def test_missing_required_field_is_400(client):
    body = record_body("V-1")
    del body["full_name"]

    response = client.post("/records", json=body)

    assert response.status_code == 400
    assert "full_name" in response.json()["error"]


def test_unknown_field_is_400(client):
    response = client.post("/records", json=record_body("V-1", favourite_colour="blue"))
    assert response.status_code == 400
    assert "error" in response.json()


def test_invalid_date_is_400(client):
    response = client.post("/records", json=record_body("V-1", birth_date="31/02/2024"))
    assert response.status_code == 400


def test_duplicate_national_id_is_409(client):
    create(client, "V-12.345.678")

    response = client.post("/records", json=record_body("V-12345678"))

    assert response.status_code == 409
    assert "already exists" in response.json()["error"]
    assert len(client.get("/records").json()["rows"]) == 1


def test_survivor_without_death_date_is_400(client):
    created = create(client, "V-42")

    response = client.put(f"/records/{created['id']}", json=record_body("V-42", status="Survivor"))
    assert response.status_code == 400
    assert "death_date" in response.json()["error"]

    response = client.put(
        f"/records/{created['id']}", json=record_body("V-42", status="Survivor", death_date="01/01/2020")
    )
    assert response.status_code == 200


def test_missing_record_is_404(client):
    assert client.get("/records/999").status_code == 404
    assert client.put("/records/999", json=record_body("V-1")).status_code == 404
    response = client.delete("/records/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Record 999 not found"}


def test_delete_keeps_other_records(client):
    ids = [create(client, f"V-{n}")["id"] for n in (1, 2, 3)]

    assert client.delete(f"/records/{ids[1]}").status_code == 200

    remaining = [r["id"] for r in client.get("/records").json()["rows"]]
    assert remaining == [ids[0], ids[2]]


def test_bulk_delete_halts_at_first_failure(client):
    ids = [create(client, f"V-{n}")["id"] for n in (1, 2, 3)]

    response = client.post("/records/bulk-delete", json={"ids": [ids[0], 999, ids[2]]})

    assert response.status_code == 404
    body = response.json()
    assert body["failed_id"] == 999
    assert body["deleted"] == [ids[0]]
    remaining = [r["id"] for r in client.get("/records").json()["rows"]]
    assert remaining == [ids[1], ids[2]]


def test_bulk_delete_success(client):
    ids = [create(client, f"V-{n}")["id"] for n in (1, 2)]

    response = client.post("/records/bulk-delete", json={"ids": ids})

    assert response.status_code == 200
    assert response.json() == {"deleted": ids}


def test_search(client):
    create(client, "V-12.345.678", full_name="Maria Rodriguez")
    create(client, "E-87.654.321", full_name="Juan Perez")

    rows = client.get("/records/search", params={"q": "rodri"}).json()["rows"]
    assert [r["full_name"] for r in rows] == ["Maria Rodriguez"]


def test_report_pdf(client):
    create(client, "V-1")
    create(client, "V-2", is_active_member=False)

    response = client.get("/reports/retirees")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["X-Page-Count"] == "1"
    assert response.content.startswith(b"%PDF")


def test_empty_report_is_404(client):
    create(client, "V-1")

    response = client.get("/reports/deceased")

    assert response.status_code == 404
    assert "error" in response.json()


def test_birthday_report(client):
    create(client, "V-1", birth_date="10/05/1960")

    assert client.get("/reports/birthdays", params={"day_month": "10/05"}).status_code == 200
    assert client.get("/reports/birthdays", params={"day_month": "11/05"}).status_code == 404
    assert client.get("/reports/birthdays").status_code == 400
    assert client.get("/reports/birthdays", params={"day_month": "32/01"}).status_code == 400


def test_unknown_report_is_400(client):
    assert client.get("/reports/everyone").status_code == 400


def test_unexpected_error_returns_json_500(client):
    def broken_service():
        raise RuntimeError("boom")

    app.dependency_overrides[get_member_service] = broken_service
    # The test client would otherwise re-raise the error instead of returning the response
    response = TestClient(app, raise_server_exceptions=False).get("/records")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
