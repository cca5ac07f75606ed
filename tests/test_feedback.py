# tests/test_feedback.py
from datetime import date, datetime, timezone

from app.feedback.models import Feedback
from app.feedback.services import shipping_date_for


def today():
    return datetime.now(timezone.utc).date().isoformat()


def new_feedback(client, **overrides):
    payload = {"ticket_id": 101, "platform": "Intercom", "product": "Cash", "description": "Add CSV export"}
    payload.update(overrides)
    r = client.post("/feedback/", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_shipping_date_rule():
    assert shipping_date_for(True, None, today=date(2024, 5, 1)) == date(2024, 5, 1)
    assert shipping_date_for(True, date(2024, 4, 2), today=date(2024, 5, 1)) == date(2024, 4, 2)
    assert shipping_date_for(False, date(2024, 4, 2)) is None
    assert shipping_date_for(None, date(2024, 4, 2)) is None


def test_create_and_get_feedback(client):
    created = new_feedback(client)
    r = client.get(f"/feedback/{created['id']}")
    assert r.status_code == 200
    data = r.json()
    assert data["ticket_id"] == 101
    assert data["platform"] == "Intercom"
    assert data["product"] == "Cash"
    assert data["shipped"] is None
    assert data["shipping_date"] is None


def test_intercom_feedback_needs_ticket(client):
    r = client.post("/feedback/", json={"platform": "Intercom", "description": "x"})
    assert r.status_code == 422

    r = client.post("/feedback/", json={"platform": "Discord", "description": "x"})
    assert r.status_code == 201
    assert r.json()["ticket_id"] is None

    r = client.post("/feedback/", json={"platform": "Telegram", "ticket_id": 1})
    assert r.status_code == 422


def test_create_shipped_sets_date(client):
    data = new_feedback(client, shipped=True)
    assert data["shipping_date"] == today()

    data = new_feedback(client, shipped=False, shipping_date="2024-01-01")
    assert data["shipping_date"] is None


def test_update_shipping_flow(client):
    created = new_feedback(client)
    fid = created["id"]

    r = client.put(f"/feedback/{fid}", json={"shipped": True})
    assert r.status_code == 200
    assert r.json()["shipping_date"] == today()

    r = client.put(f"/feedback/{fid}", json={"shipping_date": "2024-02-03"})
    assert r.json()["shipping_date"] == "2024-02-03"

    r = client.put(f"/feedback/{fid}", json={"shipped": False})
    assert r.json()["shipped"] is False
    assert r.json()["shipping_date"] is None


def test_update_keeps_unsupplied_fields(client):
    created = new_feedback(client, core_team_acknowledgement=True)
    r = client.put(f"/feedback/{created['id']}", json={"description": "Add PDF export"})
    data = r.json()
    assert data["description"] == "Add PDF export"
    assert data["product"] == "Cash"
    assert data["core_team_acknowledgement"] is True

    r = client.put(f"/feedback/{created['id']}", json={"product": None, "platform": None})
    assert r.json()["product"] == ""
    assert r.json()["platform"] == "Intercom"


def test_feedback_not_found(client):
    assert client.get("/feedback/424242").status_code == 404
    assert client.get("/feedback/abc").status_code == 404
    r = client.put("/feedback/424242", json={"shipped": True})
    assert r.status_code == 404
    assert r.json()["detail"] == "Feedback not found"


def test_delete_and_bulk_delete(client):
    a = new_feedback(client)
    b = new_feedback(client, ticket_id=102)
    c = new_feedback(client, ticket_id=103)

    assert client.delete(f"/feedback/{a['id']}").status_code == 200
    assert client.get(f"/feedback/{a['id']}").status_code == 404

    r = client.post("/feedback/bulk-delete", json={"ids": [b["id"], c["id"]]})
    assert r.json()["affected"] == 2
    assert client.get("/feedback/").json() == []


def test_search_feedback(client):
    new_feedback(client, ticket_id=7, platform="Intercom", product="Cash", shipped=True)
    new_feedback(client, ticket_id=None, platform="Discord", product="Earn", description="Dark mode please",
                 core_team_acknowledgement=True)
    new_feedback(client, ticket_id=None, platform="X", product="Cash", description="Lower fees")

    r = client.post("/feedback/search", json={"platform": ["Discord", "X"]})
    assert {f["platform"] for f in r.json()} == {"Discord", "X"}

    r = client.post("/feedback/search", json={"product": ["Cash"]})
    assert {f["platform"] for f in r.json()} == {"Intercom", "X"}

    r = client.post("/feedback/search", json={"shipped": True})
    assert [f["ticket_id"] for f in r.json()] == [7]

    r = client.post("/feedback/search", json={"core_team_acknowledgement": True})
    assert [f["platform"] for f in r.json()] == ["Discord"]

    r = client.post("/feedback/search", json={"search_query": "DARK"})
    assert [f["platform"] for f in r.json()] == ["Discord"]

    r = client.post("/feedback/search", json={"search_query": "7"})
    assert [f["ticket_id"] for f in r.json()] == [7]


def test_search_feedback_date_range(client, db):
    db.add(Feedback(platform="X", created_at=datetime(2024, 3, 10, 22, 0)))
    db.add(Feedback(platform="X", created_at=datetime(2024, 3, 11, 1, 0)))
    db.commit()

    r = client.post("/feedback/search", json={"date_range": {"start": "2024-03-10", "end": "2024-03-10"}})
    assert len(r.json()) == 1


def test_unique_products(client):
    new_feedback(client, product="Earn")
    new_feedback(client, product="Cash")
    new_feedback(client, product="Cash")
    new_feedback(client, product="")
    assert client.get("/feedback/products").json() == ["Cash", "Earn"]


def test_update_keeps_intercom_ticket_rule(client):
    intercom = new_feedback(client)
    r = client.put(f"/feedback/{intercom['id']}", json={"ticket_id": None})
    assert r.status_code == 422
    assert r.json()["detail"] == "Ticket ID is required for Intercom platform"
    assert client.get(f"/feedback/{intercom['id']}").json()["ticket_id"] == 101

    discord = new_feedback(client, ticket_id=None, platform="Discord")
    r = client.put(f"/feedback/{discord['id']}", json={"platform": "Intercom"})
    assert r.status_code == 422
    assert client.get(f"/feedback/{discord['id']}").json()["platform"] == "Discord"

    r = client.put(f"/feedback/{discord['id']}", json={"platform": "Intercom", "ticket_id": 55})
    assert r.status_code == 200
    assert r.json()["ticket_id"] == 55


def test_out_of_range_feedback_ids(client):
    huge = "99999999999999999999"
    assert client.get(f"/feedback/{huge}").status_code == 404
    assert client.put(f"/feedback/{huge}", json={"shipped": True}).status_code == 404
    assert client.delete(f"/feedback/{huge}").status_code == 404

    r = client.post("/feedback/", json={"platform": "Intercom", "ticket_id": 2**64})
    assert r.status_code == 422

    r = client.post("/feedback/search", json={"search_query": huge})
    assert r.status_code == 200
    assert r.json() == []
