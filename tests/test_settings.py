# tests/test_settings.py
from app.core.config import Settings


def test_defaults_to_sql(client):
    r = client.get("/settings/")
    assert r.status_code == 200
    data = r.json()
    assert data["data_source"] == "sql"
    assert data["is_configured"] is True
    assert data["notion_configured"] is False


def test_switch_to_unconfigured_notion_reports_backend_error(client):
    r = client.put("/settings/data-source", json={"data_source": "notion"})
    assert r.status_code == 200
    assert r.json() == {
        "data_source": "notion",
        "is_configured": False,
        "notion_configured": False,
        "sql_configured": True,
    }

    r = client.get("/tickets/")
    assert r.status_code == 502
    assert "Notion token not configured" in r.json()["detail"]

    client.put("/settings/data-source", json={"data_source": "sql"})
    assert client.get("/tickets/").status_code == 200


def test_rejects_unknown_data_source(client):
    r = client.put("/settings/data-source", json={"data_source": "airtable"})
    assert r.status_code == 422


def test_settings_helpers():
    settings = Settings(
        _env_file=None,
        CORS_ORIGINS="http://a.test, http://b.test",
        NOTION_TOKEN="secret",
        NOTION_DATABASE_ID="db",
    )
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.is_configured("notion")
    assert Settings(_env_file=None, CORS_ORIGINS=None).cors_origins == ["*"]
