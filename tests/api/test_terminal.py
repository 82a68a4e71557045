"""API smoke tests for terminal connectivity endpoints."""


async def test_status_defaults_online(client):
    resp = await client.get("/api/terminal/status")
    assert resp.json() == {"connectivity": "online", "pending_count": 0, "drained": None}


async def test_offline_queue_then_drain(client, config_payload, memory_store):
    await client.put("/api/feria/active", json=config_payload)

    resp = await client.post("/api/terminal/connectivity", json={"online": False})
    assert resp.json()["connectivity"] == "offline"

    resp = await client.post(
        "/api/sales",
        json={"items": [{"style": "IPA", "unit": "Pinta", "quantity": 1}], "payment_method": "$ Billete"},
    )
    body = resp.json()
    assert body["queued"] is True
    assert body["sale"]["id"].startswith("temp-")
    assert memory_store.sales == {}

    resp = await client.get("/api/terminal/status")
    assert resp.json()["pending_count"] == 1

    resp = await client.post("/api/terminal/connectivity", json={"online": True})
    assert resp.json() == {"connectivity": "online", "pending_count": 0, "drained": 1}
    assert len(memory_store.sales) == 1
