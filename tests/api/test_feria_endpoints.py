"""API smoke tests for fair lifecycle endpoints."""


class TestActiveFeria:
    async def test_no_active_fair(self, client):
        resp = await client.get("/api/feria/active")
        assert resp.status_code == 200
        assert resp.json() == {"status": "no_active_feria", "config": None}

    async def test_save_and_read(self, client, config_payload):
        resp = await client.put("/api/feria/active", json=config_payload)
        assert resp.status_code == 200
        assert resp.json()["status"] == "feria_active"

        resp = await client.get("/api/feria/active")
        config = resp.json()["config"]
        assert config["name"] == "Feria de Otoño"
        assert config["initial_stock"] == {"IPA": 20.0, "Stout": 30.0}

    async def test_invalid_dates_rejected(self, client, config_payload):
        config_payload["date_end"] = "2024-10-01"

        resp = await client.put("/api/feria/active", json=config_payload)

        assert resp.status_code == 400
        assert resp.json()["error_code"] == "VALIDATION_ERROR"

    async def test_report_without_fair(self, client):
        resp = await client.get("/api/feria/active/report")
        assert resp.status_code == 409
        body = resp.json()
        assert body["error_code"] == "NO_ACTIVE_FERIA"
        assert body["path"] == "/api/feria/active/report"
        assert body["retryable"] is False

    async def test_live_report(self, client, config_payload):
        await client.put("/api/feria/active", json=config_payload)
        await client.post(
            "/api/sales",
            json={"items": [{"style": "IPA", "unit": "Pinta", "quantity": 5}], "payment_method": "$ Digital"},
        )

        resp = await client.get("/api/feria/active/report")

        assert resp.status_code == 200
        body = resp.json()
        assert body["sale_count"] == 1
        assert body["report"]["total_amount"] == 15000
        ipa = next(s for s in body["report"]["stock_summary"] if s["style"] == "IPA")
        assert ipa["percentage"] == 88


class TestArchiveFlow:
    async def test_archive_without_fair(self, client):
        resp = await client.post("/api/feria/active/archive")
        assert resp.status_code == 409

    async def test_archive_list_activate_delete(self, client, config_payload, memory_store):
        await client.put("/api/feria/active", json=config_payload)
        for _ in range(3):
            await client.post(
                "/api/sales",
                json={"items": [{"style": "Stout", "unit": "Litro", "quantity": 1}], "payment_method": "$ Billete"},
            )

        resp = await client.post("/api/feria/active/archive")
        assert resp.status_code == 200
        archived = resp.json()
        assert len(archived["sales"]) == 3
        assert archived["report"]["cash_amount"] == 18000
        assert memory_store.sales == {}

        resp = await client.get("/api/feria/history")
        assert resp.json()["total"] == 1
        assert resp.json()["ferias"][0]["name"] == "Feria de Otoño"

        resp = await client.get(f"/api/feria/history/{archived['id']}/report")
        assert resp.json()["total_amount"] == 18000

        resp = await client.post(f"/api/feria/history/{archived['id']}/activate")
        assert resp.status_code == 200
        assert resp.json()["config"]["name"] == "Feria de Otoño"
        assert len(memory_store.sales) == 3

        resp = await client.delete(f"/api/feria/history/{archived['id']}")
        assert resp.status_code == 204
        assert (await client.get("/api/feria/active")).json()["status"] == "feria_active"

    async def test_unknown_history(self, client):
        for method, path in [
            ("GET", "/api/feria/history/missing"),
            ("GET", "/api/feria/history/missing/report"),
            ("POST", "/api/feria/history/missing/activate"),
            ("DELETE", "/api/feria/history/missing"),
        ]:
            resp = await client.request(method, path)
            assert resp.status_code == 404, path
            assert resp.json()["error_code"] == "HISTORICAL_FERIA_NOT_FOUND"

    async def test_failed_step_reported(self, client, config_payload, memory_store):
        await client.put("/api/feria/active", json=config_payload)
        memory_store.fail("save_history")

        resp = await client.post("/api/feria/active/archive")

        assert resp.status_code == 502
        body = resp.json()
        assert body["error_code"] == "LIFECYCLE_STEP_FAILED"
        assert "save_history" in body["detail"]
        assert body["retryable"] is True
