"""
Application wiring: health check and error envelopes.
"""


def test_health(api):
    response = api.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unknown_route_uses_envelope(api):
    response = api.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


def test_malformed_body_is_400_with_field(api):
    response = api.post("/campaign/delete", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"].startswith("campaignId")


def test_run_serves_app_with_uvicorn(monkeypatch):
    from campaign_desk import main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    main.run()

    assert calls == [(
        "campaign_desk.main:app",
        {"host": main.settings.host, "port": main.settings.port, "reload": main.settings.debug},
    )]
