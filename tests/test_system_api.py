def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_config_exposes_limits(client):
    data = client.get("/api/config").json()
    assert data["max_code_chars"] == 200000
    assert data["max_output_chars"] == 10000


def test_execute_returns_normalized_output(client, user_headers, fake_runner):
    resp = client.post(
        "/execute",
        json={"language": "python3", "code": "print(sum(map(int, input().split())))", "stdin": "4 5"},
        headers=user_headers,
    )

    assert resp.status_code == 200
    assert resp.json() == {"stdout": "9\n", "stderr": "", "exitCode": 0}
    assert fake_runner.calls[0]["version"] == "*"


def test_execute_runner_failure_is_502(client, user_headers, fake_runner):
    fake_runner.fail_status["boom"] = 503

    resp = client.post("/execute", json={"language": "python3", "code": "print(1)", "stdin": "boom"}, headers=user_headers)

    assert resp.status_code == 502
    assert resp.json()["detail"] == "Runner error 503"


def test_execute_requires_token(client):
    resp = client.post("/execute", json={"language": "python3", "code": "print(1)"})
    assert resp.status_code == 401


def test_execute_missing_language(client, user_headers):
    resp = client.post("/execute", json={"code": "print(1)"}, headers=user_headers)
    assert resp.status_code == 400
