from .conftest import SUM_CODE, ZERO_CODE, bearer, seed_question


def grade_as(client, headers, code, question_id="q1", **extra):
    payload = {"contestId": "c1", "questionId": question_id, "language": "python3", "code": code}
    payload.update(extra)
    return client.post("/run", json=payload, headers=headers).json()["submissionId"]


def test_list_only_own_submissions(client, db, user_headers):
    seed_question(db, [("2 3", "5")])
    mine = grade_as(client, user_headers, SUM_CODE)
    grade_as(client, bearer("user-2"), SUM_CODE)

    resp = client.get("/submissions/", headers=user_headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == mine
    assert data["items"][0]["status"] == "correct"
    assert data["items"][0]["testSummary"] == {"passedCount": 1, "total": 1}


def test_list_filters(client, db, user_headers):
    seed_question(db, [("2 3", "5")])
    seed_question(db, [("1 1", "2")], question_id="q2")
    grade_as(client, user_headers, SUM_CODE)
    grade_as(client, user_headers, ZERO_CODE)
    grade_as(client, user_headers, SUM_CODE, question_id="q2")

    by_status = client.get("/submissions/", params={"status": "incorrect"}, headers=user_headers).json()
    by_question = client.get("/submissions/", params={"question_id": "q2"}, headers=user_headers).json()
    paged = client.get("/submissions/", params={"limit": 2}, headers=user_headers).json()

    assert by_status["total"] == 1
    assert by_question["total"] == 1
    assert by_question["items"][0]["questionId"] == "q2"
    assert paged["total"] == 3
    assert len(paged["items"]) == 2


def test_impersonated_submission_visible_to_target(client, db, admin_headers):
    seed_question(db, [("2 3", "5")])
    payload = {"contestId": "c1", "questionId": "q1", "language": "python3", "code": SUM_CODE, "targetUserId": "user-5"}
    sid = client.post("/api/admin/impersonate", json=payload, headers=admin_headers).json()["submissionId"]

    detail = client.get(f"/submissions/{sid}", headers=bearer("user-5")).json()

    assert detail["code"] == SUM_CODE
    assert detail["triggeredBy"] == "admin-1"
    assert detail["createdByAdmin"] == "admin-1"
    assert detail["results"][0]["passed"] is True


def test_detail_of_other_users_submission_is_404(client, db, user_headers):
    seed_question(db, [("2 3", "5")])
    sid = grade_as(client, bearer("user-2"), SUM_CODE)

    resp = client.get(f"/submissions/{sid}", headers=user_headers)

    assert resp.status_code == 404


def test_history_requires_token(client):
    assert client.get("/submissions/").status_code == 401
