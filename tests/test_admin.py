from civic_issues.auth_utils import create_access_token
from civic_issues.models.models import Issue, StatusUpdate, Upvote


# -------------------------------------------------------
# Access
# -------------------------------------------------------

def test_admin_routes_require_login(client):
    for path in ("/admin/issues", "/admin/overview", "/admin/stats"):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


def test_admin_routes_forbid_regular_users(client, citizen):
    for path in ("/admin/issues", "/admin/overview", "/admin/stats"):
        response = client.get(path, headers=citizen["headers"])
        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}


def test_role_claim_in_token_is_not_trusted(client, citizen):
    forged = create_access_token({"user_id": citizen["user_id"], "role": "ADMIN"})
    response = client.get("/admin/issues", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 403


# -------------------------------------------------------
# Issue triage
# -------------------------------------------------------

def test_admin_lists_every_issue(client, make_issue, admin, neighbour, db_session):
    pending_id = make_issue(title="pending")
    make_issue(title="rejected", status="REJECTED")
    db_session.add(Upvote(issue_id=pending_id, user_id=neighbour["user_id"]))
    db_session.commit()

    response = client.get("/admin/issues", headers=admin["headers"])

    assert response.status_code == 200
    issues = {issue["title"]: issue for issue in response.json()}
    assert set(issues) == {"pending", "rejected"}
    assert issues["pending"]["reported_by"] == "Casey Citizen"
    assert issues["pending"]["upvote_count"] == 1


def test_admin_approves_with_priority(client, make_issue, admin, db_session):
    issue_id = make_issue()

    response = client.patch(
        f"/admin/issues/{issue_id}",
        json={"status": "APPROVED", "priority": "HIGH"},
        headers=admin["headers"],
    )

    assert response.status_code == 200
    assert response.json()["status"] == "APPROVED"
    assert response.json()["priority"] == "HIGH"

    detail = client.get(f"/admin/issues/{issue_id}", headers=admin["headers"]).json()
    assert detail["updates"][0]["status"] == "APPROVED"
    assert detail["updates"][0]["note"] == "Issue approved with high priority"
    assert len(detail["updates"]) == 2


def test_admin_transition_keeps_custom_note(client, make_issue, admin, db_session):
    issue_id = make_issue(status="APPROVED")

    client.patch(
        f"/admin/issues/{issue_id}",
        json={"status": "in_progress", "note": "Crew scheduled for Monday"},
        headers=admin["headers"],
    )

    latest = (
        db_session.query(StatusUpdate)
        .filter(StatusUpdate.issue_id == issue_id)
        .order_by(StatusUpdate.update_id.desc())
        .first()
    )
    assert latest.status == "IN_PROGRESS"
    assert latest.note == "Crew scheduled for Monday"


def test_admin_transition_requires_status(client, make_issue, admin):
    issue_id = make_issue()
    response = client.patch(f"/admin/issues/{issue_id}", json={"priority": "HIGH"}, headers=admin["headers"])
    assert response.status_code == 400
    assert response.json() == {"error": "Status is required"}


def test_admin_transition_unknown_issue(client, admin):
    response = client.patch("/admin/issues/999", json={"status": "APPROVED"}, headers=admin["headers"])
    assert response.status_code == 404
    assert response.json() == {"error": "Issue not found"}


def test_admin_transition_illegal_edge(client, make_issue, admin, db_session):
    issue_id = make_issue()

    response = client.patch(f"/admin/issues/{issue_id}", json={"status": "RESOLVED"}, headers=admin["headers"])

    assert response.status_code == 409
    assert response.json() == {"error": "Cannot move issue from PENDING to RESOLVED"}
    assert db_session.get(Issue, issue_id).status == "PENDING"
    assert db_session.query(StatusUpdate).filter(StatusUpdate.issue_id == issue_id).count() == 1


def test_anonymous_admin_patch_is_unauthorized(client):
    response = client.patch("/admin/issues/999", json={"status": "APPROVED"})
    assert response.status_code == 401


def test_admin_issue_detail_not_found(client, admin):
    assert client.get("/admin/issues/999", headers=admin["headers"]).status_code == 404


# -------------------------------------------------------
# Dashboard
# -------------------------------------------------------

def test_overview_counts(client, make_issue, admin):
    make_issue(priority="URGENT")
    make_issue(priority="URGENT", status="APPROVED")
    make_issue(priority="LOW", status="IN_PROGRESS")
    make_issue(status="RESOLVED")
    make_issue(status="REJECTED")

    response = client.get("/admin/overview", headers=admin["headers"])

    assert response.status_code == 200
    data = response.json()
    assert data["total_issues"] == 5
    assert data["pending"] == 1
    assert data["approved"] == 1
    assert data["in_progress"] == 1
    assert data["resolved"] == 1
    assert data["rejected"] == 1
    distribution = {entry["name"]: entry for entry in data["priority_distribution"]}
    assert distribution["URGENT"] == {"name": "URGENT", "value": 2, "color": "#ef4444"}
    assert distribution["MEDIUM"]["value"] == 2
    assert distribution["LOW"]["value"] == 1


def test_stats(client, make_issue, admin, citizen, neighbour, db_session):
    hole = make_issue(category="INFRASTRUCTURE", priority="HIGH")
    light = make_issue(category="SAFETY", priority="HIGH")
    make_issue(category="SAFETY", priority="LOW")
    db_session.add_all([
        Upvote(issue_id=hole, user_id=citizen["user_id"]),
        Upvote(issue_id=hole, user_id=neighbour["user_id"]),
        Upvote(issue_id=light, user_id=neighbour["user_id"]),
    ])
    db_session.commit()

    response = client.get("/admin/stats", headers=admin["headers"])

    assert response.status_code == 200
    data = response.json()
    assert data["category_distribution"] == {"INFRASTRUCTURE": 1, "SAFETY": 2}
    assert data["priority_distribution"] == {"HIGH": 2, "LOW": 1}
    assert data["priority_votes"] == {"HIGH": 3, "LOW": 0}
    assert sum(data["monthly_trends"].values()) == 3
