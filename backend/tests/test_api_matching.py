from __future__ import annotations

from unirivo.models.application import Application


def _create_project(client, headers, title: str, roles: list[dict]) -> dict:
    response = client.post(
        "/api/projects",
        json={"title": title, "description": f"{title} description", "roles": roles},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_profile_update_accepts_legacy_field_and_syncs(client, signup):
    headers = signup("legacy@example.com")

    response = client.patch("/api/profile", json={"techStack": ["Go", "Rust"]}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["skills"] == ["Go", "Rust"]
    assert body["techStack"] == ["Go", "Rust"]


def test_match_profiles_requires_roles(client, signup):
    headers = signup("owner@example.com", skills=["Go"])

    assert client.post("/api/projects/match-profiles", json={}, headers=headers).status_code == 400
    assert client.post("/api/projects/match-profiles", json={"roles": []}, headers=headers).status_code == 400


def test_match_profiles_ranks_candidates(client, signup):
    owner = signup("owner@example.com", skills=["Go", "Postgres"])
    signup("partial@example.com", skills=["go", "docker"], name="Partial")
    signup("full@example.com", skills=["Go", "Postgres", "Docker"], name="Full")
    signup("designer@example.com", skills=["figma"], name="Designer")
    signup("nobody@example.com", name="Nobody")

    response = client.post(
        "/api/projects/match-profiles",
        json={
            "roles": [
                {"roleName": "Backend", "mandatorySkills": ["Go", "Postgres"], "optionalSkills": ["Docker"], "needed": 1},
                {"roleName": "Design", "mandatorySkills": [], "optionalSkills": ["Figma"], "needed": 1},
            ]
        },
        headers=owner,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["totalMatches"] == 3
    assert [(p["name"], p["matchedRole"], p["matchScore"]) for p in body["profiles"]] == [
        ("Full", "Backend", 100),
        ("Partial", "Backend", 65),
        ("Designer", "Design", 30),
    ]
    partial = body["profiles"][1]
    assert partial["missingSkills"] == ["Postgres"]
    assert partial["matchedSkills"] == ["Go", "Docker"]
    assert partial["skills"] == ["go", "docker"]
    assert isinstance(partial["id"], str)


def test_apply_accept_and_remove_drive_project_status(client, signup):
    owner = signup("owner@example.com", skills=["Go"])
    member = signup("member@example.com", skills=["Rust"])
    project = _create_project(
        client,
        owner,
        "Compiler",
        [{"roleName": "Backend", "mandatorySkills": ["Rust"], "needed": 1}],
    )
    role_id = project["roles"][0]["id"]

    applied = client.post("/api/applications", json={"projectId": project["id"], "roleId": role_id}, headers=member)
    assert applied.status_code == 201
    application_id = applied.json()["id"]

    duplicate = client.post("/api/applications", json={"projectId": project["id"], "roleId": role_id}, headers=member)
    assert duplicate.status_code == 400

    own = client.post("/api/applications", json={"projectId": project["id"], "roleId": role_id}, headers=owner)
    assert own.status_code == 400

    forbidden = client.patch(f"/api/applications/{application_id}", json={"status": "ACCEPTED"}, headers=member)
    assert forbidden.status_code == 403

    accepted = client.patch(f"/api/applications/{application_id}", json={"status": "ACCEPTED"}, headers=owner)
    assert accepted.status_code == 200
    detail = client.get(f"/api/projects/{project['id']}", headers=owner).json()
    assert detail["status"] == "COMPLETED"
    assert detail["roles"][0]["filled"] == 1

    open_ids = [p["id"] for p in client.get("/api/projects/all-open", headers=member).json()]
    assert project["id"] not in open_ids
    assert project["id"] in [p["id"] for p in client.get("/api/projects/mine", headers=member).json()]

    removed = client.patch(f"/api/applications/{application_id}", json={"status": "REMOVED"}, headers=owner)
    assert removed.status_code == 200
    detail = client.get(f"/api/projects/{project['id']}", headers=owner).json()
    assert detail["status"] == "OPEN"
    assert detail["roles"][0]["filled"] == 0


def test_accept_into_full_role_is_rejected(client, signup):
    owner = signup("owner@example.com")
    first = signup("first@example.com")
    second = signup("second@example.com")
    project = _create_project(
        client,
        owner,
        "Tiny",
        [
            {"roleName": "Solo", "mandatorySkills": ["Go"], "needed": 1},
            {"roleName": "Spare", "mandatorySkills": ["Go"], "needed": 1},
        ],
    )
    role_id = project["roles"][0]["id"]
    ids = []
    for headers in (first, second):
        response = client.post("/api/applications", json={"projectId": project["id"], "roleId": role_id}, headers=headers)
        ids.append(response.json()["id"])

    assert client.patch(f"/api/applications/{ids[0]}", json={"status": "ACCEPTED"}, headers=owner).status_code == 200
    full = client.patch(f"/api/applications/{ids[1]}", json={"status": "ACCEPTED"}, headers=owner)
    assert full.status_code == 400
    assert client.get(f"/api/projects/{project['id']}", headers=owner).json()["status"] == "OPEN"


def test_shortlist_creates_application_once(client, signup):
    owner = signup("owner@example.com")
    candidate = signup("candidate@example.com", skills=["Go"])
    candidate_id = client.get("/api/auth/me", headers=candidate).json()["id"]
    project = _create_project(client, owner, "Search", [{"roleName": "Backend", "mandatorySkills": ["Go"], "needed": 2}])
    payload = {"projectId": project["id"], "roleId": project["roles"][0]["id"], "userId": candidate_id}

    assert client.post("/api/projects/shortlist", json=payload, headers=candidate).status_code == 403

    created = client.post("/api/projects/shortlist", json=payload, headers=owner)
    assert created.status_code == 201
    assert created.json()["status"] == "SHORTLISTED"
    assert client.post("/api/projects/shortlist", json=payload, headers=owner).status_code == 400

    mine = client.get("/api/applications/mine", headers=candidate).json()
    assert [application["status"] for application in mine] == ["SHORTLISTED"]


def test_recommendations_skip_owned_and_applied_projects(client, signup):
    owner = signup("owner@example.com")
    seeker = signup("seeker@example.com", skills=["Go", "Docker"])

    best = _create_project(client, owner, "Best", [{"roleName": "Backend", "mandatorySkills": ["go"], "optionalSkills": ["docker"]}])
    applied = _create_project(client, owner, "Applied", [{"roleName": "Backend", "mandatorySkills": ["Go"]}])
    weak = _create_project(client, owner, "Weak", [{"roleName": "Ops", "mandatorySkills": ["Terraform"], "optionalSkills": ["Docker"]}])
    _create_project(client, seeker, "Mine", [{"roleName": "Backend", "mandatorySkills": ["Go"]}])
    client.post("/api/applications", json={"projectId": applied["id"], "roleId": applied["roles"][0]["id"]}, headers=seeker)

    response = client.get("/api/dashboard/recommendations", headers=seeker)

    assert response.status_code == 200
    recommendations = response.json()["recommendations"]
    assert [(item["title"], item["matchScore"]) for item in recommendations] == [("Best", 15), ("Weak", 5)]
    assert recommendations[0]["id"] == str(best["id"])
    assert recommendations[1]["id"] == str(weak["id"])
    assert recommendations[0]["roles"][0]["roleName"] == "Backend"


def test_skill_less_user_gets_browse_fallback(client, signup):
    owner = signup("owner@example.com")
    browser = signup("browser@example.com")
    for index in range(12):
        _create_project(client, owner, f"Project {index}", [{"roleName": "Any", "mandatorySkills": ["Go"]}])

    recommendations = client.get("/api/dashboard/recommendations", headers=browser).json()["recommendations"]

    assert len(recommendations) == 10
    assert {item["matchScore"] for item in recommendations} == {0}


def test_skills_analytics_reports_demand_and_coverage(client, signup):
    owner = signup("owner@example.com")
    user = signup("user@example.com", skills=["Go"])
    _create_project(client, owner, "One", [{"roleName": "a", "mandatorySkills": ["Go"]}])
    _create_project(client, owner, "Two", [{"roleName": "b", "mandatorySkills": ["Go", "Rust"]}])

    body = client.get("/api/dashboard/skills-analytics", headers=user).json()

    assert body["coveragePercentage"] == 50
    assert body["topDemandedSkills"] == [
        {"skill": "go", "demand": 2, "userHas": True},
        {"skill": "rust", "demand": 1, "userHas": False},
    ]
    assert body["recommendedSkills"] == [{"skill": "rust", "demand": 1}]
    assert body["userSkillBreakdown"] == [{"skill": "Go", "projectMatches": 2}]
    assert body["totalOpenProjects"] == 2


def test_dashboard_stats_counts_owned_and_joined(client, signup):
    owner = signup("owner@example.com")
    member = signup("member@example.com")
    project = _create_project(client, owner, "Team", [{"roleName": "a", "mandatorySkills": ["Go"], "needed": 1}])
    _create_project(client, owner, "Other", [{"roleName": "b", "mandatorySkills": ["Go"], "needed": 1}])
    application = client.post(
        "/api/applications",
        json={"projectId": project["id"], "roleId": project["roles"][0]["id"]},
        headers=member,
    ).json()

    pending = client.get("/api/dashboard/stats", headers=member).json()
    assert pending["pendingApplications"] == 1
    assert pending["totalProjects"] == 0

    client.patch(f"/api/applications/{application['id']}", json={"status": "ACCEPTED"}, headers=owner)

    owner_stats = client.get("/api/dashboard/stats", headers=owner).json()
    member_stats = client.get("/api/dashboard/stats", headers=member).json()
    assert owner_stats["totalProjects"] == 2
    assert owner_stats["completedProjects"] == 1
    assert owner_stats["activeProjects"] == 1
    assert member_stats["participatingProjectsCount"] == 1
    assert member_stats["completedProjects"] == 1


def test_owner_edits_roles_and_status_follows(client, signup):
    owner = signup("owner@example.com")
    member = signup("member@example.com")
    project = _create_project(client, owner, "Grow", [{"roleName": "a", "mandatorySkills": ["Go"], "needed": 1}])
    role_id = project["roles"][0]["id"]
    application = client.post("/api/applications", json={"projectId": project["id"], "roleId": role_id}, headers=member).json()
    client.patch(f"/api/applications/{application['id']}", json={"status": "ACCEPTED"}, headers=owner)

    shrink = client.patch(
        f"/api/projects/{project['id']}",
        json={"roles": []},
        headers=owner,
    )
    assert shrink.status_code == 400

    grown = client.patch(
        f"/api/projects/{project['id']}",
        json={"roles": [{"id": role_id, "roleName": "a", "mandatorySkills": ["Go"], "needed": 2}]},
        headers=owner,
    )
    assert grown.status_code == 200
    assert grown.json()["status"] == "OPEN"
    assert grown.json()["roles"][0]["filled"] == 1

    assert client.patch(f"/api/projects/{project['id']}", json={"title": "Nope"}, headers=member).status_code == 403
    assert client.delete(f"/api/projects/{project['id']}", headers=owner).status_code == 200
    assert client.get(f"/api/projects/{project['id']}", headers=owner).status_code == 404


def test_leaving_accepted_frees_the_seat_before_reaccepting(client, signup):
    owner = signup("owner@example.com")
    member = signup("member@example.com")
    project = _create_project(client, owner, "Pair", [{"roleName": "Backend", "mandatorySkills": ["Go"], "needed": 2}])
    application = client.post(
        "/api/applications",
        json={"projectId": project["id"], "roleId": project["roles"][0]["id"]},
        headers=member,
    ).json()

    for status in ("ACCEPTED", "PENDING", "ACCEPTED"):
        response = client.patch(f"/api/applications/{application['id']}", json={"status": status}, headers=owner)
        assert response.status_code == 200, response.text

    detail = client.get(f"/api/projects/{project['id']}", headers=owner).json()
    assert detail["roles"][0]["filled"] == 1
    assert detail["status"] == "OPEN"


def test_rejecting_an_accepted_member_releases_the_seat(client, signup):
    owner = signup("owner@example.com")
    member = signup("member@example.com")
    project = _create_project(client, owner, "Solo", [{"roleName": "Backend", "mandatorySkills": ["Go"], "needed": 1}])
    application = client.post(
        "/api/applications",
        json={"projectId": project["id"], "roleId": project["roles"][0]["id"]},
        headers=member,
    ).json()

    client.patch(f"/api/applications/{application['id']}", json={"status": "ACCEPTED"}, headers=owner)
    assert client.get(f"/api/projects/{project['id']}", headers=owner).json()["status"] == "COMPLETED"

    rejected = client.patch(f"/api/applications/{application['id']}", json={"status": "REJECTED"}, headers=owner)

    assert rejected.status_code == 200
    detail = client.get(f"/api/projects/{project['id']}", headers=owner).json()
    assert detail["roles"][0]["filled"] == 0
    assert detail["status"] == "OPEN"


def test_dropping_a_role_discards_its_open_applications(client, signup):
    owner = signup("owner@example.com")
    member = signup("member@example.com")
    project = _create_project(
        client,
        owner,
        "Split",
        [
            {"roleName": "a", "mandatorySkills": ["Go"], "needed": 1},
            {"roleName": "b", "mandatorySkills": ["Rust"], "needed": 1},
        ],
    )
    kept, dropped = project["roles"]
    application = client.post(
        "/api/applications",
        json={"projectId": project["id"], "roleId": dropped["id"]},
        headers=member,
    ).json()

    edited = client.patch(
        f"/api/projects/{project['id']}",
        json={"roles": [{"id": kept["id"], "roleName": "a", "mandatorySkills": ["Go"], "needed": 1}]},
        headers=owner,
    )
    assert edited.status_code == 200

    assert client.get(f"/api/applications/project/{project['id']}", headers=owner).json() == []
    assert client.get("/api/applications/mine", headers=member).json() == []
    accept = client.patch(f"/api/applications/{application['id']}", json={"status": "ACCEPTED"}, headers=owner)
    assert accept.status_code == 404
    assert client.get(f"/api/projects/{project['id']}", headers=owner).json()["roles"][0]["filled"] == 0


def test_status_change_on_application_without_role_is_not_found(client, signup, db):
    owner = signup("owner@example.com")
    member = signup("member@example.com")
    project = _create_project(client, owner, "Ghost", [{"roleName": "a", "mandatorySkills": ["Go"], "needed": 1}])
    member_id = client.get("/api/auth/me", headers=member).json()["id"]
    orphan = Application(project_id=project["id"], role_id=9999, user_id=member_id, status="PENDING")
    db.add(orphan)
    db.commit()

    response = client.patch(f"/api/applications/{orphan.id}", json={"status": "ACCEPTED"}, headers=owner)

    assert response.status_code == 404
    assert response.json()["detail"] == "Role not found"
    detail = client.get(f"/api/projects/{project['id']}", headers=owner).json()
    assert detail["roles"][0]["filled"] == 0
    assert detail["status"] == "OPEN"
