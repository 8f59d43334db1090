"""Election routes — end-to-end HTTP tests over the full workflow.

Invariants:
    - Domain errors map to their HTTP status with the structured envelope
    - Missing or malformed X-Principal is a 400 validation error
    - Events endpoint returns persisted events in emission order
"""

from uuid import uuid4

import voting.infrastructure.database as database
from voting.services import election_service

BASE = "/api/v1/elections"


def _as(principal: str) -> dict:
    return {"X-Principal": principal}


async def _create(client, admin="admin", title="Board vote") -> str:
    res = await client.post(BASE, json={"title": title}, headers=_as(admin))
    assert res.status_code == 201
    return res.json()["id"]


async def _advance(client, election_id, target, admin="admin"):
    return await client.post(
        f"{BASE}/{election_id}/phase", json={"target": target}, headers=_as(admin),
    )


async def _run_until_voting(client, voters=("alice", "bob"), proposals=("X", "Y")):
    election_id = await _create(client)
    for voter in voters:
        res = await client.post(
            f"{BASE}/{election_id}/voters", json={"principal": voter},
            headers=_as("admin"),
        )
        assert res.status_code == 201
    assert (await _advance(client, election_id, "proposals_registration_started")).status_code == 200
    for i, description in enumerate(proposals):
        res = await client.post(
            f"{BASE}/{election_id}/proposals", json={"description": description},
            headers=_as(voters[i % len(voters)]),
        )
        assert res.status_code == 201
    assert (await _advance(client, election_id, "proposals_registration_ended")).status_code == 200
    assert (await _advance(client, election_id, "voting_session_started")).status_code == 200
    return election_id


async def _vote(client, election_id, voter, proposal_id):
    return await client.post(
        f"{BASE}/{election_id}/votes", json={"proposal_id": proposal_id},
        headers=_as(voter),
    )


async def _close_and_tally(client, election_id):
    assert (await _advance(client, election_id, "voting_session_ended")).status_code == 200
    assert (await _advance(client, election_id, "votes_tallied")).status_code == 200


# --- Lifecycle ----------------------------------------------------------------

async def test_create_election_caller_is_admin(client):
    res = await client.post(BASE, json={"title": "Board vote"}, headers=_as("alice"))
    assert res.status_code == 201
    data = res.json()
    assert data["admin"] == "alice"
    assert data["status"] == "registering_voters"


async def test_missing_principal_header_is_validation_error(client):
    res = await client.post(BASE, json={"title": "Board vote"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_get_election_counters(client):
    election_id = await _run_until_voting(client)
    await _vote(client, election_id, "alice", 0)
    data = (await client.get(f"{BASE}/{election_id}")).json()
    assert data["registered_voters"] == 2
    assert data["proposal_count"] == 2
    assert data["votes_cast"] == 1
    assert data["status"] == "voting_session_started"


async def test_unknown_election_returns_404(client):
    res = await client.get(f"{BASE}/{uuid4()}/phase")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_list_elections_paginates(client):
    for i in range(3):
        await _create(client, title=f"Vote {i}")
    res = await client.get(BASE, params={"limit": 2})
    assert res.status_code == 200
    assert len(res.json()["elections"]) == 2


async def test_delete_election_admin_only(client):
    election_id = await _create(client)
    res = await client.delete(f"{BASE}/{election_id}", headers=_as("alice"))
    assert res.status_code == 403
    res = await client.delete(f"{BASE}/{election_id}", headers=_as("admin"))
    assert res.status_code == 204
    assert (await client.get(f"{BASE}/{election_id}")).status_code == 404


# --- Workflow -----------------------------------------------------------------

async def test_two_voter_scenario_elects_x(client):
    election_id = await _run_until_voting(client)
    assert (await _vote(client, election_id, "alice", 0)).status_code == 201
    assert (await _vote(client, election_id, "bob", 0)).status_code == 201
    await _close_and_tally(client, election_id)

    res = await client.get(f"{BASE}/{election_id}/winner")
    assert res.status_code == 200
    assert res.json() == {"proposal_id": 0, "description": "X", "vote_count": 2}


async def test_tie_returns_409(client):
    election_id = await _run_until_voting(client)
    await _vote(client, election_id, "alice", 0)
    await _vote(client, election_id, "bob", 1)
    await _close_and_tally(client, election_id)

    res = await client.get(f"{BASE}/{election_id}/winner")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "TIE_DETECTED"


async def test_non_admin_cannot_register_voters(client):
    election_id = await _create(client)
    res = await client.post(
        f"{BASE}/{election_id}/voters", json={"principal": "bob"},
        headers=_as("alice"),
    )
    assert res.status_code == 403
    body = res.json()["error"]
    assert body["code"] == "UNAUTHORIZED"
    assert body["context"]["operation"] == "register_voter"
    assert body["context"]["principal"] == "alice"


async def test_duplicate_proposal_returns_409(client):
    election_id = await _create(client)
    await client.post(
        f"{BASE}/{election_id}/voters", json={"principal": "alice"}, headers=_as("admin"),
    )
    await _advance(client, election_id, "proposals_registration_started")
    first = await client.post(
        f"{BASE}/{election_id}/proposals", json={"description": "X"}, headers=_as("alice"),
    )
    second = await client.post(
        f"{BASE}/{election_id}/proposals", json={"description": "X"}, headers=_as("alice"),
    )
    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "DUPLICATE_PROPOSAL"
    assert len((await client.get(f"{BASE}/{election_id}/proposals")).json()) == 1


async def test_second_vote_rejected(client):
    election_id = await _run_until_voting(client)
    await _vote(client, election_id, "alice", 0)
    res = await _vote(client, election_id, "alice", 1)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_VOTED"
    proposals = (await client.get(f"{BASE}/{election_id}/proposals")).json()
    assert [p["vote_count"] for p in proposals] == [1, 0]


async def test_vote_for_missing_proposal_returns_404(client):
    election_id = await _run_until_voting(client)
    res = await _vote(client, election_id, "alice", 5)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NO_SUCH_PROPOSAL"


async def test_phase_rules_over_http(client):
    election_id = await _create(client)

    same = await _advance(client, election_id, "registering_voters")
    assert same.status_code == 409
    assert same.json()["error"]["code"] == "PHASE_ALREADY_ACTIVE"

    skip = await _advance(client, election_id, "voting_session_started")
    assert skip.status_code == 409
    assert skip.json()["error"]["code"] == "INVALID_TRANSITION"

    await _advance(client, election_id, "proposals_registration_started")
    empty = await _advance(client, election_id, "proposals_registration_ended")
    assert empty.status_code == 400
    assert empty.json()["error"]["code"] == "NO_PROPOSALS"

    phase = (await client.get(f"{BASE}/{election_id}/phase")).json()
    assert phase["status"] == "proposals_registration_started"


async def test_unknown_phase_name_is_validation_error(client):
    election_id = await _create(client)
    res = await _advance(client, election_id, "counting")
    assert res.status_code == 400


async def test_reset_returns_to_registration(client):
    election_id = await _run_until_voting(client)
    await _vote(client, election_id, "alice", 0)
    await _close_and_tally(client, election_id)

    res = await client.post(f"{BASE}/{election_id}/reset", headers=_as("admin"))
    assert res.status_code == 200
    assert res.json() == {
        "status": "registering_voters", "previous": "votes_tallied",
    }
    assert (await client.get(f"{BASE}/{election_id}/proposals")).json() == []
    voter = (await client.get(f"{BASE}/{election_id}/voters/alice")).json()
    assert voter == {
        "principal": "alice", "is_registered": False,
        "has_voted": False, "voted_proposal_id": 0,
    }


async def test_reset_before_tally_is_invalid_phase(client):
    election_id = await _create(client)
    res = await client.post(f"{BASE}/{election_id}/reset", headers=_as("admin"))
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "INVALID_PHASE"


async def test_unknown_voter_returns_404(client):
    election_id = await _create(client)
    res = await client.get(f"{BASE}/{election_id}/voters/nobody")
    assert res.status_code == 404


async def test_malformed_voter_principal_is_validation_error(client):
    election_id = await _create(client)
    for principal in ("al%20ice", "v" * 129):
        res = await client.get(f"{BASE}/{election_id}/voters/{principal}")
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_get_single_proposal(client):
    election_id = await _run_until_voting(client)
    res = await client.get(f"{BASE}/{election_id}/proposals/1")
    assert res.json() == {"id": 1, "description": "Y", "vote_count": 0}
    assert (await client.get(f"{BASE}/{election_id}/proposals/7")).status_code == 404


# --- Events and restore -------------------------------------------------------

async def test_events_listed_in_order(client):
    election_id = await _create(client)
    await client.post(
        f"{BASE}/{election_id}/voters", json={"principal": "alice"}, headers=_as("admin"),
    )
    await _advance(client, election_id, "proposals_registration_started")
    # rejected call adds nothing
    await _advance(client, election_id, "proposals_registration_started")

    events = (await client.get(f"{BASE}/{election_id}/events")).json()
    assert [(e["name"], e["payload"]) for e in events] == [
        ("VoterRegistered", {"principal": "alice"}),
        ("WorkflowStatusChanged", {
            "previous": "registering_voters",
            "next": "proposals_registration_started",
        }),
    ]


async def test_state_survives_registry_loss(client):
    election_id = await _run_until_voting(client)
    await _vote(client, election_id, "alice", 1)

    election_service._elections.clear()

    proposals = (await client.get(f"{BASE}/{election_id}/proposals")).json()
    assert [p["vote_count"] for p in proposals] == [0, 1]
    res = await _vote(client, election_id, "alice", 0)
    assert res.json()["error"]["code"] == "ALREADY_VOTED"


async def test_health_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert res.json()["live_elections"] == 0


async def test_readiness_without_store_is_503(client, monkeypatch):
    monkeypatch.setattr(database, "store", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "election_store_unavailable"
