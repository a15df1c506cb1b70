import dataclasses

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from app.api.deps import get_identity
from app.middleware import Identity, SessionAuthMiddleware
from conftest import make_user


@pytest.fixture
def whoami_client(session_factory, clock):
    app = FastAPI()
    app.add_middleware(SessionAuthMiddleware, session_factory=session_factory, cookie_name="sid", clock=clock)

    @app.get("/whoami")
    def whoami(identity: Identity | None = Depends(get_identity)):
        return {"user_id": identity.user_id if identity else None}

    @app.get("/rebind")
    def rebind(request: Request):
        try:
            request.auth = Identity(user_id=999)
        except AttributeError:
            pass
        identity = get_identity(request)
        return {"user_id": identity.user_id if identity else None}

    return TestClient(app)


@pytest.fixture
def signed_in(db, session_service):
    """(user_id, token) for a committed session."""
    make_user(db, "decoy")
    user = make_user(db, "walter")
    user_id = user.id
    token = session_service.create(user_id)
    db.commit()
    return user_id, token


def test_no_cookie_proceeds_anonymously(whoami_client):
    response = whoami_client.get("/whoami")

    assert response.status_code == 200
    assert response.json() == {"user_id": None}


def test_valid_cookie_binds_owner_identity(whoami_client, signed_in):
    user_id, token = signed_in

    response = whoami_client.get("/whoami", headers={"Cookie": f"sid={token}"})

    assert response.json() == {"user_id": user_id}


def test_invalid_cookie_is_not_rejected(whoami_client):
    response = whoami_client.get("/whoami", headers={"Cookie": "sid=forged"})

    assert response.status_code == 200
    assert response.json() == {"user_id": None}


def test_expired_cookie_proceeds_anonymously(whoami_client, signed_in, clock):
    _, token = signed_in
    clock.advance(days=7)

    response = whoami_client.get("/whoami", headers={"Cookie": f"sid={token}"})

    assert response.status_code == 200
    assert response.json() == {"user_id": None}


def test_other_cookie_names_are_ignored(whoami_client, signed_in):
    _, token = signed_in

    response = whoami_client.get("/whoami", headers={"Cookie": f"session={token}"})

    assert response.json() == {"user_id": None}


def test_routes_cannot_rebind_identity(whoami_client, signed_in):
    user_id, token = signed_in

    response = whoami_client.get("/rebind", headers={"Cookie": f"sid={token}"})

    assert response.json() == {"user_id": user_id}


def test_routes_cannot_bind_identity_on_anonymous_request(whoami_client):
    response = whoami_client.get("/rebind")

    assert response.json() == {"user_id": None}


def test_identity_is_immutable():
    identity = Identity(user_id=1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        identity.user_id = 2
