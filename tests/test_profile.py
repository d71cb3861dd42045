from __future__ import annotations

from .conftest import auth_header


def _profile(client, token):
    response = client.get("/api/v1/profile", headers=auth_header(token))
    assert response.status_code == 200, response.text
    return response.json()


def test_replace_services_is_a_full_replacement(client, register_user):
    _, token = register_user("Jana", "jana@example.com", "Brno", offered=[1, 2], needed=[3])

    response = client.put(
        "/api/v1/profile/services",
        json={"servicesOffered": [5], "servicesNeeded": [6, 7]},
        headers=auth_header(token),
    )

    assert response.status_code == 200
    profile = _profile(client, token)
    assert [s["id"] for s in profile["servicesOffered"]] == [5]
    assert sorted(s["id"] for s in profile["servicesNeeded"]) == [6, 7]


def test_empty_or_omitted_lists_clear_links(client, register_user):
    _, token = register_user("Jana", "jana@example.com", "Brno", offered=[1, 2], needed=[3])

    response = client.put("/api/v1/profile/services", json={"servicesOffered": []}, headers=auth_header(token))

    assert response.status_code == 200
    profile = _profile(client, token)
    assert profile["servicesOffered"] == []
    assert profile["servicesNeeded"] == []


def test_duplicate_ids_do_not_break_uniqueness(client, register_user):
    _, token = register_user("Jana", "jana@example.com", "Brno")

    response = client.put(
        "/api/v1/profile/services",
        json={"servicesOffered": [2, 2, 2], "servicesNeeded": [3, 3]},
        headers=auth_header(token),
    )

    assert response.status_code == 200
    profile = _profile(client, token)
    assert [s["id"] for s in profile["servicesOffered"]] == [2]
    assert [s["id"] for s in profile["servicesNeeded"]] == [3]


def test_unknown_service_is_reported_and_nothing_changes(client, register_user):
    _, token = register_user("Jana", "jana@example.com", "Brno", offered=[1], needed=[2])

    response = client.put(
        "/api/v1/profile/services",
        json={"servicesOffered": [1, 4242], "servicesNeeded": []},
        headers=auth_header(token),
    )

    assert response.status_code == 400
    assert "4242" in response.json()["detail"]
    profile = _profile(client, token)
    assert [s["id"] for s in profile["servicesOffered"]] == [1]
    assert [s["id"] for s in profile["servicesNeeded"]] == [2]


def test_update_city_and_avatar(client, register_user):
    _, token = register_user("Jana", "jana@example.com", "Brno")

    assert client.put("/api/v1/profile/city", json={"city": "Olomouc"}, headers=auth_header(token)).status_code == 200
    assert client.put("/api/v1/profile/avatar", json={"avatar": "avatar4"}, headers=auth_header(token)).status_code == 200

    profile = _profile(client, token)
    assert profile["city"] == "Olomouc"
    assert profile["avatar"] == "avatar4"


def test_update_city_and_avatar_require_a_value(client, register_user):
    _, token = register_user("Jana", "jana@example.com", "Brno")

    city = client.put("/api/v1/profile/city", json={}, headers=auth_header(token))
    avatar = client.put("/api/v1/profile/avatar", json={"avatar": ""}, headers=auth_header(token))

    assert city.status_code == 400
    assert city.json()["detail"] == "City is required"
    assert avatar.status_code == 400


def test_delete_profile_removes_account_and_messages(client, register_user):
    user_a, token_a = register_user("Anna", "anna@example.com", "Brno", offered=[1])
    user_b, token_b = register_user("Bara", "bara@example.com", "Brno", needed=[1])
    sent = client.post(
        "/api/v1/messages", json={"toUserId": user_b["id"], "message": "Ahoj"}, headers=auth_header(token_a)
    )
    assert sent.status_code == 201

    response = client.delete("/api/v1/profile", headers=auth_header(token_a))

    assert response.status_code == 200
    assert client.get("/api/v1/profile", headers=auth_header(token_a)).status_code == 403
    assert client.get("/api/v1/messages", headers=auth_header(token_b)).json() == []
    assert client.get("/api/v1/search", headers=auth_header(token_b)).json() == []


def test_profile_requires_token(client):
    assert client.get("/api/v1/profile").status_code == 401


def test_service_id_beyond_integer_range_is_rejected(client, register_user):
    _, token = register_user("Jana", "jana@example.com", "Brno", offered=[1])

    response = client.put(
        "/api/v1/profile/services",
        json={"servicesOffered": [2**70], "servicesNeeded": []},
        headers=auth_header(token),
    )

    assert response.status_code == 400
    assert [s["id"] for s in _profile(client, token)["servicesOffered"]] == [1]
