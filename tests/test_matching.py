from __future__ import annotations

import asyncio

import pytest

from community_match_api.app.core.errors import NotFoundError
from community_match_api.app.services.matching_service import MatchingService
from community_match_api.app.services.user_service import UserService

from .conftest import auth_header


def _search(client, token):
    response = client.get("/api/v1/search", headers=auth_header(token))
    assert response.status_code == 200, response.text
    return response.json()


def test_same_city_provider_is_matched_with_overlap_only(client, register_user):
    _, token_a = register_user("Anna", "anna@example.com", "Brno", needed=[1, 2])
    user_b, _ = register_user("Bara", "bara@example.com", "Brno", offered=[2, 3])
    register_user("Cecilie", "cecilie@example.com", "Praha", offered=[1])

    results = _search(client, token_a)

    assert [match["id"] for match in results] == [user_b["id"]]
    assert [service["id"] for service in results[0]["servicesOffered"]] == [2]
    assert results[0]["servicesOffered"][0]["name"] == "Výuka jazyků"
    assert results[0]["email"] == "bara@example.com"
    assert "password_hash" not in results[0]


def test_candidate_listed_once_regardless_of_overlap_size(client, register_user):
    _, token_a = register_user("Anna", "anna@example.com", "Brno", needed=[1, 2, 3, 4])
    user_b, _ = register_user("Bara", "bara@example.com", "Brno", offered=[1, 2, 3, 4, 5])

    results = _search(client, token_a)

    assert len(results) == 1
    assert results[0]["id"] == user_b["id"]
    assert sorted(service["id"] for service in results[0]["servicesOffered"]) == [1, 2, 3, 4]


def test_empty_needed_set_matches_nobody(client, register_user):
    _, token_a = register_user("Anna", "anna@example.com", "Brno", offered=[1])
    register_user("Bara", "bara@example.com", "Brno", offered=list(range(1, 25)), needed=[1])

    assert _search(client, token_a) == []


def test_other_city_never_matches(client, register_user):
    _, token_a = register_user("Anna", "anna@example.com", "Brno", needed=[1, 2, 3])
    register_user("Petra", "petra@example.com", "Praha", offered=[1, 2, 3])

    assert _search(client, token_a) == []


def test_city_comparison_is_exact(client, register_user):
    _, token_a = register_user("Anna", "anna@example.com", "Brno", needed=[1])
    register_user("Bara", "bara@example.com", "brno", offered=[1])

    assert _search(client, token_a) == []


def test_requester_is_never_their_own_match(client, register_user):
    _, token_a = register_user("Anna", "anna@example.com", "Brno", offered=[1], needed=[1])

    assert _search(client, token_a) == []


def test_search_reflects_city_change(client, register_user):
    _, token_a = register_user("Anna", "anna@example.com", "Brno", needed=[6])
    user_p, _ = register_user("Petra", "petra@example.com", "Praha", offered=[6])

    assert _search(client, token_a) == []
    response = client.put("/api/v1/profile/city", json={"city": "Praha"}, headers=auth_header(token_a))
    assert response.status_code == 200

    assert [match["id"] for match in _search(client, token_a)] == [user_p["id"]]


def test_search_requires_token(client):
    assert client.get("/api/v1/search").status_code == 401
    assert client.get("/api/v1/search", headers=auth_header("not.a.token")).status_code == 403


def test_service_level_search_for_unknown_user(conn):
    with pytest.raises(NotFoundError):
        asyncio.run(MatchingService.search(conn, 999))


def test_service_level_search_after_link_replacement(client, register_user, conn):
    user_a, _ = register_user("Anna", "anna@example.com", "Brno", needed=[1])
    user_b, _ = register_user("Bara", "bara@example.com", "Brno", offered=[1])

    assert [m.id for m in asyncio.run(MatchingService.search(conn, user_a["id"]))] == [user_b["id"]]

    asyncio.run(UserService.replace_services(conn, user_b["id"], [], []))

    assert asyncio.run(MatchingService.search(conn, user_a["id"])) == []
