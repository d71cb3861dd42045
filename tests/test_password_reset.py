from __future__ import annotations

import threading
from datetime import timedelta

from community_match_api.app.core.config import settings
from community_match_api.app.core.db import utcnow
from community_match_api.app.services import notification_service, password_reset_service
from community_match_api.app.services.notification_service import NotificationService

from .conftest import PASSWORD


def _request_code(client, email="jana@example.com"):
    response = client.post("/api/v1/password-reset/request", json={"email": email})
    assert response.status_code == 200, response.text
    return response.json()


def _confirm(client, code, new_password="newsecret", email="jana@example.com"):
    return client.post(
        "/api/v1/password-reset/confirm",
        json={"email": email, "resetCode": code, "newPassword": new_password},
    )


def _login(client, password, email="jana@example.com"):
    return client.post("/api/v1/login", json={"email": email, "password": password})


def test_code_is_returned_when_email_is_not_configured(client, register_user):
    register_user("Jana", "jana@example.com", "Brno")

    body = _request_code(client)

    assert body["message"] == "Reset code generated"
    assert body["email"] == "jana@example.com"
    assert len(body["resetCode"]) == 6
    assert 100000 <= int(body["resetCode"]) <= 999999


def test_code_is_not_returned_when_email_was_sent(client, register_user, monkeypatch):
    sent = []
    monkeypatch.setattr(
        NotificationService, "send_reset_code", lambda to, name, code: sent.append((to, name, code)) or True
    )
    register_user("Jana", "jana@example.com", "Brno")

    body = _request_code(client)

    assert body == {"message": "Reset code has been sent to your email", "email": "jana@example.com"}
    assert sent[0][:2] == ("jana@example.com", "Jana")


def test_request_for_unknown_email(client):
    response = client.post("/api/v1/password-reset/request", json={"email": "nobody@example.com"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Email not found"


def test_request_requires_email(client):
    assert client.post("/api/v1/password-reset/request", json={}).status_code == 400


def test_confirm_sets_new_password_once(client, register_user):
    register_user("Jana", "jana@example.com", "Brno")
    code = _request_code(client)["resetCode"]

    response = _confirm(client, code)

    assert response.status_code == 200
    assert response.json() == {"message": "Password reset successfully"}
    assert _login(client, "newsecret").status_code == 200
    assert _login(client, PASSWORD).status_code == 401

    again = _confirm(client, code, new_password="another1")
    assert again.status_code == 400
    assert again.json()["detail"] == "Invalid or expired reset code"


def test_short_password_is_rejected(client, register_user):
    register_user("Jana", "jana@example.com", "Brno")
    code = _request_code(client)["resetCode"]

    short = _confirm(client, code, new_password="abc12")
    assert short.status_code == 400
    assert short.json()["detail"] == "Password must be at least 6 characters"

    assert _confirm(client, code, new_password="abc123").status_code == 200


def test_wrong_code_is_rejected(client, register_user):
    register_user("Jana", "jana@example.com", "Brno")
    code = _request_code(client)["resetCode"]
    wrong = "100000" if code != "100000" else "100001"

    response = _confirm(client, wrong)

    assert response.status_code == 400
    assert _login(client, PASSWORD).status_code == 200


def test_code_sent_as_number_is_accepted(client, register_user):
    register_user("Jana", "jana@example.com", "Brno")
    code = _request_code(client)["resetCode"]

    response = client.post(
        "/api/v1/password-reset/confirm",
        json={"email": "jana@example.com", "resetCode": int(code), "newPassword": "newsecret"},
    )

    assert response.status_code == 200


def test_confirm_requires_all_fields(client):
    response = client.post("/api/v1/password-reset/confirm", json={"email": "jana@example.com"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email, reset code, and new password are required"


def test_confirm_for_unknown_email(client):
    assert _confirm(client, "123456", email="nobody@example.com").status_code == 404


def test_expired_code_is_rejected(client, register_user, monkeypatch):
    register_user("Jana", "jana@example.com", "Brno")
    code = _request_code(client)["resetCode"]
    later = utcnow() + timedelta(minutes=16)
    monkeypatch.setattr(password_reset_service, "_utcnow", lambda: later)

    response = _confirm(client, code)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired reset code"


def test_code_still_valid_before_expiry(client, register_user, monkeypatch):
    register_user("Jana", "jana@example.com", "Brno")
    code = _request_code(client)["resetCode"]
    later = utcnow() + timedelta(minutes=14)
    monkeypatch.setattr(password_reset_service, "_utcnow", lambda: later)

    assert _confirm(client, code).status_code == 200


def test_older_outstanding_code_remains_usable(client, register_user, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(password_reset_service, "generate_reset_code", lambda: next(codes))
    register_user("Jana", "jana@example.com", "Brno")

    assert _request_code(client)["resetCode"] == "111111"
    assert _request_code(client)["resetCode"] == "222222"

    assert _confirm(client, "111111").status_code == 200
    assert _confirm(client, "222222", new_password="third-pass").status_code == 200
    assert _login(client, "third-pass").status_code == 200
    assert _confirm(client, "111111", new_password="fourth-pass").status_code == 400


class _SlowEmailResponse:
    status_code = 200
    text = "{}"


def test_slow_email_api_does_not_hold_up_other_requests(client, register_user, monkeypatch):
    register_user("Jana", "jana@example.com", "Brno")
    entered = threading.Event()
    released = threading.Event()
    waits = []

    def slow_post(*args, **kwargs):
        entered.set()
        # Only returns early if another request got through meanwhile.
        waits.append(released.wait(timeout=5))
        return _SlowEmailResponse()

    monkeypatch.setattr(settings, "resend_api_key", "re_test_key")
    monkeypatch.setattr(notification_service.requests, "post", slow_post)

    responses = []
    worker = threading.Thread(
        target=lambda: responses.append(
            client.post("/api/v1/password-reset/request", json={"email": "jana@example.com"})
        )
    )
    worker.start()
    assert entered.wait(timeout=5)

    health = client.get("/api/v1/health")
    released.set()
    worker.join(timeout=10)

    assert health.status_code == 200
    assert waits == [True]
    assert responses[0].status_code == 200
    assert responses[0].json()["message"] == "Reset code has been sent to your email"
