#!/usr/bin/env python3
"""Tests for the lookup service client."""

import httpx
import pytest

from samples import ApiError, AuthenticationError, S360Client, Session, normalize

BASE = "https://api.test"


def make_client(handler):
    return S360Client(base_url=BASE, timeout=5, transport=httpx.MockTransport(handler))


def sample_payload(equipment_id=None):
    payload = {"numeroAmostra": "123", "cliente": {"nome": "ACME"}}
    if equipment_id is not None:
        payload["coleta"] = {
            "dadosColetaEquipamento": {"equipamento": {"id": equipment_id}}
        }
    return payload


class TestLogin:
    """Tests for S360Client.login."""

    def test_returns_session_with_token(self):
        def handler(request):
            assert request.url.path == "/api/login"
            assert request.method == "POST"
            return httpx.Response(200, json={"token": "abc"})

        with make_client(handler) as client:
            session = client.login("maria", "pw")
        assert isinstance(session, Session)
        assert session.token == "abc"
        assert session.base_url == BASE
        assert session.headers == {"Authorization": "Bearer abc"}

    def test_access_token_field(self):
        with make_client(lambda r: httpx.Response(200, json={"access_token": "xyz"})) as client:
            assert client.login("maria", "pw").token == "xyz"

    def test_rejected_credentials(self):
        with make_client(lambda r: httpx.Response(401, json={})) as client:
            with pytest.raises(ApiError) as exc:
                client.login("maria", "wrong")
        assert exc.value.status_code == 401

    def test_missing_token(self):
        with make_client(lambda r: httpx.Response(200, json={"user": "maria"})) as client:
            with pytest.raises(AuthenticationError):
                client.login("maria", "pw")

    def test_non_json_body(self):
        with make_client(lambda r: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(AuthenticationError):
                client.login("maria", "pw")


class TestFetchSample:
    """Tests for S360Client.fetch_sample."""

    def test_sends_code_and_token(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["code"] = request.url.params["numeroAmostra"]
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json=sample_payload())

        session = Session("abc", BASE)
        with make_client(handler) as client:
            data = client.fetch_sample(session, "123")
        assert seen == {"path": "/api/v1/amostra/view", "code": "123", "auth": "Bearer abc"}
        assert data["cliente"]["nome"] == "ACME"

    def test_error_status(self):
        with make_client(lambda r: httpx.Response(404, json={})) as client:
            with pytest.raises(ApiError) as exc:
                client.fetch_sample(Session("abc", BASE), "999")
        assert exc.value.status_code == 404

    def test_enriches_client_from_equipment_site(self):
        def handler(request):
            if request.url.path == "/api/v1/equipamento/view":
                assert request.url.params["id"] == "42"
                return httpx.Response(200, json={"obra": {"nome": "Obra Norte"}})
            return httpx.Response(200, json=sample_payload(equipment_id=42))

        with make_client(handler) as client:
            data = client.fetch_sample(Session("abc", BASE), "123")
        assert data["obra"] == "Obra Norte"
        assert normalize(data, "123").client == "Obra Norte"

    def test_equipment_failure_is_ignored(self):
        def handler(request):
            if request.url.path == "/api/v1/equipamento/view":
                return httpx.Response(500)
            return httpx.Response(200, json=sample_payload(equipment_id=42))

        with make_client(handler) as client:
            data = client.fetch_sample(Session("abc", BASE), "123")
        assert "obra" not in data
        assert normalize(data, "123").client == "ACME"

    def test_equipment_without_site_leaves_record(self):
        def handler(request):
            if request.url.path == "/api/v1/equipamento/view":
                return httpx.Response(200, json={"obra": None})
            return httpx.Response(200, json=sample_payload(equipment_id=42))

        with make_client(handler) as client:
            data = client.fetch_sample(Session("abc", BASE), "123")
        assert "obra" not in data

    def test_no_equipment_id_makes_one_request(self):
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(200, json=sample_payload())

        with make_client(handler) as client:
            client.fetch_sample(Session("abc", BASE), "123")
        assert calls == ["/api/v1/amostra/view"]
