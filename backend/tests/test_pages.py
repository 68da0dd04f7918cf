import pytest

from webhub.cloud_services import CLOUD_SERVICES
from webhub.config import API_PREFIX, SESSION_COOKIE
from webhub.sessions import encode_session

pytestmark = pytest.mark.anyio


def _login(sub="auth0|7") -> dict[str, str]:
    return {"Cookie": f"{SESSION_COOKIE}={encode_session({'profile': {'sub': sub}})}"}


async def test_home_page(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert 'href="/login"' in resp.text


async def test_home_page_shows_error_message(client):
    resp = await client.get("/", params={"error": "Something broke"})
    assert "Something broke" in resp.text


async def test_home_head(client):
    resp = await client.head("/")
    assert resp.status_code == 200


async def test_about_page(client):
    resp = await client.get("/about")
    assert resp.status_code == 200


async def test_cloud_page_lists_services(client):
    resp = await client.get("/cloud")
    assert resp.status_code == 200
    for service in CLOUD_SERVICES:
        assert service.name in resp.text


async def test_health_checks(client):
    assert (await client.get("/healthz")).json() == {"status": "ok"}
    assert (await client.get(f"{API_PREFIX}/healthz")).json() == {"status": "ok"}


async def test_matrix_server_discovery(client):
    resp = await client.get("/.well-known/matrix/server")
    assert resp.json() == {"m.server": "matrix.robswebhub.net:443"}
    assert resp.headers["access-control-allow-origin"] == "*"


async def test_matrix_client_discovery(client):
    resp = await client.get("/.well-known/matrix/client")
    assert resp.json() == {"m.homeserver": {"base_url": "https://matrix.robswebhub.net"}}
    assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("path", ["/gamekeeper", "/gamekeeper/signup"])
async def test_gamekeeper_requires_login(client, path):
    resp = await client.get(path)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


async def test_gamekeeper_signup_flow(client):
    headers = _login()

    resp = await client.get("/gamekeeper", headers=headers)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/gamekeeper/signup"

    resp = await client.get("/gamekeeper/signup", headers=headers)
    assert resp.status_code == 200

    resp = await client.post("/gamekeeper/signup", headers=headers)
    assert resp.status_code == 201
    assert resp.text == "Signup successful"
    assert resp.headers["hx-redirect"] == "/gamekeeper"

    resp = await client.get("/gamekeeper", headers=headers)
    assert resp.status_code == 200

    resp = await client.get("/gamekeeper/signup", headers=headers)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/gamekeeper"


async def test_gamekeeper_signup_twice_is_harmless(client):
    headers = _login()
    first = await client.post("/gamekeeper/signup", headers=headers)
    second = await client.post("/gamekeeper/signup", headers=headers)
    assert first.status_code == second.status_code == 201


async def test_gamekeeper_clears_corrupt_cookie_on_login_redirect(client):
    resp = await client.get("/gamekeeper", headers={"Cookie": f"{SESSION_COOKIE}=garbage"})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"
    cookie = ",".join(resp.headers.get_list("set-cookie"))
    assert f"{SESSION_COOKIE}=" in cookie
    assert "Max-Age=0" in cookie


async def test_gamekeeper_redirect_for_anonymous_keeps_cookies_alone(client):
    resp = await client.get("/gamekeeper")
    assert resp.status_code == 303
    assert "set-cookie" not in resp.headers
