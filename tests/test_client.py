"""Tests for the requests-based API client.

The FastAPI test client exposes the same ``request`` interface as a
``requests.Session``, so the client is pointed at the app in-process.
"""

import pytest
from fastapi.testclient import TestClient

from support_network_api.app.main import app
from support_network_client import SupportNetworkAPI


def make_client():
    return SupportNetworkAPI(base_url="http://testserver", session=TestClient(app))


@pytest.fixture
def alice():
    api = make_client()
    data, error = api.sign_up("alice", "alice123")
    assert error is None
    assert data["user"]["username"] == "alice"
    data, error = api.log_in("alice", "alice123")
    assert error is None
    assert api.token == data["access_token"]
    return api


@pytest.fixture
def bob():
    api = make_client()
    api.sign_up("bob", "bob123")
    api.log_in("bob", "bob123")
    return api


def test_errors_are_returned_not_raised():
    api = make_client()
    data, error = api.log_in("nobody", "secret")
    assert data is None
    assert error == {"status_code": 403, "message": "Username or password is incorrect."}
    assert api.token is None


def test_current_user_and_log_out(alice):
    data, error = alice.current_user()
    assert data["username"] == "alice"
    _, error = alice.log_out()
    assert error is None
    assert alice.token is None
    _, error = alice.current_user()
    assert error["status_code"] == 401


def test_community_flow(alice, bob):
    alice.create_community("Long COVID")
    _, error = bob.join_community("Long COVID")
    assert error is None
    assert alice.community_members("Long COVID") == (["alice", "bob"], None)
    assert bob.my_communities() == (["Long COVID"], None)

    data, _ = bob.create_post("Anyone else tired all day?", community="Long COVID")
    post_id = data["post"]["id"]
    posts, _ = alice.community_posts("Long COVID")
    assert [p["id"] for p in posts] == [post_id]

    _, error = bob.leave_community("Long COVID")
    assert error is None
    assert bob.my_communities() == ([], None)


def test_symptoms(alice):
    alice.create_community("JIA")
    alice.add_common_symptom("JIA", "Joint pain")
    assert alice.search_by_symptom("joint pain") == (["JIA"], None)


def test_comments(alice, bob):
    data, _ = alice.create_post("How do you cope?")
    post_id = data["post"]["id"]
    data, error = bob.add_comment(post_id, "Walking helps.")
    comment_id = data["comment"]["id"]

    _, error = alice.delete_comment(comment_id)
    assert error["status_code"] == 403
    _, error = bob.delete_comment(comment_id)
    assert error is None
    posts, _ = alice.list_posts(author="alice")
    assert [p["content"] for p in posts] == ["How do you cope?"]


def test_buddy_and_chat(alice, bob):
    alice.create_community("OCD")
    bob.join_community("OCD")
    bob.opt_in()

    data, error = alice.find_buddy()
    assert error is None
    assert data["buddy"] == "bob"

    _, error = alice.start_chat("bob")
    assert error["status_code"] == 403
    alice.send_message("bob", "Hi, nice to meet you!")
    messages, _ = bob.chat_messages("alice")
    assert [m["content"] for m in messages] == ["Hi, nice to meet you!"]

    _, error = bob.opt_out()
    assert error is None


def test_community_name_with_slash_is_refused(alice, bob):
    data, error = alice.create_community("Anxiety/Depression")
    assert data is None
    assert error["status_code"] == 422
    assert bob.my_communities() == ([], None)
