"""End-to-end tests of the HTTP API."""

import pytest

from support_network_api.app.core.config import settings


API = "/api/v1"


def test_sign_up_and_log_in(client, login):
    response = client.post(f"{API}/users", json={"username": "alice", "password": "alice123"})
    assert response.status_code == 201
    assert response.json()["msg"] == "User created successfully!"
    assert response.json()["user"]["username"] == "alice"

    alice = login("alice", "alice123")
    assert alice.get(f"{API}/session").json()["username"] == "alice"


def test_duplicate_username(client):
    client.post(f"{API}/users", json={"username": "alice", "password": "alice123"})
    response = client.post(f"{API}/users", json={"username": "alice", "password": "other"})
    assert response.status_code == 403
    assert response.json() == {"detail": "User with username alice already exists!"}


def test_empty_password_is_a_bad_value(client):
    response = client.post(f"{API}/users", json={"username": "alice", "password": ""})
    assert response.status_code == 400


def test_wrong_password(client, users):
    response = client.post(f"{API}/login", json={"username": "alice", "password": "nope"})
    assert response.status_code == 403


def test_cannot_log_in_or_sign_up_while_logged_in(users, login):
    alice = login("alice", "alice123")
    response = alice.post(f"{API}/login", json={"username": "bob", "password": "bob123"})
    assert response.status_code == 403
    assert response.json()["detail"] == "You are already logged in!"
    response = alice.post(f"{API}/users", json={"username": "carol", "password": "carol123"})
    assert response.status_code == 403


def test_session_cookie_and_logout(client, users):
    response = client.post(f"{API}/login", json={"username": "alice", "password": "alice123"})
    assert response.status_code == 200
    assert client.get(f"{API}/session").json()["username"] == "alice"

    assert client.post(f"{API}/logout").status_code == 200
    response = client.get(f"{API}/session")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token_is_unauthenticated(client):
    response = client.get(f"{API}/session", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401


def test_requires_login(client):
    assert client.post(f"{API}/communities", json={"name": "OCD"}).status_code == 401
    assert client.post(f"{API}/match").status_code == 401


def test_create_community_twice(users, login):
    alice = login("alice", "alice123")
    response = alice.post(f"{API}/communities", json={"name": "OCD"})
    assert response.status_code == 201
    assert response.json()["msg"] == "Community created!"
    assert alice.post(f"{API}/communities", json={"name": "OCD"}).status_code == 403


def test_join_and_leave_community(users, login):
    alice = login("alice", "alice123")
    bob = login("bob", "bob123")
    alice.post(f"{API}/communities", json={"name": "OCD"})

    assert bob.post(f"{API}/communities/OCD/members").status_code == 200
    assert bob.post(f"{API}/communities/OCD/members").status_code == 403
    assert bob.get(f"{API}/communities/OCD/members").json() == ["alice", "bob"]
    assert bob.get(f"{API}/communities").json() == ["OCD"]

    assert bob.delete(f"{API}/communities/OCD/members").status_code == 200
    assert bob.get(f"{API}/communities").json() == []
    assert bob.post(f"{API}/communities/Nowhere/members").status_code == 404


def test_post_in_community(users, login):
    alice = login("alice", "alice123")
    alice.post(f"{API}/communities", json={"name": "OCD"})
    response = alice.post(
        f"{API}/posts",
        json={"content": "Hello, community!", "community": "OCD", "options": {"backgroundColor": "#fff"}},
    )
    assert response.status_code == 201
    post = response.json()["post"]
    assert post["author"] == "alice"

    posts = alice.get(f"{API}/communities/OCD/posts").json()
    assert [p["id"] for p in posts] == [post["id"]]
    assert posts[0]["options"] == {"backgroundColor": "#fff"}
    assert alice.post(f"{API}/posts", json={"content": "x", "community": "Nowhere"}).status_code == 404


def test_only_author_edits_and_deletes_post(users, login):
    alice = login("alice", "alice123")
    bob = login("bob", "bob123")
    alice.post(f"{API}/communities", json={"name": "OCD"})
    post_id = alice.post(f"{API}/posts", json={"content": "mine", "community": "OCD"}).json()["post"]["id"]
    alice.post(f"{API}/posts/{post_id}/comments", json={"content": "first!"})

    assert bob.patch(f"{API}/posts/{post_id}", json={"content": "ours"}).status_code == 403
    assert bob.delete(f"{API}/posts/{post_id}").status_code == 403

    response = alice.patch(f"{API}/posts/{post_id}", json={"content": "still mine"})
    assert response.json()["post"]["content"] == "still mine"

    assert alice.delete(f"{API}/posts/{post_id}").status_code == 200
    assert alice.get(f"{API}/communities/OCD/posts").json() == []
    assert alice.get(f"{API}/posts/{post_id}/comments").status_code == 404
    assert alice.get(f"{API}/posts", params={"author": "alice"}).json() == []


def test_start_chat_twice(users, login):
    alice = login("alice", "alice123")
    bob = login("bob", "bob123")
    assert alice.post(f"{API}/chats/bob").status_code == 201
    assert alice.post(f"{API}/chats/bob").status_code == 403
    assert bob.post(f"{API}/chats/alice").status_code == 403

    assert bob.post(f"{API}/chats/alice/messages", json={"content": "hey"}).status_code == 201
    messages = alice.get(f"{API}/chats/bob").json()
    assert [m["content"] for m in messages] == ["hey"]
    assert alice.post(f"{API}/chats/nobody").status_code == 404


def test_search_by_symptom(users, login):
    alice = login("alice", "alice123")
    alice.post(f"{API}/communities", json={"name": "JIA"})
    response = alice.post(f"{API}/communities/JIA/symptoms", json={"symptom": "joint pain"})
    assert response.status_code == 201

    response = alice.get(f"{API}/communities/search", params={"symptom": "joint pain"})
    assert response.json() == ["JIA"]
    assert alice.get(f"{API}/communities/JIA/symptoms").json() == ["joint pain"]


def test_find_buddy(users, login):
    alice = login("alice", "alice123")
    bob = login("bob", "bob123")
    alice.post(f"{API}/communities", json={"name": "OCD"})
    bob.post(f"{API}/communities/OCD/members")
    assert bob.post(f"{API}/matches/optin").status_code == 200

    response = alice.post(f"{API}/match")
    assert response.status_code == 200
    assert response.json()["msg"] == "Matched with bob!"
    assert response.json()["buddy"] == "bob"
    assert alice.get(f"{API}/matches").json() == ["bob"]
    assert bob.get(f"{API}/matches").json() == ["alice"]
    assert len(bob.get(f"{API}/chats").json()) == 1

    response = alice.post(f"{API}/match")
    assert response.json() == {"msg": "No matches found.", "buddy": None, "match": None}
    assert alice.get(f"{API}/matches/status").json() == {"matchable": True}


def test_opt_in_and_out(users, login):
    alice = login("alice", "alice123")
    assert alice.delete(f"{API}/matches/optout").status_code == 403
    assert alice.post(f"{API}/matches/optin").status_code == 200
    assert alice.post(f"{API}/matches/optin").status_code == 403
    assert alice.delete(f"{API}/matches/optout").status_code == 200


def test_friend_requests(users, login):
    alice = login("alice", "alice123")
    bob = login("bob", "bob123")
    assert alice.post(f"{API}/friend/requests/bob").json() == {"msg": "Sent request!"}
    assert bob.post(f"{API}/friend/requests/alice").status_code == 403

    requests_ = bob.get(f"{API}/friend/requests").json()
    assert [(r["sender"], r["recipient"], r["status"]) for r in requests_] == [("alice", "bob", "pending")]

    assert bob.put(f"{API}/friend/accept/alice").json() == {"msg": "Accepted request!"}
    assert alice.get(f"{API}/friends").json() == ["bob"]
    assert bob.delete(f"{API}/friends/alice").status_code == 200
    assert alice.get(f"{API}/friends").json() == []


def test_groups(users, login):
    alice = login("alice", "alice123")
    assert alice.post(f"{API}/groups", json={"name": "walkers"}).status_code == 201
    alice.post(f"{API}/groups/walkers/members")
    alice.post(f"{API}/groups/walkers/members")
    assert alice.get(f"{API}/groups/walkers/members").json() == [users["alice"], users["alice"]]
    assert alice.get(f"{API}/groups/mine").json() == ["walkers"]
    alice.delete(f"{API}/groups/walkers/members")
    assert alice.get(f"{API}/groups/walkers/members").json() == []


@pytest.fixture
def commented_post(users, login):
    """Alice's post with a comment by bob."""
    alice = login("alice", "alice123")
    bob = login("bob", "bob123")
    post_id = alice.post(f"{API}/posts", json={"content": "How do you cope?"}).json()["post"]["id"]
    comment = bob.post(f"{API}/posts/{post_id}/comments", json={"content": "Walking helps."}).json()["comment"]
    return alice, bob, comment["id"]


def test_comment_author_may_delete(commented_post):
    alice, bob, comment_id = commented_post
    assert alice.delete(f"{API}/comments/{comment_id}").status_code == 403
    assert bob.delete(f"{API}/comments/{comment_id}").status_code == 200
    assert bob.delete(f"{API}/comments/{comment_id}").status_code == 404


def test_post_author_may_delete_comments(commented_post, monkeypatch):
    monkeypatch.setattr(settings, "comment_delete_policy", "post_author")
    alice, bob, comment_id = commented_post
    assert alice.delete(f"{API}/comments/{comment_id}").status_code == 200


def test_empty_comment_is_rejected(commented_post):
    alice, bob, comment_id = commented_post
    response = alice.post(f"{API}/posts/1/comments", json={"content": "   "})
    assert response.status_code == 422


def test_delete_account(users, login):
    alice = login("alice", "alice123")
    bob = login("bob", "bob123")
    bob.post(f"{API}/communities", json={"name": "OCD"})
    bob.post(f"{API}/matches/optin")
    bob.post(f"{API}/posts", json={"content": "bye"})

    assert bob.delete(f"{API}/users").status_code == 200
    assert alice.get(f"{API}/communities/OCD/members").json() == []
    assert alice.get(f"{API}/posts").json()[0]["author"] == "DELETED_USER"
    assert bob.get(f"{API}/session").status_code == 401
    assert alice.get(f"{API}/users/bob").status_code == 404


def test_community_name_with_slash_is_rejected(users, login):
    alice = login("alice", "alice123")
    response = alice.post(f"{API}/communities", json={"name": "Anxiety/Depression"})
    assert response.status_code == 422
    assert alice.get(f"{API}/communities/all").json() == []

    # A name without a slash stays reachable through the member routes.
    alice.post(f"{API}/communities", json={"name": "Anxiety and Depression"})
    bob = login("bob", "bob123")
    assert bob.post(f"{API}/communities/Anxiety and Depression/members").status_code == 200
    assert bob.get(f"{API}/communities/Anxiety and Depression/members").json() == ["alice", "bob"]


def test_group_name_with_slash_is_rejected(users, login):
    alice = login("alice", "alice123")
    assert alice.post(f"{API}/groups", json={"name": "walk/run"}).status_code == 422
    assert alice.get(f"{API}/groups").json() == []


def test_blank_symptom_is_rejected(users, login):
    alice = login("alice", "alice123")
    alice.post(f"{API}/communities", json={"name": "JIA"})
    assert alice.post(f"{API}/communities/JIA/symptoms", json={"symptom": "   "}).status_code == 422
    assert alice.get(f"{API}/communities/JIA/symptoms").json() == []

    response = alice.get(f"{API}/communities/search", params={"symptom": "  "})
    assert response.status_code == 400
    assert response.json() == {"detail": "Symptom must be non-empty!"}


def test_anyone_may_delete_comments(commented_post, client, login, monkeypatch):
    monkeypatch.setattr(settings, "comment_delete_policy", "anyone")
    alice, bob, comment_id = commented_post
    client.post(f"{API}/users", json={"username": "carol", "password": "carol123"})
    carol = login("carol", "carol123")
    assert carol.delete(f"{API}/comments/{comment_id}").status_code == 200
    assert alice.get(f"{API}/posts/1/comments").json() == []
