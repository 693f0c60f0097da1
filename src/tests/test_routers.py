from datetime import timedelta

from sqlmodel import Session

from danke.config import Settings, get_settings
from danke.main import app
from danke.models.board import Board
from danke.utils import utcnow

from conftest import doc, headers_for


def create_board(client, identity, **fields):
    body = {"title": "Thank you, Ada!", "recipient_name": "Ada"}
    body.update(fields)
    response = client.post("/boards/", json=body, headers=headers_for(identity))
    assert response.status_code == 201, response.text
    return response.json()


def create_post(client, identity, board_id, text="Thanks for the great onboarding"):
    return client.post(
        "/posts/",
        json={"board_id": board_id, "content": doc(text)},
        headers=headers_for(identity),
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_api_key_is_checked_when_configured(client, creator):
    app.dependency_overrides[get_settings] = lambda: Settings(secret_token="s3cret")

    assert client.get("/boards/mine", headers=headers_for(creator)).status_code == 401
    response = client.get("/boards/mine", headers={**headers_for(creator), "X-API-Key": "s3cret"})
    assert response.status_code == 200


def test_create_board_requires_identity(client):
    response = client.post("/boards/", json={"title": "Hi", "recipient_name": "Ada"})
    assert response.status_code == 401


def test_create_board_with_invalid_config(client, creator):
    response = client.post(
        "/boards/",
        json={"title": "Hi", "recipient_name": "Ada", "posting_mode": "single", "max_posts_per_user": "3"},
        headers=headers_for(creator),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Single posting mode cannot have max posts per user greater than 1"


def test_create_board_rejects_past_expiration(client, creator):
    response = client.post(
        "/boards/",
        json={
            "title": "Hi",
            "recipient_name": "Ada",
            "expiration_date": (utcnow() - timedelta(days=1)).isoformat(),
        },
        headers=headers_for(creator),
    )
    assert response.status_code == 400


def test_private_board_status_codes(client, creator, member, outsider):
    board = create_board(client, creator, board_visibility="private", allowed_domains=["acme.com"])

    assert client.get(f"/boards/{board['view_token']}").status_code == 401
    assert client.get(f"/boards/{board['id']}", headers=headers_for(outsider)).status_code == 403

    response = client.get(f"/boards/{board['id']}", headers=headers_for(member))
    assert response.status_code == 200
    page = response.json()
    assert page["board"]["id"] == board["id"]
    assert "view_token" not in page["board"]
    assert not page["is_creator"]


def test_expired_board_is_gone(client, creator, member, boards_repository):
    board = create_board(client, creator)
    # Expire it directly, the update endpoint refuses past dates
    with Session(boards_repository.engine) as session:
        row = session.get(Board, board["id"])
        row.expiration_date = utcnow() - timedelta(minutes=5)
        session.add(row)
        session.commit()

    assert client.get(f"/boards/{board['id']}", headers=headers_for(member)).status_code == 410
    assert client.get(f"/boards/{board['id']}", headers=headers_for(creator)).status_code == 410


def test_unknown_board_is_404(client, member):
    assert client.get("/boards/nope", headers=headers_for(member)).status_code == 404


def test_only_creator_updates_board(client, creator, member):
    board = create_board(client, creator)

    response = client.put(f"/boards/{board['id']}", json={"title": "New"}, headers=headers_for(member))
    assert response.status_code == 403

    response = client.put(
        f"/boards/{board['id']}",
        json={"title": "New", "blocked_emails": ["Spam@Acme.com"]},
        headers=headers_for(creator),
    )
    assert response.status_code == 200
    assert response.json()["title"] == "New"
    assert response.json()["blocked_emails"] == ["spam@acme.com"]


def test_posting_permissions_and_single_mode(client, creator, member):
    board = create_board(client, creator, posting_mode="single")

    permissions = client.get(f"/boards/{board['id']}/posting-permissions", headers=headers_for(member)).json()
    assert permissions["can_post"]
    assert permissions["posting_mode"] == "single"

    assert create_post(client, member, board["id"]).status_code == 201
    response = create_post(client, member, board["id"])
    assert response.status_code == 403
    assert response.json()["detail"] == "This board only allows one post per user"

    permissions = client.get(f"/boards/{board['id']}/posting-permissions", headers=headers_for(member)).json()
    assert not permissions["can_post"]
    assert permissions["post_count"] == 1


def test_moderation_flow_over_http(client, creator, member, outsider):
    board = create_board(client, creator, moderation_enabled=True)
    post = create_post(client, member, board["id"]).json()
    assert post["moderation_status"] == "pending"

    # Pending posts are hidden from regular visitors but not from the creator
    assert client.get(f"/boards/{board['id']}", headers=headers_for(outsider)).json()["posts"] == []
    assert len(client.get(f"/boards/{board['id']}", headers=headers_for(creator)).json()["posts"]) == 1

    response = client.post(f"/posts/{post['id']}/moderate", json={"action": "approve"},
                           headers=headers_for(outsider))
    assert response.status_code == 403

    response = client.post(f"/posts/{post['id']}/moderate", json={"action": "request_change"},
                           headers=headers_for(creator))
    assert response.status_code == 400
    assert response.json()["detail"] == "Reason is required"

    response = client.post(f"/posts/{post['id']}/moderate", json={"action": "approve"},
                           headers=headers_for(creator))
    assert response.status_code == 200
    assert response.json()["moderation_status"] == "approved"

    assert len(client.get(f"/boards/{board['id']}", headers=headers_for(outsider)).json()["posts"]) == 1

    notifications = client.get("/notifications/", headers=headers_for(member)).json()
    assert notifications["unread_count"] == 1
    assert notifications["notifications"][0]["type"] == "post_approved"

    response = client.post("/notifications/read-all", headers=headers_for(member))
    assert response.json()["updated"] == 1


def test_moderate_unknown_post(client, creator):
    response = client.post("/posts/missing/moderate", json={"action": "approve"}, headers=headers_for(creator))
    assert response.status_code == 404


def test_moderator_management_over_http(client, creator, member, outsider):
    board = create_board(client, creator)
    url = f"/boards/{board['id']}/moderators"

    response = client.post(url, json={"email": member.email}, headers=headers_for(creator))
    assert response.status_code == 201

    assert client.post(url, json={"email": member.email}, headers=headers_for(creator)).status_code == 409
    assert client.post(url, json={"email": creator.email}, headers=headers_for(creator)).status_code == 400
    assert client.post(url, json={"email": outsider.email}, headers=headers_for(member)).status_code == 403
    assert client.post(url, json={"email": "ghost@acme.com"}, headers=headers_for(creator)).status_code == 404

    assert client.get(url, headers=headers_for(outsider)).status_code == 403
    moderators = client.get(url, headers=headers_for(member)).json()["moderators"]
    assert [m["user_id"] for m in moderators] == [member.id]

    boards = client.get("/users/me/moderated-boards", headers=headers_for(member)).json()
    assert [b["board_id"] for b in boards] == [board["id"]]

    assert client.delete(f"{url}/{member.id}", headers=headers_for(creator)).status_code == 200
    assert client.delete(f"{url}/{member.id}", headers=headers_for(creator)).status_code == 404


def test_moderation_queue_is_for_moderators(client, creator, member):
    board = create_board(client, creator, moderation_enabled=True)
    create_post(client, member, board["id"])

    assert client.get(f"/boards/{board['id']}/moderation", headers=headers_for(member)).status_code == 403
    queue = client.get(f"/boards/{board['id']}/moderation", headers=headers_for(creator)).json()
    assert [p["moderation_status"] for p in queue["posts"]] == ["pending"]


def test_anonymous_post_hides_author(client, creator, member):
    board = create_board(client, creator)
    response = client.post(
        "/posts/",
        json={"board_id": board["id"], "content": doc("From a secret fan"), "is_anonymous": True},
        headers=headers_for(member),
    )
    assert response.status_code == 201

    posts = client.get(f"/boards/{board['id']}").json()["posts"]
    assert posts[0]["creator"] == {"id": None, "name": "Anonymous", "avatar_url": None}


def test_delete_own_post(client, creator, member, outsider):
    board = create_board(client, creator)
    post = create_post(client, member, board["id"]).json()

    assert client.delete(f"/posts/{post['id']}", headers=headers_for(outsider)).status_code == 403
    assert client.delete(f"/posts/{post['id']}", headers=headers_for(member)).status_code == 200
    assert client.get("/users/me/posts", headers=headers_for(member)).json() == []


def test_creator_can_post_on_board_excluding_their_domain(client, creator, member):
    board = create_board(client, creator, board_visibility="private", allowed_domains=["partner.org"])

    page = client.get(f"/boards/{board['id']}", headers=headers_for(creator)).json()
    assert page["is_creator"]

    permissions = client.get(f"/boards/{board['id']}/posting-permissions", headers=headers_for(creator)).json()
    assert permissions["can_post"]
    assert permissions["reason"] is None
    assert create_post(client, creator, board["id"]).status_code == 201

    permissions = client.get(f"/boards/{board['id']}/posting-permissions", headers=headers_for(member)).json()
    assert not permissions["can_post"]


def test_update_board_rejects_null_for_required_fields(client, creator):
    board = create_board(client, creator)
    url = f"/boards/{board['id']}"

    assert client.put(url, json={"title": None}, headers=headers_for(creator)).status_code == 422
    assert client.put(url, json={"posting_mode": None}, headers=headers_for(creator)).status_code == 422

    response = client.put(url, json={"expiration_date": None, "max_posts_per_user": None},
                          headers=headers_for(creator))
    assert response.status_code == 200
    assert response.json()["title"] == board["title"]
    assert response.json()["posting_mode"] == "multiple"


def test_forwarded_email_owned_by_another_user_conflicts(client, creator):
    headers = {"X-User-Id": "user_impostor", "X-User-Email": creator.email, "X-User-Name": "Imp"}
    response = client.get("/boards/mine", headers=headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "Email is already registered to another user"
