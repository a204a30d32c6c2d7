from blog_api.models.post import Post
from conftest import auth_headers


def test_create_post_uses_authenticated_author(client, register):
    alice = register(name="Alice")

    response = client.post(
        "/api/posts",
        json={"title": "Hello World", "content": "This is my first post", "authorId": 999},
        headers=auth_headers(alice["token"]),
    )

    assert response.status_code == 201
    post = response.json()["post"]
    assert post["authorName"] == "Alice"
    assert post["authorId"] == alice["user"]["id"]
    assert post["likes"] == 0
    assert post["views"] == 0
    assert post["tags"] == []
    assert post["image"] == ""


def test_create_post_requires_auth(client, db_session):
    response = client.post("/api/posts", json={
        "title": "Hello World", "content": "This is my first post"
    })

    assert response.status_code == 401
    assert db_session.query(Post).count() == 0


def test_create_post_without_title_or_content(client, register, db_session):
    token = register()["token"]

    for payload in ({"content": "This is my first post"}, {"title": "Hello World"},
                    {"title": "", "content": "This is my first post"}):
        response = client.post("/api/posts", json=payload, headers=auth_headers(token))

        assert response.status_code == 400
        assert response.json()["error"] == "Title and content are required"
    assert db_session.query(Post).count() == 0


def test_create_post_rejects_whitespace_content(client, register, db_session):
    token = register()["token"]

    response = client.post(
        "/api/posts",
        json={"title": "Hello World", "content": "   ab    "},
        headers=auth_headers(token),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Content must contain at least 5 meaningful characters"
    assert db_session.query(Post).count() == 0


def test_create_post_runs_field_validation(client, register, db_session):
    token = register()["token"]

    response = client.post(
        "/api/posts",
        json={"title": "Hi", "content": "too short", "image": "not a url"},
        headers=auth_headers(token),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert body["errors"]["title"] == "Title should be greater than 5 valid characters"
    assert body["errors"]["content"] == "Minimum content should be 10 characters"
    assert body["errors"]["image"] == "Image must be a valid URL"
    assert db_session.query(Post).count() == 0


def test_create_post_normalizes_comma_separated_tags(client, register, create_post):
    token = register()["token"]

    post = create_post(token, tags=" python, fastapi ,, blog ")

    assert post["tags"] == ["python", "fastapi", "blog"]


def test_create_post_caps_tags_at_ten(client, register, create_post):
    token = register()["token"]

    post = create_post(token, tags=[f"tag{i}" for i in range(15)])

    assert post["tags"] == [f"tag{i}" for i in range(10)]


def test_created_post_round_trips(client, register, create_post):
    token = register()["token"]
    created = create_post(
        token, tags=["python", "web"], image="https://example.com/cover.png")

    response = client.get(f"/api/posts/{created['id']}")

    assert response.status_code == 200
    fetched = response.json()["post"]
    for field in ("title", "content", "tags", "image", "authorId", "authorName"):
        assert fetched[field] == created[field]


def test_get_post_with_malformed_id(client, db_session):
    for bad_id in ("abc", "0", "-3", "1.5"):
        response = client.get(f"/api/posts/{bad_id}")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid post ID"


def test_get_missing_post(client, db_session):
    response = client.get("/api/posts/12345")

    assert response.status_code == 404
    assert response.json()["error"] == "Post not found"


def test_list_posts_newest_first(client, register, create_post):
    token = register()["token"]
    first = create_post(token, title="First post")
    second = create_post(token, title="Second post")

    response = client.get("/api/posts?page=1&limit=10")

    assert response.status_code == 200
    ids = [post["id"] for post in response.json()["posts"]]
    assert ids == [second["id"], first["id"]]


def test_list_posts_defaults(client, register, create_post):
    token = register()["token"]
    for i in range(12):
        create_post(token, title=f"Post number {i}")

    body = client.get("/api/posts").json()

    assert len(body["posts"]) == 10
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalPosts": 12,
        "hasNextPage": True,
        "hasPrevPage": False,
    }


def test_list_posts_ignores_search(client, register, create_post):
    token = register()["token"]
    create_post(token, title="About cats")
    create_post(token, title="About dogs")

    body = client.get("/api/posts?search=cats").json()

    assert body["pagination"]["totalPosts"] == 2


def test_list_posts_rejects_bad_paging(client, db_session):
    assert client.get("/api/posts?page=0").status_code == 400
    assert client.get("/api/posts?limit=0").status_code == 400
    assert client.get("/api/posts?limit=101").status_code == 400
    response = client.get("/api/posts?page=abc")
    assert response.status_code == 400
    assert "page" in response.json()["errors"]


def test_owner_can_update_post(client, register, create_post):
    token = register()["token"]
    post = create_post(token, tags=["python"], image="https://example.com/a.png")

    response = client.put(
        f"/api/posts/{post['id']}",
        json={"title": "Hello Again", "content": "Edited content for the post"},
        headers=auth_headers(token),
    )

    assert response.status_code == 200
    updated = response.json()["post"]
    assert updated["title"] == "Hello Again"
    assert updated["content"] == "Edited content for the post"
    # Omitted fields keep their stored values
    assert updated["tags"] == ["python"]
    assert updated["image"] == "https://example.com/a.png"
    assert updated["authorId"] == post["authorId"]


def test_update_replaces_tags_and_clears_image(client, register, create_post):
    token = register()["token"]
    post = create_post(token, tags=["python"], image="https://example.com/a.png")

    updated = client.put(
        f"/api/posts/{post['id']}",
        json={"title": "Hello World", "content": "This is my first post",
              "tags": "rust, go", "image": ""},
        headers=auth_headers(token),
    ).json()["post"]

    assert updated["tags"] == ["rust", "go"]
    assert updated["image"] == ""


def test_update_requires_title_and_content(client, register, create_post):
    token = register()["token"]
    post = create_post(token)

    response = client.put(
        f"/api/posts/{post['id']}", json={"title": "Only a title"},
        headers=auth_headers(token))

    assert response.status_code == 400
    assert response.json()["error"] == "Title and content are required"


def test_update_revalidates_fields(client, register, create_post, db_session):
    token = register()["token"]
    post = create_post(token)

    response = client.put(
        f"/api/posts/{post['id']}",
        json={"title": "x" * 101, "content": "This is my first post"},
        headers=auth_headers(token),
    )

    assert response.status_code == 400
    assert response.json()["errors"]["title"] == "Title should not exceed 100 characters"
    assert db_session.query(Post).one().title == "Hello World"


def test_non_owner_cannot_update(client, register, create_post, db_session):
    owner = register(name="Alice", email="alice@example.com")
    intruder = register(name="Mallory", email="mallory@example.com")
    post = create_post(owner["token"])

    response = client.put(
        f"/api/posts/{post['id']}",
        json={"title": "Hijacked title", "content": "Hijacked content here"},
        headers=auth_headers(intruder["token"]),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden: You can only edit your own posts"
    stored = db_session.query(Post).one()
    assert stored.title == "Hello World"
    assert stored.content == "This is my first post"


def test_non_owner_cannot_delete(client, register, create_post, db_session):
    owner = register(name="Alice", email="alice@example.com")
    intruder = register(name="Mallory", email="mallory@example.com")
    post = create_post(owner["token"])

    response = client.delete(
        f"/api/posts/{post['id']}", headers=auth_headers(intruder["token"]))

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden: You can only delete your own posts"
    assert db_session.query(Post).count() == 1


def test_update_missing_post(client, register):
    token = register()["token"]

    response = client.put(
        "/api/posts/999",
        json={"title": "Hello World", "content": "This is my first post"},
        headers=auth_headers(token),
    )

    assert response.status_code == 404


def test_update_malformed_id(client, register):
    token = register()["token"]

    response = client.put(
        "/api/posts/not-an-id",
        json={"title": "Hello World", "content": "This is my first post"},
        headers=auth_headers(token),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid post ID"


def test_owner_can_delete_post(client, register, create_post, db_session):
    token = register()["token"]
    post = create_post(token)

    response = client.delete(f"/api/posts/{post['id']}", headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json() == {"message": "Post deleted successfully"}
    assert db_session.query(Post).count() == 0
    assert client.get(f"/api/posts/{post['id']}").status_code == 404
    again = client.delete(f"/api/posts/{post['id']}", headers=auth_headers(token))
    assert again.status_code == 404


def test_delete_requires_auth(client, register, create_post, db_session):
    post = create_post(register()["token"])

    response = client.delete(f"/api/posts/{post['id']}")

    assert response.status_code == 401
    assert db_session.query(Post).count() == 1


def test_author_name_is_not_rewritten_on_rename(client, register, create_post):
    alice = register(name="Alice", email="alice@example.com")
    post = create_post(alice["token"])

    client.put(
        "/api/users/profile",
        json={"name": "Alicia", "email": "alice@example.com"},
        headers=auth_headers(alice["token"]),
    )

    assert client.get(f"/api/posts/{post['id']}").json()["post"]["authorName"] == "Alice"


def test_publish_scenario(client):
    registered = client.post("/api/auth/register", json={
        "name": "Alice", "email": "a@x.com", "password": "secret1"
    })
    assert registered.status_code == 201
    assert registered.json()["token"]

    login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert login.status_code == 200
    assert login.json()["user"]["id"] == registered.json()["user"]["id"]

    created = client.post(
        "/api/posts",
        json={"title": "Hello World", "content": "This is my first post"},
        headers=auth_headers(login.json()["token"]),
    )
    assert created.status_code == 201
    assert created.json()["post"]["authorName"] == "Alice"

    feed = client.get("/api/posts?page=1&limit=10").json()
    assert feed["posts"][0]["id"] == created.json()["post"]["id"]
