"""Full user journey through the HTTP surface."""


async def test_register_login_create_update_delete_lookup(client):
    res = await client.post("/api/register", json={"username": "alice", "password": "pw1"})
    assert res.status_code == 201

    res = await client.post("/api/login", json={"username": "alice", "password": "pw1"})
    assert res.status_code == 200
    headers = {"Authorization": f"Bearer {res.json()['token']}"}

    res = await client.post(
        "/api/posts", json={"title": "Hi", "content": "World"}, headers=headers,
    )
    assert res.status_code == 201
    post_id = res.json()["post"]["id"]

    res = await client.put(f"/api/posts/{post_id}", json={"title": "Hi2"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["post"]["title"] == "Hi2"

    res = await client.delete(f"/api/posts/{post_id}", headers=headers)
    assert res.status_code == 200

    res = await client.get(f"/api/posts/{post_id}")
    assert res.status_code == 404
    assert res.json()["error"] == "Post not found"
