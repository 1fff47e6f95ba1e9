"""Comments embedded in posts.

Invariants:
    - Any authenticated user may comment; unknown post → 404
    - Edit/delete match post + comment + comment author in one step
    - A different author gets 404 (not 403): ownership is part of the lookup
    - The post's author has no say over other people's comments
"""

from bson import ObjectId


async def _comment(client, post_id, headers, body="Nice post"):
    res = await client.post(
        f"/api/posts/{post_id}/comments", json={"body": body}, headers=headers,
    )
    assert res.status_code == 201, res.text
    return res.json()["comment"]


async def test_add_comment_returns_201_with_generated_id(client, signup, create_post):
    alice_id, alice = await signup("alice", "pw1")
    bob_id, bob = await signup("bob", "pw2")
    post = await create_post(alice)

    comment = await _comment(client, post["id"], bob)

    assert ObjectId.is_valid(comment["id"])
    assert comment["author"] == bob_id
    assert comment["body"] == "Nice post"

    res = await client.get(f"/api/posts/{post['id']}")
    assert [c["id"] for c in res.json()["post"]["comments"]] == [comment["id"]]


async def test_add_comment_to_unknown_post_is_404(client, signup):
    _, headers = await signup()

    res = await client.post(
        f"/api/posts/{ObjectId()}/comments", json={"body": "hi"}, headers=headers,
    )

    assert res.status_code == 404


async def test_add_empty_comment_is_400(client, signup, create_post):
    _, headers = await signup()
    post = await create_post(headers)

    res = await client.post(
        f"/api/posts/{post['id']}/comments", json={"body": ""}, headers=headers,
    )

    assert res.status_code == 400
    assert "body" in res.json()["fields"]


async def test_add_comment_requires_token(client, signup, create_post):
    _, headers = await signup()
    post = await create_post(headers)

    res = await client.post(f"/api/posts/{post['id']}/comments", json={"body": "hi"})

    assert res.status_code == 401


async def test_author_can_update_comment_right_away(client, signup, create_post):
    _, headers = await signup()
    post = await create_post(headers)
    comment = await _comment(client, post["id"], headers)

    res = await client.put(
        f"/api/posts/{post['id']}/comments/{comment['id']}",
        json={"body": "Edited"},
        headers=headers,
    )

    assert res.status_code == 200
    comments = res.json()["post"]["comments"]
    assert comments[0]["id"] == comment["id"]
    assert comments[0]["body"] == "Edited"


async def test_other_user_updating_comment_gets_404(client, signup, create_post, ctx):
    _, alice = await signup("alice", "pw1")
    _, bob = await signup("bob", "pw2")
    post = await create_post(alice)
    comment = await _comment(client, post["id"], bob)

    # Even the post's author cannot edit bob's comment
    res = await client.put(
        f"/api/posts/{post['id']}/comments/{comment['id']}",
        json={"body": "Edited by alice"},
        headers=alice,
    )

    assert res.status_code == 404
    assert res.json()["error"] == "Post or comment not found"
    assert ctx.posts.posts[post["id"]].comments[0].body == "Nice post"


async def test_update_comment_with_unknown_ids_is_404(client, signup, create_post):
    _, headers = await signup()
    post = await create_post(headers)
    comment = await _comment(client, post["id"], headers)

    wrong_comment = await client.put(
        f"/api/posts/{post['id']}/comments/{ObjectId()}", json={"body": "x"}, headers=headers,
    )
    wrong_post = await client.put(
        f"/api/posts/{ObjectId()}/comments/{comment['id']}", json={"body": "x"}, headers=headers,
    )

    assert wrong_comment.status_code == 404
    assert wrong_post.status_code == 404
    assert wrong_comment.json()["error"] == wrong_post.json()["error"]


async def test_author_deletes_comment(client, signup, create_post):
    _, headers = await signup()
    post = await create_post(headers)
    keep = await _comment(client, post["id"], headers, body="keep")
    drop = await _comment(client, post["id"], headers, body="drop")

    res = await client.delete(
        f"/api/posts/{post['id']}/comments/{drop['id']}", headers=headers,
    )

    assert res.status_code == 200
    assert [c["id"] for c in res.json()["post"]["comments"]] == [keep["id"]]


async def test_other_user_deleting_comment_gets_404(client, signup, create_post, ctx):
    _, alice = await signup("alice", "pw1")
    _, bob = await signup("bob", "pw2")
    post = await create_post(alice)
    comment = await _comment(client, post["id"], alice)

    res = await client.delete(
        f"/api/posts/{post['id']}/comments/{comment['id']}", headers=bob,
    )

    assert res.status_code == 404
    assert len(ctx.posts.posts[post["id"]].comments) == 1


async def test_deleting_same_comment_twice_is_404(client, signup, create_post):
    _, headers = await signup()
    post = await create_post(headers)
    comment = await _comment(client, post["id"], headers)
    url = f"/api/posts/{post['id']}/comments/{comment['id']}"

    assert (await client.delete(url, headers=headers)).status_code == 200
    assert (await client.delete(url, headers=headers)).status_code == 404
