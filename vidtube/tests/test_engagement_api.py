"""
Tests for likes, comments, tweets and subscriptions
"""

from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.subscription import Subscription
from vidtube.models.tweet import Tweet
from vidtube.services.like_service import LikeService
from vidtube.services.subscription_service import SubscriptionService


async def count(db, model, *where):
    return await db.scalar(select(func.count()).select_from(model).where(*where))


class TestLikes:

    async def test_video_like_toggle(self, client: AsyncClient, test_db, test_user, other_user, make_video, auth_headers):
        video = await make_video(other_user)
        url = f"/api/v1/likes/toggle/v/{video.id}"

        first = await client.post(url, headers=auth_headers)
        assert first.json()["data"] == {"action": "added", "is_liked": True}
        assert await count(test_db, Like) == 1

        second = await client.post(url, headers=auth_headers)
        assert second.json()["data"] == {"action": "removed", "is_liked": False}
        assert await count(test_db, Like) == 0

        third = await client.post(url, headers=auth_headers)
        assert third.json()["data"]["action"] == "added"
        assert await count(test_db, Like) == 1

    async def test_comment_and_tweet_likes(self, client: AsyncClient, test_db, test_user, other_user, make_video, auth_headers):
        video = await make_video(other_user)
        comment = Comment(content="First!", video_id=video.id, owner_id=other_user.id)
        tweet = Tweet(content="Hello world", owner_id=other_user.id)
        test_db.add_all([comment, tweet])
        await test_db.commit()

        assert (await client.post(f"/api/v1/likes/toggle/c/{comment.id}", headers=auth_headers)).status_code == 200
        assert (await client.post(f"/api/v1/likes/toggle/t/{tweet.id}", headers=auth_headers)).status_code == 200

        assert await count(test_db, Like, Like.comment_id == comment.id) == 1
        assert await count(test_db, Like, Like.tweet_id == tweet.id) == 1

    async def test_like_unknown_target(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            "/api/v1/likes/toggle/v/00000000-0000-0000-0000-000000000000", headers=auth_headers
        )
        assert response.status_code == 404

    async def test_liked_videos(self, client: AsyncClient, test_user, other_user, make_video, auth_headers):
        liked = await make_video(other_user, title="Liked")
        await make_video(other_user, title="Ignored")
        await client.post(f"/api/v1/likes/toggle/v/{liked.id}", headers=auth_headers)

        response = await client.get("/api/v1/likes/videos", headers=auth_headers)

        videos = response.json()["data"]
        assert [video["title"] for video in videos] == ["Liked"]
        assert videos[0]["owner"]["username"] == "bob"


class TestComments:

    async def test_add_and_list_comments(self, client: AsyncClient, test_user, other_user, make_video, auth_headers, other_headers):
        video = await make_video(other_user)

        created = await client.post(
            f"/api/v1/comments/{video.id}", json={"content": "  Great video  "}, headers=auth_headers
        )
        assert created.status_code == 201
        comment = created.json()["data"]
        assert comment["content"] == "Great video"
        assert comment["video"] == str(video.id)
        assert comment["owner"] == str(test_user.id)

        await client.post(f"/api/v1/likes/toggle/c/{comment['id']}", headers=other_headers)

        listing = await client.get(f"/api/v1/comments/{video.id}", headers=auth_headers)
        page = listing.json()["data"]
        assert page["total_docs"] == 1
        assert page["docs"][0]["owner"]["username"] == "alice"
        assert page["docs"][0]["likes_count"] == 1

    async def test_blank_comment_rejected(self, client: AsyncClient, test_user, make_video, auth_headers):
        video = await make_video(test_user)
        response = await client.post(f"/api/v1/comments/{video.id}", json={"content": "   "}, headers=auth_headers)
        assert response.status_code == 400

    async def test_comment_on_unknown_video(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            "/api/v1/comments/00000000-0000-0000-0000-000000000000", json={"content": "Hi"}, headers=auth_headers
        )
        assert response.status_code == 404

    async def test_update_and_delete_require_owner(
        self, client: AsyncClient, test_db, test_user, other_user, make_video, auth_headers, other_headers
    ):
        video = await make_video(test_user)
        created = await client.post(f"/api/v1/comments/{video.id}", json={"content": "Mine"}, headers=auth_headers)
        comment_id = created.json()["data"]["id"]

        forbidden = await client.patch(f"/api/v1/comments/c/{comment_id}", json={"content": "Theirs"}, headers=other_headers)
        assert forbidden.status_code == 403
        assert forbidden.json()["message"] == "Not authorized to edit this comment"
        assert (await client.delete(f"/api/v1/comments/c/{comment_id}", headers=other_headers)).status_code == 403

        updated = await client.patch(f"/api/v1/comments/c/{comment_id}", json={"content": "Edited"}, headers=auth_headers)
        assert updated.json()["data"]["content"] == "Edited"

        await client.post(f"/api/v1/likes/toggle/c/{comment_id}", headers=other_headers)
        deleted = await client.delete(f"/api/v1/comments/c/{comment_id}", headers=auth_headers)
        assert deleted.status_code == 200
        assert await count(test_db, Comment) == 0
        assert await count(test_db, Like) == 0


class TestTweets:

    async def test_tweet_lifecycle(self, client: AsyncClient, test_db, test_user, other_user, auth_headers, other_headers):
        created = await client.post("/api/v1/tweets", json={"content": "Shipping today"}, headers=auth_headers)
        assert created.status_code == 201
        tweet = created.json()["data"]
        assert tweet["owner"] == str(test_user.id)

        listing = await client.get(f"/api/v1/tweets/user/{test_user.id}", headers=other_headers)
        assert [item["content"] for item in listing.json()["data"]] == ["Shipping today"]

        forbidden = await client.patch(f"/api/v1/tweets/{tweet['id']}", json={"content": "Nope"}, headers=other_headers)
        assert forbidden.status_code == 403

        updated = await client.patch(f"/api/v1/tweets/{tweet['id']}", json={"content": "Shipped"}, headers=auth_headers)
        assert updated.json()["data"]["content"] == "Shipped"

        await client.post(f"/api/v1/likes/toggle/t/{tweet['id']}", headers=other_headers)
        deleted = await client.delete(f"/api/v1/tweets/{tweet['id']}", headers=auth_headers)
        assert deleted.status_code == 200
        assert await count(test_db, Tweet) == 0
        assert await count(test_db, Like) == 0

    async def test_tweets_of_unknown_user(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get("/api/v1/tweets/user/00000000-0000-0000-0000-000000000000", headers=auth_headers)
        assert response.status_code == 404


class TestSubscriptions:

    async def test_toggle_subscription(self, client: AsyncClient, test_db, test_user, other_user, auth_headers):
        url = f"/api/v1/subscriptions/c/{other_user.id}"

        first = await client.post(url, headers=auth_headers)
        assert first.json()["data"] == {"action": "added", "is_subscribed": True}
        assert await count(test_db, Subscription) == 1

        second = await client.post(url, headers=auth_headers)
        assert second.json()["data"] == {"action": "removed", "is_subscribed": False}
        assert await count(test_db, Subscription) == 0

    async def test_self_subscription_rejected(self, client: AsyncClient, test_db, test_user, auth_headers):
        response = await client.post(f"/api/v1/subscriptions/c/{test_user.id}", headers=auth_headers)

        assert response.status_code == 400
        assert await count(test_db, Subscription) == 0

    async def test_subscribe_to_unknown_channel(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            "/api/v1/subscriptions/c/00000000-0000-0000-0000-000000000000", headers=auth_headers
        )
        assert response.status_code == 404

    async def test_subscriber_lists(self, client: AsyncClient, make_user, test_user, other_user, auth_headers):
        carol = await make_user("carol")
        await client.post(f"/api/v1/subscriptions/c/{other_user.id}", headers=auth_headers)
        await client.post(f"/api/v1/subscriptions/c/{carol.id}", headers=auth_headers)

        subscribers = await client.get(f"/api/v1/subscriptions/c/{other_user.id}", headers=auth_headers)
        assert [user["username"] for user in subscribers.json()["data"]] == ["alice"]

        channels = await client.get(f"/api/v1/subscriptions/u/{test_user.id}", headers=auth_headers)
        assert sorted(user["username"] for user in channels.json()["data"]) == ["bob", "carol"]
        assert "subscribed_at" in channels.json()["data"][0]


def skip_deletes(monkeypatch, session):
    """Make the toggle's delete see nothing, as when a concurrent toggle inserts right after it"""
    execute = session.execute

    async def execute_without_deletes(statement, *args, **kwargs):
        if getattr(statement, "is_delete", False):
            return SimpleNamespace(rowcount=0)
        return await execute(statement, *args, **kwargs)

    monkeypatch.setattr(session, "execute", execute_without_deletes)


class TestConcurrentToggles:

    async def test_duplicate_like_rejected_by_constraint(self, test_db, test_user, other_user, make_video):
        video = await make_video(other_user)
        test_db.add_all([
            Like(owner_id=test_user.id, video_id=video.id),
            Like(owner_id=test_user.id, video_id=video.id),
        ])

        with pytest.raises(IntegrityError):
            await test_db.commit()
        await test_db.rollback()

        assert await count(test_db, Like) == 0

    async def test_duplicate_subscription_rejected_by_constraint(self, test_db, test_user, other_user):
        test_db.add_all([
            Subscription(subscriber_id=test_user.id, channel_id=other_user.id),
            Subscription(subscriber_id=test_user.id, channel_id=other_user.id),
        ])

        with pytest.raises(IntegrityError):
            await test_db.commit()
        await test_db.rollback()

        assert await count(test_db, Subscription) == 0

    async def test_like_lost_race_counts_as_added(
        self, monkeypatch, session_factory, test_db, test_user, other_user, make_video
    ):
        video = await make_video(other_user)
        test_db.add(Like(owner_id=test_user.id, video_id=video.id))
        await test_db.commit()

        async with session_factory() as session:
            skip_deletes(monkeypatch, session)
            result = await LikeService.toggle_like(session, "video", video.id, test_user)

        assert result.action == "added"
        assert result.is_liked is True
        assert await count(test_db, Like, Like.owner_id == test_user.id, Like.video_id == video.id) == 1

    async def test_subscription_lost_race_counts_as_added(
        self, monkeypatch, session_factory, test_db, test_user, other_user
    ):
        test_db.add(Subscription(subscriber_id=test_user.id, channel_id=other_user.id))
        await test_db.commit()

        async with session_factory() as session:
            skip_deletes(monkeypatch, session)
            result = await SubscriptionService.toggle_subscription(session, other_user.id, test_user)

        assert result.action == "added"
        assert result.is_subscribed is True
        assert await count(test_db, Subscription) == 1


class TestDraftVideos:

    async def test_other_users_draft_is_hidden(
        self, client: AsyncClient, test_db, test_user, other_user, make_video, auth_headers
    ):
        draft = await make_video(other_user, is_published=False)

        responses = {
            "list_comments": await client.get(f"/api/v1/comments/{draft.id}", headers=auth_headers),
            "add_comment": await client.post(
                f"/api/v1/comments/{draft.id}", json={"content": "Sneak peek"}, headers=auth_headers
            ),
            "like": await client.post(f"/api/v1/likes/toggle/v/{draft.id}", headers=auth_headers),
        }

        assert {name: response.status_code for name, response in responses.items()} == {
            "list_comments": 404,
            "add_comment": 404,
            "like": 404,
        }
        assert await count(test_db, Comment) == 0
        assert await count(test_db, Like) == 0

    async def test_owner_can_engage_with_own_draft(self, client: AsyncClient, test_user, make_video, auth_headers):
        draft = await make_video(test_user, is_published=False)

        comment = await client.post(f"/api/v1/comments/{draft.id}", json={"content": "Note to self"}, headers=auth_headers)
        listing = await client.get(f"/api/v1/comments/{draft.id}", headers=auth_headers)
        like = await client.post(f"/api/v1/likes/toggle/v/{draft.id}", headers=auth_headers)

        assert comment.status_code == 201
        assert listing.json()["data"]["total_docs"] == 1
        assert like.json()["data"]["action"] == "added"
