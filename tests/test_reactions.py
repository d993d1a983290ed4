import asyncio
import threading
import unittest

from api_testcase import ApiTestCase

from video_hub_api.app.services.reaction_service import ReactionService


class ReactionTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.create_channel("a1")
        self.create_channel("b1")
        self.create_video("v1", "b1")

    def test_like_then_dislike_moves_the_reaction(self):
        liked = self.client.put("/api/v1/video/like/v1", headers=self.auth("a1"))
        self.assertEqual(liked.status_code, 200, liked.text)
        self.assertEqual(liked.json()["msg"], "Video Liked")
        video = self.fetch_video("v1")
        self.assertEqual((video["likes"], video["dislikes"]), (1, 0))
        self.assertEqual(video["liked_by"], ["a1"])

        disliked = self.client.put("/api/v1/video/dislike/v1", headers=self.auth("a1"))
        self.assertEqual(disliked.status_code, 200, disliked.text)
        self.assertEqual(disliked.json()["msg"], "Video disliked")
        video = self.fetch_video("v1")
        self.assertEqual((video["likes"], video["dislikes"]), (0, 1))
        self.assertEqual(video["liked_by"], [])
        self.assertEqual(video["disliked_by"], ["a1"])

    def test_repeated_reaction_is_rejected(self):
        self.client.put("/api/v1/video/like/v1", headers=self.auth("a1"))
        again = self.client.put("/api/v1/video/like/v1", headers=self.auth("a1"))
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.json(), {"error": "You have already liked this video."})

        self.client.put("/api/v1/video/dislike/v1", headers=self.auth("a1"))
        again = self.client.put("/api/v1/video/dislike/v1", headers=self.auth("a1"))
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.json(), {"error": "You have already disliked this video."})

        video = self.fetch_video("v1")
        self.assertEqual((video["likes"], video["dislikes"]), (0, 1))

    def test_reactions_from_two_channels(self):
        self.client.put("/api/v1/video/like/v1", headers=self.auth("a1"))
        self.client.put("/api/v1/video/dislike/v1", headers=self.auth("b1"))
        video = self.fetch_video("v1")
        self.assertEqual((video["likes"], video["dislikes"]), (1, 1))

    def test_unknown_video(self):
        for action in ("like", "dislike", "views"):
            response = self.client.put(f"/api/v1/video/{action}/missing", headers=self.auth("a1"))
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json(), {"error": "Video not found"})

    def test_reactions_need_a_token(self):
        self.assertEqual(self.client.put("/api/v1/video/like/v1").status_code, 401)
        self.assertEqual(self.client.put("/api/v1/video/dislike/v1").status_code, 401)

    def test_every_view_counts(self):
        first = self.client.put("/api/v1/video/views/v1")
        second = self.client.put("/api/v1/video/views/v1")
        self.assertEqual(first.json(), {"msg": "Video Viewed", "video_id": "v1", "views": 1})
        self.assertEqual(second.json()["views"], 2)
        self.assertEqual(self.fetch_video("v1")["views"], 2)


class ConcurrentReactionTests(ApiTestCase):
    def test_parallel_likes_are_all_counted(self):
        self.create_channel("owner")
        self.create_video("v1", "owner")
        fans = [f"fan{i}" for i in range(6)]
        for user_id in fans:
            self.create_channel(user_id)

        errors = []

        def like(user_id):
            try:
                asyncio.run(ReactionService.like(user_id, "v1"))
            except Exception as exc:  # collected and asserted below
                errors.append(exc)

        threads = [threading.Thread(target=like, args=(u,)) for u in fans]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        video = self.fetch_video("v1")
        self.assertEqual(video["likes"], len(fans))
        self.assertEqual(sorted(video["liked_by"]), sorted(fans))


if __name__ == "__main__":
    unittest.main()
