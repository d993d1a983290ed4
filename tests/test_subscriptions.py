import asyncio
import threading
import unittest

from api_testcase import ApiTestCase

from video_hub_api.app.services.subscription_service import SubscriptionService


class SubscriptionTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.create_channel("a1", channel_name="Ana")
        self.create_channel("b1", channel_name="Ben")

    def test_subscribe_links_both_sides(self):
        response = self.client.put("/api/v1/user/subscribe/b1", headers=self.auth("a1"))
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["msg"], "Channel Subscribed")
        self.assertEqual(body["subscribers"], 1)

        channel = self.fetch_user("b1")
        subscriber = self.fetch_user("a1")
        self.assertEqual(channel["subscribers"], 1)
        self.assertEqual(channel["subscribed_by"], ["a1"])
        self.assertEqual(subscriber["subscribed_channels"], ["b1"])
        self.assertEqual(subscriber["subscribers"], 0)
        self.assertNotIn("password", channel)

    def test_duplicate_subscribe_is_rejected(self):
        self.client.put("/api/v1/user/subscribe/b1", headers=self.auth("a1"))
        response = self.client.put("/api/v1/user/subscribe/b1", headers=self.auth("a1"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "You are already subscribed to this channel"})
        self.assertEqual(self.fetch_user("b1")["subscribers"], 1)

    def test_unsubscribe_restores_state(self):
        self.client.put("/api/v1/user/subscribe/b1", headers=self.auth("a1"))
        response = self.client.put("/api/v1/user/unsubscribe/b1", headers=self.auth("a1"))
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["msg"], "Channel Unsubscribed")

        channel = self.fetch_user("b1")
        self.assertEqual(channel["subscribers"], 0)
        self.assertEqual(channel["subscribed_by"], [])
        self.assertEqual(self.fetch_user("a1")["subscribed_channels"], [])

    def test_unsubscribe_without_subscription_is_rejected(self):
        response = self.client.put("/api/v1/user/unsubscribe/b1", headers=self.auth("a1"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "You are not subscribed to this channel"})
        self.assertEqual(self.fetch_user("b1")["subscribers"], 0)

    def test_unknown_channel(self):
        for action in ("subscribe", "unsubscribe"):
            response = self.client.put(f"/api/v1/user/{action}/nope", headers=self.auth("a1"))
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json(), {"error": "Channel not found"})

    def test_self_subscription_is_rejected(self):
        response = self.client.put("/api/v1/user/subscribe/a1", headers=self.auth("a1"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.fetch_user("a1")["subscribers"], 0)

    def test_subscribed_channels_and_videos(self):
        self.create_channel("c1", channel_name="Cleo")
        self.create_video("vb", "b1", title="From Ben")
        self.create_video("vc", "c1", title="From Cleo")
        self.client.put("/api/v1/user/subscribe/b1", headers=self.auth("a1"))

        channels = self.client.get("/api/v1/video/subscribed/channel", headers=self.auth("a1"))
        self.assertEqual(channels.status_code, 200)
        self.assertEqual([c["id"] for c in channels.json()], ["b1"])

        videos = self.client.get("/api/v1/video/subscribed/video", headers=self.auth("a1"))
        self.assertEqual(videos.status_code, 200)
        self.assertEqual([v["id"] for v in videos.json()], ["vb"])

    def test_subscribed_listings_need_a_token(self):
        self.assertEqual(self.client.get("/api/v1/video/subscribed/video").status_code, 401)
        self.assertEqual(self.client.get("/api/v1/video/subscribed/channel").status_code, 401)


class ConcurrentSubscriptionTests(ApiTestCase):
    def test_counter_matches_followers_under_concurrency(self):
        self.create_channel("target")
        followers = [f"f{i}" for i in range(8)]
        for user_id in followers:
            self.create_channel(user_id)

        errors = []

        def follow(user_id):
            try:
                asyncio.run(SubscriptionService.subscribe(user_id, "target"))
            except Exception as exc:  # collected and asserted below
                errors.append(exc)

        threads = [threading.Thread(target=follow, args=(u,)) for u in followers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        channel = self.fetch_user("target")
        self.assertEqual(channel["subscribers"], len(followers))
        self.assertEqual(sorted(channel["subscribed_by"]), sorted(followers))

    def test_racing_duplicates_count_once(self):
        self.create_channel("target")
        self.create_channel("fan")
        outcomes = []

        def follow():
            try:
                asyncio.run(SubscriptionService.subscribe("fan", "target"))
                outcomes.append("ok")
            except ValueError:
                outcomes.append("rejected")

        threads = [threading.Thread(target=follow) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(outcomes.count("ok"), 1)
        self.assertEqual(outcomes.count("rejected"), 4)
        self.assertEqual(self.fetch_user("target")["subscribers"], 1)


if __name__ == "__main__":
    unittest.main()
