import os
import unittest

from api_testcase import ApiTestCase

from video_hub_api.app.core.config import settings


def media_path(url):
    return os.path.join(settings.media_root, url[len("/media/"):])


class VideoTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.create_channel("a1", channel_name="Ana")
        self.create_channel("b1", channel_name="Ben")

    def upload(self, user_id="b1", title="Sourdough", category="cooking", tags="bread, baking"):
        response = self.client.post(
            "/api/v1/video/upload",
            data={"title": title, "description": "Step by step", "category": category, "tags": tags},
            files={
                "video": ("clip.mp4", b"\x00\x00video", "video/mp4"),
                "thumbnail": ("thumb.jpg", b"\xff\xd8thumb", "image/jpeg"),
            },
            headers=self.auth(user_id),
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_upload_stores_files(self):
        video = self.upload()
        self.assertEqual(video["user_id"], "b1")
        self.assertEqual(video["tags"], ["bread", "baking"])
        self.assertEqual((video["likes"], video["dislikes"], video["views"]), (0, 0, 0))
        self.assertTrue(video["video_url"].startswith("/media/video/"))
        self.assertTrue(os.path.exists(media_path(video["video_url"])))
        self.assertTrue(os.path.exists(media_path(video["thumbnail_url"])))

    def test_upload_requires_files(self):
        response = self.client.post(
            "/api/v1/video/upload",
            data={"title": "No files"},
            headers=self.auth("b1"),
        )
        self.assertEqual(response.status_code, 400)

    def test_get_includes_owner(self):
        self.create_video("v1", "b1")
        self.client.put("/api/v1/user/subscribe/b1", headers=self.auth("a1"))
        video = self.fetch_video("v1")
        self.assertEqual(video["owner"]["channel_name"], "Ben")
        self.assertEqual(video["owner"]["subscribers"], 1)
        self.assertEqual(self.client.get("/api/v1/video/video/none").status_code, 404)

    def test_listings(self):
        self.create_video("v1", "b1", category="music")
        self.create_video("v2", "b1", category="cooking")
        self.create_video("v3", "a1", category="cooking")

        own = self.client.get("/api/v1/video/own-video", headers=self.auth("b1")).json()
        self.assertEqual([v["id"] for v in own], ["v2", "v1"])

        cooking = self.client.get("/api/v1/video/category/cooking").json()
        self.assertEqual([v["id"] for v in cooking], ["v3", "v2"])

        channel = self.client.get("/api/v1/video/channel/a1").json()
        self.assertEqual([v["id"] for v in channel], ["v3"])

        empty = self.client.get("/api/v1/video/category/sports")
        self.assertEqual(empty.status_code, 200)
        self.assertEqual(empty.json(), [])

    def test_channel_without_videos(self):
        response = self.client.get("/api/v1/video/channel/a1")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "No videos found for this channel"})

    def test_update_by_owner_only(self):
        video = self.upload()
        url = f"/api/v1/video/{video['id']}"

        refused = self.client.post(url, data={"title": "Mine now"}, headers=self.auth("a1"))
        self.assertEqual(refused.status_code, 403)

        updated = self.client.post(
            url,
            data={"title": "Better sourdough", "tags": "bread"},
            files={"thumbnail": ("new.jpg", b"new", "image/jpeg")},
            headers=self.auth("b1"),
        )
        self.assertEqual(updated.status_code, 200, updated.text)
        body = updated.json()
        self.assertEqual(body["title"], "Better sourdough")
        self.assertEqual(body["tags"], ["bread"])
        self.assertEqual(body["description"], "Step by step")
        self.assertNotEqual(body["thumbnail_url"], video["thumbnail_url"])
        self.assertFalse(os.path.exists(media_path(video["thumbnail_url"])))

    def test_delete_removes_dependents(self):
        video = self.upload()
        video_id = video["id"]
        self.client.put(f"/api/v1/video/like/{video_id}", headers=self.auth("a1"))
        self.client.post(
            f"/api/v1/comment/new-comment/{video_id}",
            json={"comment_text": "Nice"},
            headers=self.auth("a1"),
        )
        playlist = self.client.post(
            f"/api/v1/playlist/{video_id}",
            json={"title": "Later"},
            headers=self.auth("a1"),
        ).json()

        refused = self.client.delete(f"/api/v1/video/{video_id}", headers=self.auth("a1"))
        self.assertEqual(refused.status_code, 403)

        deleted = self.client.delete(f"/api/v1/video/{video_id}", headers=self.auth("b1"))
        self.assertEqual(deleted.status_code, 200, deleted.text)
        self.assertEqual(deleted.json()["id"], video_id)

        self.assertEqual(self.client.get(f"/api/v1/video/video/{video_id}").status_code, 404)
        self.assertEqual(self.client.get(f"/api/v1/comment/{video_id}").json(), [])
        self.assertEqual(self.client.get(f"/api/v1/playlist/{playlist['id']}").json()["video_ids"], [])
        self.assertFalse(os.path.exists(media_path(video["video_url"])))

    def test_upload_over_the_limit(self):
        saved = settings.max_upload_size
        settings.max_upload_size = 4
        try:
            response = self.client.post(
                "/api/v1/video/upload",
                data={"title": "Too big"},
                files={
                    "video": ("clip.mp4", b"0123456789", "video/mp4"),
                    "thumbnail": ("t.jpg", b"ab", "image/jpeg"),
                },
                headers=self.auth("b1"),
            )
        finally:
            settings.max_upload_size = saved
        self.assertEqual(response.status_code, 400)
        self.assertFalse(os.listdir(os.path.join(settings.media_root, "video")))


class CommentTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.create_channel("a1", channel_name="Ana")
        self.create_channel("b1", channel_name="Ben")
        self.create_video("v1", "b1")

    def post_comment(self, text="First!", user_id="a1"):
        response = self.client.post(
            "/api/v1/comment/new-comment/v1",
            json={"comment_text": text},
            headers=self.auth(user_id),
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_create_and_list(self):
        self.post_comment("First!")
        self.post_comment("Second", user_id="b1")
        comments = self.client.get("/api/v1/comment/v1").json()
        self.assertEqual([c["comment_text"] for c in comments], ["First!", "Second"])
        self.assertEqual(comments[0]["author"]["channel_name"], "Ana")

    def test_blank_comment_is_rejected(self):
        response = self.client.post(
            "/api/v1/comment/new-comment/v1",
            json={"comment_text": "  "},
            headers=self.auth("a1"),
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Comment text is required"})

    def test_comment_on_unknown_video(self):
        response = self.client.post(
            "/api/v1/comment/new-comment/nope",
            json={"comment_text": "hello"},
            headers=self.auth("a1"),
        )
        self.assertEqual(response.status_code, 404)

    def test_only_author_edits_or_deletes(self):
        comment = self.post_comment()
        url = f"/api/v1/comment/{comment['id']}"

        self.assertEqual(
            self.client.put(url, json={"comment_text": "x"}, headers=self.auth("b1")).status_code, 403
        )
        self.assertEqual(self.client.delete(url, headers=self.auth("b1")).status_code, 403)

        edited = self.client.put(url, json={"comment_text": "Edited"}, headers=self.auth("a1"))
        self.assertEqual(edited.status_code, 200)
        self.assertEqual(edited.json()["comment_text"], "Edited")

        deleted = self.client.delete(url, headers=self.auth("a1"))
        self.assertEqual(deleted.json(), {"msg": "Comment deleted successfully"})
        self.assertEqual(self.client.delete(url, headers=self.auth("a1")).status_code, 404)


if __name__ == "__main__":
    unittest.main()
