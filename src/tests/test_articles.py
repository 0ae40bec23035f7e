"""Article lifecycle and authorization matrix tests."""

from __future__ import annotations

import shutil
import tempfile
from datetime import timedelta
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from articles.models import Article
from articles.storage import LocalBlobStore
from authentication.models import User
from comments.models import Comment
from core.exceptions import FORBIDDEN_MESSAGE
from tests.utils import RedisPatchedTestCase, auth_client, create_user


class ArticleTestBase(RedisPatchedTestCase):
    @classmethod
    def setUpTestData(cls):
        """Owner, stranger and admin plus one article in each status."""
        cls.owner = create_user("owner@test.com", name="Owner")
        cls.stranger = create_user("stranger@test.com", name="Stranger")
        cls.admin = create_user("admin@test.com", role=User.Role.ADMIN, name="Admin")

        cls.published = Article.objects.create(
            owner=cls.owner,
            title="Published piece",
            body="Visible to all.",
            tags=["news"],
            status=Article.Status.PUBLISHED,
            publish_date=timezone.now(),
        )
        cls.archived = Article.objects.create(
            owner=cls.owner,
            title="Archived piece",
            body="Owner and admin only.",
            status=Article.Status.ARCHIVED,
            publish_date=timezone.now() - timedelta(days=3),
        )

    def setUp(self):
        self.anon = APIClient()
        self.owner_client = auth_client(self.owner)
        self.stranger_client = auth_client(self.stranger)
        self.admin_client = auth_client(self.admin)


class ArticleCreateTests(ArticleTestBase):
    def test_anonymous_cannot_create(self):
        response = self.anon.post("/articles", {"title": "T", "body": "B"}, format="json")

        self.assertEqual(response.status_code, 401)

    def test_create_defaults_to_published_with_publish_date(self):
        response = self.owner_client.post(
            "/articles",
            {"title": "Fresh", "body": "Body", "tags": ["a", " b ", ""]},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(body["data"]["status"], "Published")
        self.assertIsNotNone(body["data"]["publish_date"])
        self.assertEqual(body["data"]["tags"], ["a", "b"])
        self.assertEqual(body["data"]["author"]["id"], str(self.owner.id))

    def test_create_ignores_status_in_payload(self):
        response = self.owner_client.post(
            "/articles", {"title": "Fresh", "body": "Body", "status": "Archived"}, format="json"
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["status"], "Published")

    @override_settings(ARTICLE_DEFAULT_STATUS="Archived")
    def test_default_status_is_configurable(self):
        response = self.owner_client.post("/articles", {"title": "Quiet", "body": "Body"}, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["status"], "Archived")

    def test_multipart_comma_separated_tags(self):
        response = self.owner_client.post(
            "/articles", {"title": "Form", "body": "Body", "tags": "django, rest ,,api"}, format="multipart"
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["tags"], ["django", "rest", "api"])

    def test_json_encoded_tag_string(self):
        response = self.owner_client.post(
            "/articles", {"title": "Form", "body": "Body", "tags": '["one", "two"]'}, format="multipart"
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["tags"], ["one", "two"])

    def test_multipart_repeated_tag_keys(self):
        response = self.owner_client.post(
            "/articles", {"title": "Form", "body": "Body", "tags": ["alpha", " beta "]}, format="multipart"
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["tags"], ["alpha", "beta"])

    def test_missing_title_is_422(self):
        response = self.owner_client.post("/articles", {"body": "Body"}, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 422)
        self.assertIsNone(body["data"])
        self.assertIn("title", body["errors"])


class ArticleImageTests(ArticleTestBase):
    def setUp(self):
        super().setUp()
        self.media_root = tempfile.mkdtemp()
        self.store = LocalBlobStore(location=self.media_root, base_url="/media/")
        self.patchers = [
            mock.patch("articles.services.get_blob_store", return_value=self.store),
            mock.patch("articles.serializers.get_blob_store", return_value=self.store),
        ]
        for patcher in self.patchers:
            patcher.start()

    def tearDown(self):
        for patcher in self.patchers:
            patcher.stop()
        shutil.rmtree(self.media_root, ignore_errors=True)
        super().tearDown()

    def test_upload_stores_key_and_exposes_url(self):
        image = SimpleUploadedFile("cover.png", b"\x89PNG fake image", content_type="image/png")
        response = self.owner_client.post(
            "/articles", {"title": "Pic", "body": "Body", "image": image}, format="multipart"
        )
        data = response.json()["data"]

        self.assertEqual(response.status_code, 201)
        self.assertTrue(data["image"].startswith("images/articles/"))
        self.assertTrue(data["image"].endswith(".png"))
        self.assertEqual(data["image_url"], f"/media/{data['image']}")
        self.assertTrue(self.store.exists(data["image"]))

    def test_replacing_image_removes_old_blob(self):
        first = SimpleUploadedFile("one.jpg", b"first", content_type="image/jpeg")
        created = self.owner_client.post(
            "/articles", {"title": "Pic", "body": "Body", "image": first}, format="multipart"
        ).json()["data"]

        second = SimpleUploadedFile("two.webp", b"second", content_type="image/webp")
        response = self.owner_client.put(
            f"/articles/{created['id']}",
            {"title": "Pic", "body": "Body", "image": second},
            format="multipart",
        )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(self.store.exists(created["image"]))
        self.assertTrue(self.store.exists(response.json()["data"]["image"]))

    def test_failed_upload_keeps_edit_and_old_image(self):
        first = SimpleUploadedFile("old.jpg", b"first", content_type="image/jpeg")
        created = self.owner_client.post(
            "/articles", {"title": "Pic", "body": "Body", "image": first}, format="multipart"
        ).json()["data"]

        second = SimpleUploadedFile("new.png", b"second", content_type="image/png")
        with mock.patch.object(self.store, "put", side_effect=RuntimeError("storage down")):
            with self.assertLogs("articles.services", level="ERROR"):
                response = self.owner_client.put(
                    f"/articles/{created['id']}",
                    {"title": "Edited title", "body": "Body", "image": second},
                    format="multipart",
                )

        self.assertEqual(response.status_code, 200)
        article = Article.objects.get(pk=created["id"])
        self.assertEqual(article.title, "Edited title")
        self.assertEqual(article.image, created["image"])
        self.assertTrue(self.store.exists(created["image"]))

    def test_rejects_unsupported_extension(self):
        doc = SimpleUploadedFile("notes.txt", b"text", content_type="text/plain")
        response = self.owner_client.post(
            "/articles", {"title": "Pic", "body": "Body", "image": doc}, format="multipart"
        )

        self.assertEqual(response.status_code, 422)
        self.assertIn("image", response.json()["errors"])

    def test_rejects_image_over_two_megabytes(self):
        big = SimpleUploadedFile("big.png", b"x" * (2 * 1024 * 1024 + 1), content_type="image/png")
        response = self.owner_client.post(
            "/articles", {"title": "Pic", "body": "Body", "image": big}, format="multipart"
        )

        self.assertEqual(response.status_code, 422)
        self.assertFalse(Article.objects.filter(title="Pic").exists())


class ArticleVisibilityTests(ArticleTestBase):
    def test_public_list_shows_published_only(self):
        response = self.anon.get("/articles")
        data = response.json()["data"]

        self.assertEqual(response.status_code, 200)
        ids = [item["id"] for item in data["results"]]
        self.assertEqual(ids, [self.published.id])

    def test_public_list_is_newest_first(self):
        newer = Article.objects.create(
            owner=self.stranger,
            title="Newer",
            body="B",
            status=Article.Status.PUBLISHED,
            publish_date=timezone.now() + timedelta(minutes=5),
        )
        data = self.anon.get("/articles").json()["data"]

        self.assertEqual([item["id"] for item in data["results"]], [newer.id, self.published.id])

    def test_anyone_can_read_published(self):
        response = self.anon.get(f"/articles/{self.published.id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["title"], "Published piece")

    def test_anonymous_cannot_read_archived(self):
        with self.assertLogs("core.exceptions", level="INFO") as logs:
            response = self.anon.get(f"/articles/{self.archived.id}")
        body = response.json()

        self.assertEqual(response.status_code, 403)
        self.assertIsNone(body["data"])
        self.assertEqual(body["errors"], [FORBIDDEN_MESSAGE])
        self.assertEqual(logs.records[0].reason, "not_published")

    def test_stranger_gets_same_forbidden_body(self):
        anon_body = self.anon.get(f"/articles/{self.archived.id}").json()
        stranger_response = self.stranger_client.get(f"/articles/{self.archived.id}")

        self.assertEqual(stranger_response.status_code, 403)
        self.assertEqual(stranger_response.json(), anon_body)

    def test_owner_and_admin_can_read_archived(self):
        self.assertEqual(self.owner_client.get(f"/articles/{self.archived.id}").status_code, 200)
        self.assertEqual(self.admin_client.get(f"/articles/{self.archived.id}").status_code, 200)

    def test_missing_article_is_404(self):
        response = self.anon.get("/articles/999999")

        self.assertEqual(response.status_code, 404)
        self.assertIsNone(response.json()["data"])

    def test_admin_listing_includes_both_statuses(self):
        response = self.admin_client.get("/admin/articles")
        ids = {item["id"] for item in response.json()["data"]}

        self.assertEqual(response.status_code, 200)
        self.assertEqual(ids, {self.published.id, self.archived.id})

    def test_admin_listing_rejects_regular_user(self):
        self.assertEqual(self.owner_client.get("/admin/articles").status_code, 403)
        self.assertEqual(self.anon.get("/admin/articles").status_code, 401)

    def test_my_articles_lists_own_in_both_statuses(self):
        Article.objects.create(
            owner=self.stranger, title="Other", body="B", publish_date=timezone.now()
        )
        response = self.owner_client.get("/user/articles")
        ids = {item["id"] for item in response.json()["data"]}

        self.assertEqual(ids, {self.published.id, self.archived.id})


class ArticleEditTests(ArticleTestBase):
    def test_owner_can_edit_content(self):
        response = self.owner_client.put(
            f"/articles/{self.published.id}",
            {"title": "Renamed", "body": "New body", "tags": "x,y"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.published.refresh_from_db()
        self.assertEqual(self.published.title, "Renamed")
        self.assertEqual(self.published.tags, ["x", "y"])

    def test_owner_edit_cannot_change_status(self):
        response = self.owner_client.put(
            f"/articles/{self.archived.id}",
            {"title": "Still archived", "body": "B", "status": "Published"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.archived.refresh_from_db()
        self.assertEqual(self.archived.status, Article.Status.ARCHIVED)

    def test_stranger_cannot_edit(self):
        response = self.stranger_client.put(
            f"/articles/{self.published.id}", {"title": "Hijack", "body": "B"}, format="json"
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["errors"], [FORBIDDEN_MESSAGE])

    def test_admin_cannot_edit_content_of_others(self):
        with self.assertLogs("core.exceptions", level="INFO") as logs:
            response = self.admin_client.put(
                f"/articles/{self.published.id}", {"title": "Admin edit", "body": "B"}, format="json"
            )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(logs.records[0].reason, "not_owner")


class ArticleStatusTransitionTests(ArticleTestBase):
    def test_non_admin_cannot_archive(self):
        """User A's article, user B calls archive: 403; admin then archives it."""
        response = self.stranger_client.put(f"/articles/{self.published.id}/archive")
        self.assertEqual(response.status_code, 403)

        response = self.admin_client.put(f"/articles/{self.published.id}/archive")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "Archived")
        self.published.refresh_from_db()
        self.assertEqual(self.published.status, Article.Status.ARCHIVED)

    def test_owner_cannot_archive_own_article(self):
        with self.assertLogs("core.exceptions", level="INFO") as logs:
            response = self.owner_client.put(f"/articles/{self.published.id}/archive")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(logs.records[0].reason, "not_admin")

    def test_archive_twice_is_noop(self):
        before = self.archived.updated_at
        response = self.admin_client.put(f"/articles/{self.archived.id}/archive")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Article is already archived.")
        self.archived.refresh_from_db()
        self.assertEqual(self.archived.updated_at, before)

    def test_publish_refreshes_publish_date(self):
        previous = self.archived.publish_date
        response = self.admin_client.put(f"/articles/{self.archived.id}/publish")

        self.assertEqual(response.status_code, 200)
        self.archived.refresh_from_db()
        self.assertEqual(self.archived.status, Article.Status.PUBLISHED)
        self.assertIsNotNone(self.archived.publish_date)
        self.assertGreaterEqual(self.archived.publish_date, previous)

    def test_publish_already_published_is_noop(self):
        response = self.admin_client.put(f"/articles/{self.published.id}/publish")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Article is already published.")

    def test_anonymous_publish_is_401(self):
        self.assertEqual(self.anon.put(f"/articles/{self.archived.id}/publish").status_code, 401)


class ArticleDeleteTests(ArticleTestBase):
    def test_stranger_cannot_delete(self):
        response = self.stranger_client.delete(f"/articles/{self.published.id}")

        self.assertEqual(response.status_code, 403)
        self.assertTrue(Article.objects.filter(pk=self.published.id).exists())

    def test_owner_delete_cascades_comments(self):
        Comment.objects.create(article=self.published, author=self.stranger, content="Nice")
        response = self.owner_client.delete(f"/articles/{self.published.id}")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Article.objects.filter(pk=self.published.id).exists())
        self.assertFalse(Comment.objects.filter(article_id=self.published.id).exists())

    def test_admin_can_delete_any_article(self):
        response = self.admin_client.delete(f"/articles/{self.archived.id}")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Article.objects.filter(pk=self.archived.id).exists())

    def test_blob_failure_does_not_block_delete(self):
        """Blob deletion of "x.jpg" is attempted; its failure is swallowed."""
        self.published.image = "x.jpg"
        self.published.save(update_fields=["image"])
        store = mock.Mock()
        store.exists.return_value = True
        store.delete.side_effect = RuntimeError("storage down")

        with mock.patch("articles.services.get_blob_store", return_value=store):
            with self.assertLogs("articles.services", level="ERROR"):
                response = self.owner_client.delete(f"/articles/{self.published.id}")

        self.assertEqual(response.status_code, 200)
        store.delete.assert_called_once_with("x.jpg")
        self.assertFalse(Article.objects.filter(pk=self.published.id).exists())


class DashboardStatsTests(ArticleTestBase):
    def test_stats_require_admin(self):
        self.assertEqual(self.anon.get("/articles/stats").status_code, 401)
        self.assertEqual(self.owner_client.get("/articles/stats").status_code, 403)

    def test_stats_counts(self):
        Comment.objects.create(article=self.published, author=self.stranger, content="Pending one")
        Comment.objects.create(
            article=self.published,
            author=self.stranger,
            content="Reported one",
            status=Comment.Status.APPROVED,
            is_reported=True,
        )
        response = self.admin_client.get("/articles/stats")
        data = response.json()["data"]

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["userStats"], {"total": 3, "active": 3})
        self.assertEqual(data["articleStats"], {"total": 2, "published": 1, "archived": 1})
        self.assertEqual(data["commentStats"], {"total": 2, "pending": 1, "reported": 1})
