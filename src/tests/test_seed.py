"""Tests for the seed_blog management command."""

from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from articles.models import Article
from authentication.models import User
from comments.models import Comment


class SeedBlogCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_blog", stdout=StringIO())
        call_command("seed_blog", stdout=StringIO())

        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(Article.objects.count(), 3)
        self.assertEqual(Comment.objects.count(), 4)
        self.assertEqual(User.objects.get(email="admin@example.com").role, User.Role.ADMIN)

    def test_seed_covers_every_moderation_state(self):
        call_command("seed_blog", stdout=StringIO())

        statuses = set(Comment.objects.values_list("status", flat=True))
        self.assertEqual(statuses, {"Pending", "Approved", "Rejected"})
        self.assertTrue(Comment.objects.filter(is_reported=True, status="Approved").exists())

    def test_reset_removes_seeded_users(self):
        call_command("seed_blog", stdout=StringIO())
        out = StringIO()
        call_command("seed_blog", "--reset", stdout=out)

        self.assertIn("Seeded blog data cleared.", out.getvalue())
        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(Comment.objects.count(), 4)
