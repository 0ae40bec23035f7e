"""Seed demo users, articles and comments covering every moderation state."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from articles.models import Article
from comments.models import Comment

SEED_USERS = [
    # email, name, role, password, designation
    ("admin@example.com", "Admin", "Admin", "adminpass", "Editor in chief"),
    ("writer@example.com", "Writer", "User", "writerpass", "Staff writer"),
    ("reader@example.com", "Reader", "User", "readerpass", None),
]

SEED_ARTICLES = [
    # owner email, title, status, tags
    ("admin@example.com", "Welcome to the blog", "Published", ["news"]),
    ("writer@example.com", "Moderation in practice", "Published", ["moderation", "howto"]),
    ("writer@example.com", "Draft ideas", "Archived", ["drafts"]),
]


def create_seed_users():
    """Create the demo accounts if missing and return an email->User map."""
    User = get_user_model()
    users = {}
    for email, name, role, password, designation in SEED_USERS:
        user = User.objects.filter(email=email).first()
        if user is None:
            user = User.objects.create_user(email, password, name=name, role=role, designation=designation)
        users[email] = user
    return users


def create_seed_articles(users):
    """Create the demo articles and return a title->Article map."""
    articles = {}
    for owner_email, title, status, tags in SEED_ARTICLES:
        article, _ = Article.objects.get_or_create(
            title=title,
            owner=users[owner_email],
            defaults={
                "body": f"{title}. Seeded content.",
                "tags": tags,
                "status": status,
                "publish_date": timezone.now(),
            },
        )
        articles[title] = article
    return articles


def create_seed_comments(users, articles):
    """One comment per moderation state, plus a reported one."""
    article = articles["Moderation in practice"]
    reader = users["reader@example.com"]
    admin = users["admin@example.com"]
    rows = [
        (reader, "Waiting for review.", Comment.Status.PENDING, False),
        (reader, "Great write-up!", Comment.Status.APPROVED, False),
        (reader, "Buy cheap watches", Comment.Status.REJECTED, False),
        (admin, "Flagged but still approved.", Comment.Status.APPROVED, True),
    ]
    comments = []
    for author, content, status, reported in rows:
        comment, _ = Comment.objects.get_or_create(
            article=article,
            author=author,
            content=content,
            defaults={"status": status, "is_reported": reported},
        )
        comments.append(comment)
    return comments


class Command(BaseCommand):
    """Management command to seed demo blog content."""

    help = (
        "Seed demo users, articles and comments. "
        "Use --reset to clear previously seeded data first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the demo users (and, by cascade, their content) before seeding.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        if options.get("reset"):
            self._reset_seeded_data()

        self.stdout.write("Seeding blog data...")
        users = create_seed_users()
        articles = create_seed_articles(users)
        comments = create_seed_comments(users, articles)
        self.stdout.write(
            self.style.SUCCESS(
                f"Blog seed completed: {len(users)} users, {len(articles)} articles, {len(comments)} comments."
            )
        )

    def _reset_seeded_data(self) -> None:
        """Remove the demo users; their articles and comments cascade."""
        self.stdout.write("Resetting previously seeded blog data...")
        User = get_user_model()
        User.objects.filter(email__in=[row[0] for row in SEED_USERS]).delete()
        self.stdout.write(self.style.WARNING("Seeded blog data cleared."))
