"""Serializers for articles, including tag normalization and image upload."""

import json

from django.conf import settings
from django.core.validators import FileExtensionValidator
from rest_framework import serializers
from rest_framework.fields import empty
from rest_framework.utils import html

from authentication.serializers import AuthorSerializer
from .models import Article
from .storage import get_blob_store

IMAGE_EXTENSIONS = ["jpeg", "jpg", "png", "gif", "webp"]


class TagListField(serializers.Field):
    """Tags as an ordered list of strings.

    Accepts a JSON list, a JSON-encoded list string, or a comma-separated
    string (multipart forms) and always yields ``list[str]``.
    """

    default_error_messages = {
        "invalid": "Tags must be a list of strings or a comma-separated string.",
    }

    def get_value(self, dictionary):
        """Repeated form keys (``tags=a&tags=b``) arrive as a list."""
        if html.is_html_input(dictionary):
            if self.field_name not in dictionary:
                return empty
            values = dictionary.getlist(self.field_name)
            if len(values) > 1:
                return values
        return super().get_value(dictionary)

    def to_internal_value(self, data):
        if data is None or data == "":
            return []
        if isinstance(data, str):
            text = data.strip()
            if text.startswith("["):
                try:
                    data = json.loads(text)
                except ValueError:
                    self.fail("invalid")
            else:
                data = text.split(",")
        if not isinstance(data, (list, tuple)):
            self.fail("invalid")
        tags = []
        for item in data:
            if not isinstance(item, str):
                self.fail("invalid")
            item = item.strip()
            if item:
                tags.append(item)
        return tags

    def to_representation(self, value):
        return list(value or [])


def validate_image_size(image):
    if image.size > settings.ARTICLE_IMAGE_MAX_BYTES:
        raise serializers.ValidationError("Image may not be larger than 2 MB.")


class ArticleSerializer(serializers.ModelSerializer):
    """Read payload with the author block and a resolved image URL."""

    author = AuthorSerializer(source="owner", read_only=True)
    tags = TagListField(read_only=True)
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = Article
        fields = [
            "id",
            "title",
            "body",
            "image",
            "image_url",
            "tags",
            "status",
            "publish_date",
            "author",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    @staticmethod
    def get_image_url(obj):
        if not obj.image:
            return None
        return get_blob_store().url(obj.image)


class ArticleWriteSerializer(serializers.Serializer):
    """Owner-editable content. Status is not writable here."""

    title = serializers.CharField(max_length=255)
    body = serializers.CharField()
    tags = TagListField(required=False)
    image = serializers.FileField(
        required=False,
        allow_null=True,
        write_only=True,
        validators=[FileExtensionValidator(IMAGE_EXTENSIONS), validate_image_size],
    )


__all__ = ["ArticleSerializer", "ArticleWriteSerializer", "TagListField"]
