"""Serializers for comments and moderation payloads."""

from rest_framework import serializers

from authentication.models import User
from .models import Comment
from .services import MODERATION_STATUSES


class CommentAuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "role"]
        read_only_fields = fields


class CommentArticleSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(read_only=True)


class CommentSerializer(serializers.ModelSerializer):
    author = CommentAuthorSerializer(read_only=True)
    article_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "article_id", "content", "status", "is_reported", "author", "created_at", "updated_at"]
        read_only_fields = fields


class ModerationCommentSerializer(CommentSerializer):
    """Dashboard row: adds the parent article's id and title."""

    article = CommentArticleSerializer(read_only=True)

    class Meta(CommentSerializer.Meta):
        fields = CommentSerializer.Meta.fields + ["article"]
        read_only_fields = fields


class CommentWriteSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=1000, trim_whitespace=True)


class ModerateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[str(value) for value in MODERATION_STATUSES])


class ModerationFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the admin comment dashboard."""

    status = serializers.CharField(required=False, allow_blank=True)
    article_id = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)

    def validate_article_id(self, value):
        if value and value != "all" and not value.isdigit():
            raise serializers.ValidationError("Must be an article id or \"all\".")
        return value


__all__ = [
    "CommentSerializer",
    "ModerationCommentSerializer",
    "CommentWriteSerializer",
    "ModerateSerializer",
    "ModerationFilterSerializer",
]
