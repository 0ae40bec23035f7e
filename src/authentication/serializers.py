"""Serializers for authentication flows and user administration."""

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from .managers import UserManager

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Validate and create an account with the default ``User`` role."""

    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirmation = serializers.CharField(write_only=True)

    @staticmethod
    def validate_email(value):
        """Ensure email is unique before creation."""
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use")
        return value

    def validate(self, attrs):
        """Ensure provided passwords match before creation."""
        if attrs.get("password") != attrs.get("password_confirmation"):
            raise serializers.ValidationError({"password": ["Passwords do not match"]})
        return attrs

    def create(self, validated_data):
        validated_data.pop("password_confirmation")
        return User.objects.create_user(role=User.Role.USER, **validated_data)


class LoginSerializer(serializers.Serializer):
    """Authenticate a user via email/password using bcrypt verification."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        """Authenticate credentials and attach the user to validated_data."""
        email = attrs.get("email")
        password = attrs.get("password")
        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise AuthenticationFailed("Invalid credentials")

        if not UserManager.verify_password(user, password):
            raise AuthenticationFailed("Invalid credentials")

        if not user.is_active:
            raise AuthenticationFailed("User is inactive")

        attrs["user"] = user
        return attrs


class UserDetailSerializer(serializers.ModelSerializer):
    """Read-only user payload for responses."""

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "status",
            "designation",
            "image",
            "last_login",
            "date_joined",
        ]
        read_only_fields = fields


class AuthorSerializer(serializers.ModelSerializer):
    """Compact author block embedded in articles and comments."""

    class Meta:
        model = User
        fields = ["id", "name", "role", "designation", "image"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields a user may change on their own profile."""

    class Meta:
        model = User
        fields = ["name", "designation", "image"]
        extra_kwargs = {
            "name": {"required": False},
            "designation": {"required": False, "allow_blank": True},
            "image": {"required": False, "allow_blank": True},
        }

    def validate(self, attrs):
        """Reject attempts to change the email through the profile endpoint."""
        if "email" in getattr(self, "initial_data", {}):
            raise serializers.ValidationError({"email": ["Email cannot be updated via this endpoint"]})
        return super().validate(attrs)


class UserAdminSerializer(serializers.ModelSerializer):
    """Admin CRUD payload.

    The password is required on create and optional on update: an omitted or
    blank value leaves the stored hash untouched.
    """

    password = serializers.CharField(
        write_only=True, required=False, allow_blank=True, min_length=8, max_length=128
    )

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "password",
            "role",
            "status",
            "designation",
            "image",
            "last_login",
            "date_joined",
        ]
        read_only_fields = ["id", "last_login", "date_joined"]
        extra_kwargs = {
            # Uniqueness is checked in validate_email so self can be excluded.
            "email": {"validators": []},
            "designation": {"required": False, "allow_blank": True},
            "image": {"required": False, "allow_blank": True},
        }

    def validate_email(self, value):
        """Email must be unique, ignoring the user being edited."""
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Email already in use")
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": ["This field is required."]})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        email = validated_data.pop("email")
        return User.objects.create_user(email, password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", "")
        if password:
            instance.set_password(password)
        return super().update(instance, validated_data)


__all__ = [
    "RegisterSerializer",
    "LoginSerializer",
    "UserDetailSerializer",
    "AuthorSerializer",
    "ProfileUpdateSerializer",
    "UserAdminSerializer",
]
