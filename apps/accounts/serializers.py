from rest_framework import serializers
from .models import User


class StaffSerializer(serializers.ModelSerializer):
    """Profile of the signed-in staff member."""

    short_name = serializers.CharField(source='get_short_name', read_only=True)
    is_manager = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'short_name',
            'is_manager',
            'joined_at',
            'last_login',
        ]
        read_only_fields = fields


class StaffMinimalSerializer(serializers.ModelSerializer):
    """Who took an order, nested in order responses."""

    short_name = serializers.CharField(source='get_short_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'short_name']
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False, style={'input_type': 'password'})


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, help_text="Refresh token issued at login")
