from rest_framework import serializers

from .models import User


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(read_only=True)
    phone = serializers.CharField(read_only=True, allow_null=True)
    role = serializers.CharField(read_only=True)
    stripeConnected = serializers.BooleanField(source="stripe_connected", read_only=True)
    dateJoined = serializers.CharField(
        source="date_joined", read_only=True, allow_null=True
    )


class UserRoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.Role.choices)


class UserListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    role = serializers.CharField(required=False)
