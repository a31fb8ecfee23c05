from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from algorithms.blood_compatibility import BLOOD_TYPES
from donors.models import DonorProfile

User = get_user_model()


def get_tokens_for_user(user):
    """
    Generate a JWT pair with the role embedded in the payload
    """
    refresh = RefreshToken.for_user(user)
    refresh['user_type'] = user.user_type
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['user_type'] = user.user_type
        token['username'] = user.username
        return token


class RegisterSerializer(serializers.Serializer):
    """
    Onboards a donor (user + donor profile) or a requester in one call
    """
    user_type = serializers.ChoiceField(choices=[User.DONOR, User.REQUESTER])
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True)

    # donor-only fields
    blood_type = serializers.ChoiceField(choices=BLOOD_TYPES, required=False)
    address = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    latitude = serializers.FloatField(required=False, allow_null=True)
    longitude = serializers.FloatField(required=False, allow_null=True)

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("Username already exists")
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already registered")
        return value

    def validate(self, attrs):
        validate_password(attrs['password'])
        if attrs['user_type'] == User.DONOR and not attrs.get('blood_type'):
            raise serializers.ValidationError({'blood_type': "blood_type is required for donor registration"})
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data['username'],
            email=validated_data['email'],
            password=validated_data['password'],
            first_name=validated_data.get('first_name', ''),
            last_name=validated_data.get('last_name', ''),
            phone_number=validated_data.get('phone_number', ''),
            user_type=validated_data['user_type'],
        )
        if user.user_type == User.DONOR:
            DonorProfile.objects.create(
                user=user,
                full_name=user.display_name,
                phone=user.phone_number,
                blood_type=validated_data['blood_type'],
                address=validated_data.get('address', ''),
                city=validated_data.get('city', ''),
                state=validated_data.get('state', ''),
                latitude=validated_data.get('latitude'),
                longitude=validated_data.get('longitude'),
            )
        return user
