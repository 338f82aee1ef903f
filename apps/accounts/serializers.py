from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""
    
    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'created_at',
        ]
        read_only_fields = ['id', 'email', 'created_at']


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""
    
    display_name = serializers.SerializerMethodField()
    
    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields
    
    def get_display_name(self, obj):
        return obj.get_display_name()


class ProfileUpdateSerializer(serializers.Serializer):
    """Serializer for profile updates."""
    
    display_name = serializers.CharField(max_length=100, allow_blank=True)
