from rest_framework import serializers
from .models import Pair, Invitation, PauseRequest, PauseAction
from apps.accounts.serializers import UserMinimalSerializer


class BuddySerializer(serializers.ModelSerializer):
    """
    A pair as seen by one of its members.

    Requires ``user`` in the serializer context.
    """

    pair_id = serializers.UUIDField(source='id', read_only=True)
    buddy = serializers.SerializerMethodField()

    class Meta:
        model = Pair
        fields = [
            'pair_id',
            'buddy',
            'pot_balance',
            'is_paused',
            'created_at',
        ]
        read_only_fields = fields

    def get_buddy(self, obj):
        user = self.context['user']
        return UserMinimalSerializer(obj.get_buddy(user)).data


class PairSerializer(serializers.ModelSerializer):
    """Full pair details."""

    user_a = UserMinimalSerializer(read_only=True)
    user_b = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Pair
        fields = [
            'id',
            'user_a',
            'user_b',
            'pot_balance',
            'is_paused',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AddBuddySerializer(serializers.Serializer):
    """Serializer for adding a buddy by email."""

    email = serializers.EmailField(max_length=255)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class InvitationSerializer(serializers.ModelSerializer):

    inviter = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Invitation
        fields = [
            'id',
            'inviter',
            'invitee_email',
            'invitee_name',
            'status',
            'created_at',
            'responded_at',
        ]
        read_only_fields = fields


class PauseRequestSerializer(serializers.ModelSerializer):

    requested_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = PauseRequest
        fields = [
            'id',
            'pair',
            'requested_by',
            'action',
            'status',
            'created_at',
            'responded_at',
        ]
        read_only_fields = fields


class PauseRequestCreateSerializer(serializers.Serializer):
    """Serializer for asking a buddy to pause or resume settlement."""

    action = serializers.ChoiceField(choices=PauseAction.choices)


class PauseRequestRespondSerializer(serializers.Serializer):

    accept = serializers.BooleanField()


class StatsSerializer(serializers.Serializer):
    """Totals across all of a user's pairs."""

    buddy_count = serializers.IntegerField()
    total_pots = serializers.IntegerField()
