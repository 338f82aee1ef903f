from rest_framework import serializers
from .models import Workout, Settlement
from apps.accounts.serializers import UserMinimalSerializer


class WorkoutSerializer(serializers.ModelSerializer):

    class Meta:
        model = Workout
        fields = ['id', 'date', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class WorkoutRecordSerializer(serializers.Serializer):
    """
    Input for recording a workout.

    Values are passed through as given; the recorder validates the date
    and status so that no write happens for invalid input.
    """

    date = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField()


class SettlementSerializer(serializers.ModelSerializer):
    """Serializer for weekly settlements."""

    winner = UserMinimalSerializer(read_only=True)
    loser = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Settlement
        fields = [
            'id',
            'pair',
            'week_start',
            'winner',
            'loser',
            'amount',
            'created_at',
        ]
        read_only_fields = fields


class HistoryDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    status = serializers.CharField(allow_null=True)


class HistoryWeekSerializer(serializers.Serializer):
    """One Monday-to-Sunday bucket of workout history."""

    week_start = serializers.DateField()
    week_end = serializers.DateField()
    days = HistoryDaySerializer(many=True)
    worked_count = serializers.IntegerField()


class PotRecalculationSerializer(serializers.Serializer):

    pair_id = serializers.UUIDField(source='pair.id')
    reference_date = serializers.DateField()
    missed_count = serializers.IntegerField()
    previous_balance = serializers.IntegerField()
    balance = serializers.IntegerField()
