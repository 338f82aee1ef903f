from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse

from .serializers import (
    WorkoutSerializer,
    WorkoutRecordSerializer,
    SettlementSerializer,
    HistoryWeekSerializer,
    PotRecalculationSerializer,
)

from apps.ledger.services import (
    record_workout as record_workout_service,
    get_workout_for_day,
    get_workout_history,
    evaluate_weeks as evaluate_weeks_service,
    recalculate_user_pots,
    # Exceptions
    InvalidWorkoutError,
    UserNotFoundError,
)

DEFAULT_HISTORY_WEEKS = 4
MAX_HISTORY_WEEKS = 52


# =============================================================================
# Workouts
# =============================================================================

@extend_schema(
    request=WorkoutRecordSerializer,
    responses={
        200: OpenApiResponse(description='Existing workout overwritten'),
        201: OpenApiResponse(description='Workout recorded'),
    },
    description=(
        "Record today's (or the given day's) outcome. Every pot the user shares "
        "changes by the penalty when the day flips to or from missed."
    ),
    tags=['workouts'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def record_workout(request):
    """Record a workout."""
    serializer = WorkoutRecordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        record = record_workout_service(
            user_id=request.user.pk,
            date=serializer.validated_data.get('date') or None,
            status=serializer.validated_data['status'],
        )
    except InvalidWorkoutError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    data = WorkoutSerializer(record.workout).data
    data['previous_status'] = record.previous_status
    data['pot_delta'] = record.delta
    return Response(data, status=status.HTTP_201_CREATED if record.created else status.HTTP_200_OK)


@extend_schema(
    responses={200: WorkoutSerializer},
    description="Today's workout, or null if nothing is recorded yet.",
    tags=['workouts'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def today_workout(request):
    workout = get_workout_for_day(user_id=request.user.pk)
    if workout is None:
        return Response(None)
    return Response(WorkoutSerializer(workout).data)


@extend_schema(
    parameters=[
        OpenApiParameter(
            'weeks', int,
            description=f'Number of weeks including the current one (default {DEFAULT_HISTORY_WEEKS})',
        ),
    ],
    responses={200: HistoryWeekSerializer(many=True)},
    description='Workouts grouped into Monday-to-Sunday weeks, oldest first.',
    tags=['workouts'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def workout_history(request):
    raw_weeks = request.query_params.get('weeks')
    if raw_weeks in (None, ''):
        week_count = DEFAULT_HISTORY_WEEKS
    else:
        try:
            week_count = int(raw_weeks)
        except ValueError:
            return Response({'error': 'weeks must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
        if not 1 <= week_count <= MAX_HISTORY_WEEKS:
            return Response(
                {'error': f'weeks must be between 1 and {MAX_HISTORY_WEEKS}'},
                status=status.HTTP_400_BAD_REQUEST,
            )

    history = get_workout_history(user_id=request.user.pk, week_count=week_count)
    serializer = HistoryWeekSerializer(history, many=True)
    return Response(serializer.data)


# =============================================================================
# Settlement & recalculation
# =============================================================================

@extend_schema(
    request=None,
    responses={200: OpenApiResponse(description='Settlements created by this call')},
    description=(
        "Close out the user's recently completed weeks. Settles pots where exactly "
        "one buddy missed the weekly quota. Safe to call repeatedly."
    ),
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def evaluate_weeks(request):
    settlements = evaluate_weeks_service(user=request.user)
    return Response({
        'settlements_created': len(settlements),
        'settlements': SettlementSerializer(settlements, many=True).data,
    })


@extend_schema(
    request=None,
    responses={200: OpenApiResponse(description='Recalculated balance of every pot')},
    description="Rebuild all of the user's pots from workout and settlement history.",
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recalculate_pots(request):
    results = recalculate_user_pots(user=request.user)
    return Response({
        'message': 'Pots recalculated based on actual workout history',
        'results': PotRecalculationSerializer(results, many=True).data,
    })
