from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse

from .serializers import (
    BuddySerializer,
    PairSerializer,
    AddBuddySerializer,
    InvitationSerializer,
    PauseRequestSerializer,
    PauseRequestCreateSerializer,
    PauseRequestRespondSerializer,
    StatsSerializer,
)

from apps.buddies.services import (
    add_buddy as add_buddy_service,
    get_user_pairs,
    get_pair_for_user,
    delete_pair,
    get_user_stats,
    get_pending_invitations,
    get_received_invitations,
    accept_invitation as accept_invitation_service,
    decline_invitation as decline_invitation_service,
    delete_invitation as delete_invitation_service,
    request_pause_change,
    get_received_pause_requests,
    respond_to_pause_request,
    # Exceptions
    PairNotFoundError,
    NotPairMemberError,
    CannotPairWithSelfError,
    AlreadyBuddiesError,
    InvitationNotFoundError,
    NotInviteeError,
    AlreadyRespondedError,
    DuplicateInvitationError,
    InsufficientPermissionsError,
    PauseRequestNotFoundError,
    DuplicatePauseRequestError,
    InvalidPauseRequestError,
    CannotRespondToOwnRequestError,
)
from apps.ledger.serializers import SettlementSerializer
from apps.ledger.services.store import get_pair_settlements


# =============================================================================
# Buddies
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: BuddySerializer(many=True)},
    description="List the user's buddies with the pot shared with each.",
    tags=['buddies'],
)
@extend_schema(
    methods=['POST'],
    request=AddBuddySerializer,
    responses={201: OpenApiResponse(description='Pair created or invitation sent')},
    description=(
        "Add a buddy by email. Pairs immediately if the email belongs to a user, "
        "otherwise sends an invitation."
    ),
    tags=['buddies'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def buddies(request):
    """List buddies or add a new one."""
    if request.method == 'GET':
        pairs = get_user_pairs(user=request.user)
        serializer = BuddySerializer(pairs, many=True, context={'user': request.user})
        return Response(serializer.data)

    serializer = AddBuddySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = add_buddy_service(
            user=request.user,
            email=serializer.validated_data['email'],
            name=serializer.validated_data.get('name', ''),
        )
    except CannotPairWithSelfError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (AlreadyBuddiesError, DuplicateInvitationError) as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    if result.pair is not None:
        data = BuddySerializer(result.pair, context={'user': request.user}).data
        return Response({'type': 'pair', **data}, status=status.HTTP_201_CREATED)

    invitation = result.invitation
    return Response({
        'type': 'invitation',
        'message': (
            f"Invitation sent to {invitation.invitee_email}! "
            "They can sign up and accept to become your buddy."
        ),
        'invitation': InvitationSerializer(invitation).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={204: None},
    description='Remove a buddy. Settlements of the pair are deleted with it; workouts are kept.',
    tags=['buddies'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def remove_buddy(request, pair_id):
    try:
        delete_pair(pair_id=pair_id, user=request.user)
    except PairNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotPairMemberError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    responses={200: OpenApiResponse(description='Pair with its settlement history')},
    description='Get a pair and its settlements, newest week first.',
    tags=['buddies'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pair_detail(request, pair_id):
    try:
        pair = get_pair_for_user(pair_id=pair_id, user=request.user)
    except PairNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotPairMemberError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    settlements = get_pair_settlements(pair_id=pair.id)
    return Response({
        'pair': PairSerializer(pair).data,
        'settlements': SettlementSerializer(settlements, many=True).data,
    })


@extend_schema(
    responses={200: StatsSerializer},
    description="Number of buddies and the sum of all the user's pots.",
    tags=['buddies'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stats(request):
    serializer = StatsSerializer(get_user_stats(user=request.user))
    return Response(serializer.data)


# =============================================================================
# Invitations
# =============================================================================

@extend_schema(
    responses={200: InvitationSerializer(many=True)},
    description='Invitations the user sent that are still pending.',
    tags=['invitations'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pending_invitations(request):
    invitations = get_pending_invitations(inviter=request.user)
    serializer = InvitationSerializer(invitations, many=True)
    return Response(serializer.data)


@extend_schema(
    responses={200: InvitationSerializer(many=True)},
    description="Pending invitations addressed to the user's email.",
    tags=['invitations'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def received_invitations(request):
    invitations = get_received_invitations(user=request.user)
    serializer = InvitationSerializer(invitations, many=True)
    return Response(serializer.data)


@extend_schema(
    request=None,
    responses={201: BuddySerializer},
    description='Accept an invitation, creating the pair.',
    tags=['invitations'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def accept_invitation(request, invitation_id):
    """Accept an invitation."""
    try:
        invitation, pair = accept_invitation_service(invitation_id=invitation_id, user=request.user)
    except InvitationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotInviteeError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except (AlreadyRespondedError, AlreadyBuddiesError) as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    except CannotPairWithSelfError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    serializer = BuddySerializer(pair, context={'user': request.user})
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={200: InvitationSerializer},
    description='Decline an invitation.',
    tags=['invitations'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def decline_invitation(request, invitation_id):
    """Decline an invitation."""
    try:
        invitation = decline_invitation_service(invitation_id=invitation_id, user=request.user)
    except InvitationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotInviteeError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except AlreadyRespondedError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(InvitationSerializer(invitation).data)


@extend_schema(
    responses={204: None},
    description='Withdraw an invitation you sent.',
    tags=['invitations'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_invitation(request, invitation_id):
    try:
        delete_invitation_service(invitation_id=invitation_id, user=request.user)
    except InvitationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Pause requests
# =============================================================================

@extend_schema(
    request=PauseRequestCreateSerializer,
    responses={201: PauseRequestSerializer},
    description='Ask your buddy to pause or resume weekly settlement of the pair.',
    tags=['pause-requests'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_pause_request(request, pair_id):
    serializer = PauseRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        pause_request = request_pause_change(
            pair_id=pair_id,
            user=request.user,
            action=serializer.validated_data['action'],
        )
    except PairNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotPairMemberError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except InvalidPauseRequestError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except DuplicatePauseRequestError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(PauseRequestSerializer(pause_request).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: PauseRequestSerializer(many=True)},
    description='Pending pause requests made by your buddies.',
    tags=['pause-requests'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def received_pause_requests(request):
    pause_requests = get_received_pause_requests(user=request.user)
    serializer = PauseRequestSerializer(pause_requests, many=True)
    return Response(serializer.data)


@extend_schema(
    request=PauseRequestRespondSerializer,
    responses={200: PauseRequestSerializer},
    description="Accept or deny your buddy's pause request.",
    tags=['pause-requests'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def respond_pause_request(request, request_id):
    serializer = PauseRequestRespondSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        pause_request = respond_to_pause_request(
            request_id=request_id,
            user=request.user,
            accept=serializer.validated_data['accept'],
        )
    except PauseRequestNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (NotPairMemberError, CannotRespondToOwnRequestError) as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except AlreadyRespondedError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(PauseRequestSerializer(pause_request).data)
