from django.urls import path
from . import views

app_name = 'buddies'

urlpatterns = [
    # Buddies
    # GET    /api/buddies/             - List buddies with pots
    # POST   /api/buddies/             - Add buddy by email (pair or invitation)
    # DELETE /api/buddies/{pair_id}/   - Remove buddy
    path('buddies/', views.buddies, name='buddies'),
    path('buddies/<uuid:pair_id>/', views.remove_buddy, name='remove-buddy'),
    path('pairs/<uuid:pair_id>/', views.pair_detail, name='pair-detail'),
    path('stats/', views.stats, name='stats'),

    # Invitations
    path('invitations/pending/', views.pending_invitations, name='pending-invitations'),
    path('invitations/received/', views.received_invitations, name='received-invitations'),
    path('invitations/<uuid:invitation_id>/', views.delete_invitation, name='delete-invitation'),
    path('invitations/<uuid:invitation_id>/accept/', views.accept_invitation, name='accept-invitation'),
    path('invitations/<uuid:invitation_id>/decline/', views.decline_invitation, name='decline-invitation'),

    # Pause requests
    path('pairs/<uuid:pair_id>/pause-requests/', views.create_pause_request, name='create-pause-request'),
    path('pause-requests/received/', views.received_pause_requests, name='received-pause-requests'),
    path('pause-requests/<uuid:request_id>/respond/', views.respond_pause_request, name='respond-pause-request'),
]
