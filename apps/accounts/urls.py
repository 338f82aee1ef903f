from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # User profile
    path('user/', views.get_current_user, name='current-user'),
    path('user/update/', views.update_profile, name='update-profile'),
]
