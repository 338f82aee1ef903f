from django.urls import path
from . import views

app_name = 'ledger'

urlpatterns = [
    # Workouts
    # POST /api/workouts/                 - Record a day's outcome
    # GET  /api/workouts/today/           - Today's workout
    # GET  /api/workouts/history/?weeks=N - Weekly buckets
    path('workouts/', views.record_workout, name='record-workout'),
    path('workouts/today/', views.today_workout, name='today-workout'),
    path('workouts/history/', views.workout_history, name='workout-history'),

    # Settlement
    path('evaluate-weeks/', views.evaluate_weeks, name='evaluate-weeks'),
    path('pots/recalculate/', views.recalculate_pots, name='recalculate-pots'),
]
