# Generated manually for workouts and settlements

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('buddies', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Workout',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField()),
                ('status', models.CharField(choices=[('worked', 'Worked out'), ('missed', 'Missed')], max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='workouts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'workouts',
                'ordering': ['date'],
                'indexes': [models.Index(fields=['user', 'status', 'date'], name='workouts_user_status_idx')],
                'constraints': [models.UniqueConstraint(fields=('user', 'date'), name='unique_workout_per_day')],
            },
        ),
        migrations.CreateModel(
            name='Settlement',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('week_start', models.DateField(help_text='Monday of the settled week')),
                ('amount', models.IntegerField(help_text='Pot balance at the moment of settlement')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('pair', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='settlements', to='buddies.pair')),
                ('winner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='settlements_won', to=settings.AUTH_USER_MODEL)),
                ('loser', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='settlements_lost', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'settlements',
                'ordering': ['-week_start'],
                'constraints': [models.UniqueConstraint(fields=('pair', 'week_start'), name='unique_settlement_per_pair_week')],
            },
        ),
    ]
