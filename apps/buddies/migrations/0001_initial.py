# Generated manually for buddy pairs, invitations and pause requests

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Pair',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('pot_balance', models.IntegerField(default=0)),
                ('is_paused', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user_a', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pairs_as_a', to=settings.AUTH_USER_MODEL)),
                ('user_b', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pairs_as_b', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'pairs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user_a'], name='pairs_user_a_idx'),
                    models.Index(fields=['user_b'], name='pairs_user_b_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('user_a', 'user_b'), name='unique_pair_users'),
                    models.CheckConstraint(condition=models.Q(('user_a', models.F('user_b')), _negated=True), name='pair_users_distinct'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Invitation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('invitee_email', models.EmailField(max_length=255)),
                ('invitee_name', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('declined', 'Declined')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('inviter', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sent_invitations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'buddy_invitations',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['invitee_email', 'status'], name='invitations_email_idx'),
                    models.Index(fields=['inviter', 'status'], name='invitations_inviter_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('inviter', 'invitee_email'), name='unique_pending_invitation'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PauseRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('action', models.CharField(choices=[('pause', 'Pause'), ('resume', 'Resume')], max_length=10)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('denied', 'Denied')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('pair', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pause_requests', to='buddies.pair')),
                ('requested_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pause_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'pause_requests',
                'ordering': ['-created_at'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('pair',), name='unique_pending_pause_request'),
                ],
            },
        ),
    ]
