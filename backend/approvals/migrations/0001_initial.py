import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ManagerRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=254)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")], db_index=True, default="pending", max_length=20)),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("requester", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="manager_requests", to=settings.AUTH_USER_MODEL)),
                ("reviewed_by", models.ForeignKey(blank=True, help_text="Admin who approved or rejected the request", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviewed_manager_requests", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Manager Request",
                "verbose_name_plural": "Manager Requests",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["requester", "status"], name="mgr_req_requester_status_idx")],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status", "pending")), fields=("requester",), name="unique_pending_manager_request"),
                ],
            },
        ),
    ]
