import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(help_text="E.g. A.2.1", max_length=20, unique=True, verbose_name="Code")),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("floor", models.IntegerField(default=1, verbose_name="Floor")),
                ("building", models.CharField(blank=True, max_length=50, verbose_name="Building")),
                ("capacity", models.PositiveIntegerField(verbose_name="Capacity")),
                (
                    "facilities",
                    models.TextField(blank=True, help_text="E.g. AC, projector, sound system", verbose_name="Facilities"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("available", "Available"), ("maintenance", "Under maintenance")],
                        default="available",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Room",
                "verbose_name_plural": "Rooms",
                "ordering": ["code"],
                "indexes": [models.Index(fields=["status"], name="rooms_room_status_idx")],
            },
        ),
    ]
