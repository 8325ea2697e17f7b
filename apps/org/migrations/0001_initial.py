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
            name="Level",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150, unique=True)),
                ("slug", models.SlugField(blank=True, max_length=160, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="LevelMembership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("director", "Transport Director"), ("fuel_manager", "Fuel Manager"), ("fuel_attendant", "Fuel Attendant"), ("driver", "Driver"), ("staff", "Staff")], default="staff", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("level", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to="org.level")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="level_memberships", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "constraints": [models.UniqueConstraint(fields=("level", "user"), name="uniq_level_membership")],
            },
        ),
    ]
