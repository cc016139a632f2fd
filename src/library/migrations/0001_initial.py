import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RecentlyPlayed",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("user_id", models.IntegerField()),
                ("song_id", models.IntegerField()),
                ("song_name", models.CharField(blank=True, max_length=255)),
                ("artist_name", models.CharField(blank=True, max_length=255)),
                ("played_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "recently_played",
                "ordering": ["-played_at"],
            },
        ),
        migrations.CreateModel(
            name="MadeForYou",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("user_id", models.IntegerField()),
                ("playlist_id", models.IntegerField()),
                ("title", models.TextField()),
                ("description", models.TextField(blank=True, null=True)),
                ("cover_image", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "made_for_you",
                "ordering": ["-created_at"],
                "verbose_name_plural": "made for you",
            },
        ),
        migrations.CreateModel(
            name="PopularAlbum",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("title", models.TextField()),
                ("artist", models.TextField()),
                ("cover_image", models.TextField(blank=True, null=True)),
                ("release_date", models.DateTimeField(blank=True, null=True)),
                ("total_tracks", models.IntegerField(blank=True, null=True)),
                ("popularity", models.IntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "popular_albums",
                "ordering": ["-popularity"],
            },
        ),
    ]
