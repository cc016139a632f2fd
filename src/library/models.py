"""Seed music tables browsed by the shelf pipeline.

Table names are pinned with ``db_table`` because the shelf classifier works
from the raw table names it discovers in the database.
"""

from django.db import models
from django.utils import timezone


class RecentlyPlayed(models.Model):
    """A single play event."""

    user_id = models.IntegerField()
    song_id = models.IntegerField()
    song_name = models.CharField(max_length=255, blank=True)
    artist_name = models.CharField(max_length=255, blank=True)
    played_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "recently_played"
        ordering = ["-played_at"]

    def __str__(self) -> str:
        label = self.song_name or f"song #{self.song_id}"
        return f"{label} @ {self.played_at:%Y-%m-%d %H:%M}"


class MadeForYou(models.Model):
    """A personalised playlist surfaced to a user."""

    user_id = models.IntegerField()
    playlist_id = models.IntegerField()
    title = models.TextField()
    description = models.TextField(blank=True, null=True)
    cover_image = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "made_for_you"
        ordering = ["-created_at"]
        verbose_name_plural = "made for you"

    def __str__(self):
        return self.title


class PopularAlbum(models.Model):
    """Chart entry for an album."""

    title = models.TextField()
    artist = models.TextField()
    cover_image = models.TextField(blank=True, null=True)
    release_date = models.DateTimeField(blank=True, null=True)
    total_tracks = models.IntegerField(blank=True, null=True)
    popularity = models.IntegerField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "popular_albums"
        ordering = ["-popularity"]

    def __str__(self) -> str:
        return f"{self.title} ({self.artist})"
