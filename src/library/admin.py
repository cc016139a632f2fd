"""Admin configuration for the library app."""

from django.contrib import admin

from .models import MadeForYou, PopularAlbum, RecentlyPlayed


@admin.register(RecentlyPlayed)
class RecentlyPlayedAdmin(admin.ModelAdmin):
    """Play history rows."""

    list_display = ("song_name", "artist_name", "user_id", "played_at")
    search_fields = ("song_name", "artist_name")
    list_filter = ("played_at",)


@admin.register(MadeForYou)
class MadeForYouAdmin(admin.ModelAdmin):
    """Personalised playlists."""

    list_display = ("title", "user_id", "playlist_id", "created_at")
    search_fields = ("title", "description")
    readonly_fields = ("created_at",)


@admin.register(PopularAlbum)
class PopularAlbumAdmin(admin.ModelAdmin):
    """Album chart entries."""

    list_display = ("title", "artist", "popularity", "total_tracks")
    search_fields = ("title", "artist")
    list_filter = ("release_date",)
