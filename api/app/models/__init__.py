from app.models.advertisement import AdvertisementRequest
from app.models.catalog import ContentRecord, ContentType, Episode, Movie, Season, Show, WebSeries
from app.models.upcoming import UpcomingAnnouncement

__all__ = [
    "AdvertisementRequest",
    "ContentRecord",
    "ContentType",
    "Episode",
    "Movie",
    "Season",
    "Show",
    "UpcomingAnnouncement",
    "WebSeries",
]
