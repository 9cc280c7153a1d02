"""GTFS-Realtime protobuf decoding."""

from __future__ import annotations

from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from commute_coffee.domain.models.fetch_error import FetchError, FetchErrorKind


def decode_feed(payload: bytes, source_name: str = "") -> gtfs_realtime_pb2.FeedMessage:
    """Decode a GTFS-Realtime FeedMessage.

    Raises:
        FetchError: With kind PARSE if the payload is not a valid feed.
    """
    feed = gtfs_realtime_pb2.FeedMessage()
    try:
        feed.ParseFromString(payload)
    except DecodeError as e:
        raise FetchError(
            FetchErrorKind.PARSE, f"invalid GTFS-Realtime payload: {e}", source_name
        ) from e
    return feed


def translated_text(translated_string: gtfs_realtime_pb2.TranslatedString, language: str = "en") -> str:
    """Pick the translation for a language, falling back to the first one."""
    translations = list(translated_string.translation)
    if not translations:
        return ""
    for translation in translations:
        if translation.language == language:
            return translation.text.strip()
    return translations[0].text.strip()
