from datetime import datetime, timezone
from typing import Iterable, List, Optional


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def clean_image_uris(uris: Optional[Iterable[Optional[str]]]) -> List[str]:
    """Drop empty or whitespace-only entries, keeping order."""
    if not uris:
        return []
    return [uri for uri in uris if uri and uri.strip()]
