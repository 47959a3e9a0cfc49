"""Binary image payload helpers."""

from typing import Optional

from filetype import guess


def detect_image_format(data: Optional[bytes]) -> Optional[str]:
    """Detect image type from the file signature; returns lowercase extension."""
    if not data:
        return None
    kind = guess(data)
    if kind and kind.mime.startswith('image/'):
        ext = kind.extension.lower()
        if ext == 'jpeg':
            return 'jpg'
        return ext
    return None


def is_image_data(data: Optional[bytes]) -> bool:
    return detect_image_format(data) is not None
