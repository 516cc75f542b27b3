# backend/image_fetch.py
# Chlorophyll-a image service client.
# Used by the Streamlit app to download the overlay image for a given day.

import logging
import uuid
from io import BytesIO
import sys
import os

import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

# Add parent dir to path so config.py is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import (
    IMAGE_SERVICE_URL,
    IMAGE_SERVICE_LOCALPATH,
    IMAGE_SERVICE_FORCE_DOWNLOAD,
    IMAGE_SERVICE_TIMEOUT,
)

logger = logging.getLogger(__name__)


class ImageFetchError(Exception):
    """Raised when the image service does not return a usable image."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def build_params(date_str):
    """Query parameters for one image request."""
    return {
        "date_str": date_str,
        "localpath": IMAGE_SERVICE_LOCALPATH,
        "force_download": IMAGE_SERVICE_FORCE_DOWNLOAD,
    }


def decode_image(content):
    """Decode a PNG/JPEG body into an RGBA numpy array."""
    try:
        img = Image.open(BytesIO(content)).convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise ImageFetchError(f"Response body is not an image: {e}") from e
    return np.array(img)


def fetch_image(date_str, url=IMAGE_SERVICE_URL, timeout=IMAGE_SERVICE_TIMEOUT):
    """Download the plot for one day and return it as a numpy array.

    Args:
        date_str (str): Day in YYYYMMDD form.
        url (str): Image service endpoint.
        timeout (float): Seconds before the request is abandoned.

    Returns:
        numpy.ndarray: HxWx4 uint8 image.

    Raises:
        ImageFetchError: on any non-2xx response, network failure or
            undecodable body.
    """
    try:
        resp = requests.get(url, params=build_params(date_str), timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Error fetching the image: {e}")
        raise ImageFetchError(str(e)) from e

    if not resp.ok:
        logger.error(f"Error fetching the image: {resp.reason}")
        raise ImageFetchError(resp.reason or "HTTP error", status_code=resp.status_code)

    arr = decode_image(resp.content)
    logger.info(f"Fetched image for {date_str}: {arr.shape[1]}x{arr.shape[0]}")
    return arr


class ImageRegistry:
    """Holds decoded images behind opaque references.

    Each registered image gets a fresh ``blob:`` style reference which stays
    valid until it is revoked. Callers own the references they create.
    """

    def __init__(self):
        self._images = {}

    def create_url(self, image):
        url = f"blob:{uuid.uuid4()}"
        self._images[url] = image
        return url

    def revoke_url(self, url):
        # Revoking an unknown or already revoked reference is a no-op
        self._images.pop(url, None)

    def get(self, url):
        return self._images.get(url)

    def __contains__(self, url):
        return url in self._images

    def __len__(self):
        return len(self._images)


if __name__ == "__main__":
    # Quick sanity test against a locally running image service
    logging.basicConfig(level=logging.INFO)
    arr = fetch_image("20240925")
    print(f"Image shape: {arr.shape}")
    print("image_fetch.py OK")
