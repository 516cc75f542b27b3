# backend/map_state.py
# State and state transitions behind the overlay map page.
# The Streamlit app keeps one MapView per session and wires widgets to it.

import datetime
import logging
import re
from dataclasses import dataclass
from typing import Optional
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from config import DEFAULT_DATE, DEFAULT_MARGINS, DEFAULT_SCALE, ERROR_MESSAGE
from backend.image_fetch import ImageFetchError, ImageRegistry, fetch_image

logger = logging.getLogger(__name__)

MARGIN_SIDES = ("north", "south", "east", "west")

# Separators a date picker may put between year, month and day
_DATE_SEPARATORS = re.compile(r"[-/.]")

# Marker for "the fetch effect has never run"
_NEVER = object()


@dataclass
class MapViewState:
    north_margin: int = DEFAULT_MARGINS["north"]
    south_margin: int = DEFAULT_MARGINS["south"]
    east_margin: int = DEFAULT_MARGINS["east"]
    west_margin: int = DEFAULT_MARGINS["west"]
    # Not used by any rendering yet
    scale: int = DEFAULT_SCALE
    date: Optional[str] = DEFAULT_DATE
    image_url: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    def margins(self):
        """Return (north, south, east, west)."""
        return (self.north_margin, self.south_margin, self.east_margin, self.west_margin)


def normalize_date(value):
    """Turn a picked date (datetime.date or '2024-05-01') into 'YYYYMMDD'.

    An empty pick gives None, which the fetch treats as DEFAULT_DATE.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.date):
        return value.strftime("%Y%m%d")
    return _DATE_SEPARATORS.sub("", str(value))


def overlay_bounds(state):
    """Overlay box as [[top, right], [bottom, left]] from the world extent.

    Margins shrink the box inwards for north/south and push it outwards
    for east/west, matching the +/- buttons on the page.
    """
    return [
        [90 - state.north_margin, 180 + state.east_margin],
        [-90 + state.south_margin, -180 - state.west_margin],
    ]


class MapView:
    """Interactive map view: margin controls, date selection and image fetch.

    The fetch effect runs on the first ``sync()`` and again every time the
    selected date changes. Image references are created in ``registry`` and
    released once they are replaced or the view is unmounted.
    """

    def __init__(self, fetcher=fetch_image, registry=None):
        self.state = MapViewState()
        self.registry = registry if registry is not None else ImageRegistry()
        self.mounted = True
        self._fetcher = fetcher
        self._effect_date = _NEVER

    # ------------------------------------------------------------------
    # Margins
    # ------------------------------------------------------------------

    def adjust_margin(self, side, delta):
        if side not in MARGIN_SIDES:
            raise ValueError(f"Unknown margin side: {side!r}")
        attr = f"{side}_margin"
        setattr(self.state, attr, getattr(self.state, attr) + delta)

    def increase_north(self):
        self.adjust_margin("north", 1)

    def decrease_north(self):
        self.adjust_margin("north", -1)

    def increase_south(self):
        self.adjust_margin("south", 1)

    def decrease_south(self):
        self.adjust_margin("south", -1)

    def increase_east(self):
        self.adjust_margin("east", 1)

    def decrease_east(self):
        self.adjust_margin("east", -1)

    def increase_west(self):
        self.adjust_margin("west", 1)

    def decrease_west(self):
        self.adjust_margin("west", -1)

    # ------------------------------------------------------------------
    # Date + fetch effect
    # ------------------------------------------------------------------

    def select_date(self, value):
        self.state.date = normalize_date(value)

    def needs_fetch(self):
        return self.mounted and self._effect_date != self.state.date

    def sync(self):
        """Run the fetch effect if this is the first render or the date changed."""
        if self.needs_fetch():
            self.run_fetch_effect()

    def run_fetch_effect(self):
        """Fetch the image for the selected date and store its reference.

        On failure the previous image reference is kept and ``error`` is set.
        Nothing is written to state if the view was unmounted meanwhile.
        """
        self._effect_date = self.state.date
        date_str = self.state.date or DEFAULT_DATE

        self.state.loading = True
        self.state.error = None
        try:
            image = self._fetcher(date_str)
        except ImageFetchError:
            if not self.mounted:
                return
            self.state.error = ERROR_MESSAGE
            self.state.loading = False
            return

        if not self.mounted:
            logger.info(f"Discarding image for {date_str}, view unmounted")
            return

        previous = self.state.image_url
        self.state.image_url = self.registry.create_url(image)
        self.state.loading = False
        if previous is not None:
            self.registry.revoke_url(previous)

    def current_image(self):
        """Decoded array behind ``image_url``, or None."""
        if self.state.image_url is None:
            return None
        return self.registry.get(self.state.image_url)

    def unmount(self):
        """Release the current image reference and stop accepting updates."""
        self.mounted = False
        if self.state.image_url is not None:
            self.registry.revoke_url(self.state.image_url)
