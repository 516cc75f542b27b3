# config.py
# Global configuration: image service, map view and overlay defaults

# Backend that renders the chlorophyll-a plot for a given day
IMAGE_SERVICE_URL = "http://localhost:8080/chlor_a_plot_img/"
IMAGE_SERVICE_LOCALPATH = "./"
IMAGE_SERVICE_FORCE_DOWNLOAD = "false"
IMAGE_SERVICE_TIMEOUT = 60

# YYYYMMDD, used on first render and whenever no date is selected
DEFAULT_DATE = "20240925"

ERROR_MESSAGE = "Failed to fetch the image."

# Degrees trimmed off each edge of the world extent
DEFAULT_MARGINS = {
    "north": 20,
    "south": 20,
    "east": 0,
    "west": 0,
}
DEFAULT_SCALE = 1

# Base map
MAP_CENTER = [51.505, -0.09]
MAP_ZOOM = 3
MAP_MIN_ZOOM = 3
MAP_HEIGHT = 700

TILE_URL = (
    "https://server.arcgisonline.com/ArcGIS/rest/services/"
    "Ocean/World_Ocean_Base/MapServer/tile/{z}/{y}/{x}"
)
TILE_ATTRIBUTION = "Tiles &copy; Esri &mdash; Sources: GEBCO, NOAA, CHS, OSU, UNH, CSUMB, National Geographic, DeLorme, NAVTEQ, and Esri"
TILE_OPACITY = 0.75
TILE_MIN_ZOOM = 1

# Overlay shown on top of the base map
OVERLAY_IMAGE_URL = (
    "https://oceancolor.gsfc.nasa.gov/showimages/MODISA/IMAGES/PIC/L3/2024/0501/"
    "AQUA_MODIS.20240501.L3m.DAY.PIC.pic.4km.nc.png"
)
OVERLAY_OPACITY = 0.5

# Draw the image returned by the service instead of OVERLAY_IMAGE_URL
USE_FETCHED_OVERLAY = False
