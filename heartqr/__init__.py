"""heartqr: scannable QR codes styled toward a heart silhouette."""

__version__ = "0.1.0"

# Shared constants
ERROR_LEVEL = "H"        # ~30% recoverable, budget for decorative erosion
BACKGROUND = "#FFFFFF"   # background is always white
MAX_URL_LENGTH = 300
SIZE_PRESETS = (256, 400, 512, 768, 1024)
DEFAULT_SIZE = 512
MAX_BUDGET_USE = 0.95     # dropped modules must stay under this share of ECC capacity
