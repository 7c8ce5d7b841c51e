"""Report branding: colors and page geometry."""
from reportlab.lib.units import inch

BRAND_PURPLE = "#6b26d9"   # table headers
BRAND_DARK = "#191726"     # body text, headings
BRAND_MUTED = "#6b677e"    # subtitles, footer
BRAND_GRID = "#dedde4"     # table grid
BRAND_SAVINGS = "#22a06b"  # savings, reduction highlight
BRAND_LOSS = "#dc2626"     # negative ROI

MARGIN = 40  # points, landscape letter
SECTION_SPACER = 0.2 * inch
