"""
Color palette for the Maze Race status window
"""

# Background colors
COLOR_BG = (10, 10, 10)           # Main background

# UI colors
COLOR_TEXT = (230, 230, 230)      # Normal text
COLOR_TEXT_DIM = (120, 120, 120)  # Dimmed text
COLOR_TEXT_ALERT = (239, 68, 68)  # Respawn / loss banner
COLOR_TEXT_WIN = (16, 185, 129)   # Win banner


def hex_to_rgb(value):
    """Convert a '#rrggbb' color tag to an RGB tuple"""
    value = value.lstrip('#')
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))
