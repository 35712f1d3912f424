"""Colour palette and spacing scale shared with the mobile client."""

COLORS = {
    "primary": "#007bff",
    "secondary": "#ff3b30",
    "background": "#f9f9f9",
    "text": "#222",
    "success": "#10B981",
    "warning": "#F59E0B",
    "danger": "#EF4444",
    "muted": "#6B7280",
}

SPACING = {
    "small": 8,
    "medium": 16,
    "large": 24,
}


def get_theme() -> dict:
    return {"colors": dict(COLORS), "spacing": dict(SPACING)}
