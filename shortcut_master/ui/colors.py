"""Theme colors and color utilities for the UI."""


class Palette:
    """Light indigo theme."""

    BG = "#f8fafc"
    CARD_BG = "#ffffff"
    CARD_BORDER = "#e2e8f0"

    PRIMARY = "#4f46e5"
    PRIMARY_LIGHT = "#eef2ff"
    PRIMARY_DARK = "#3730a3"

    SUCCESS = "#10b981"
    ERROR = "#f43f5e"

    KEY_CAP_BG = "#f1f5f9"
    KEY_CAP_BORDER = "#cbd5e1"

    TEXT_PRIMARY = "#0f172a"
    TEXT_SECONDARY = "#475569"
    TEXT_MUTED = "#94a3b8"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a


def feedback_tint(feedback: str) -> str:
    """Background for the play card: a light wash of the feedback color."""
    if feedback == "success":
        return blend_hex(Palette.CARD_BG, Palette.SUCCESS, 0.12)
    if feedback == "error":
        return blend_hex(Palette.CARD_BG, Palette.ERROR, 0.12)
    return Palette.CARD_BG
