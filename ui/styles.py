from rich.style import Style
from rich.text import Text
from rich.theme import Theme

from models import ValidationState

ACCENT_RED = "#DD3B2F"
ACCENT_GOLD = "#F1C40F"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=ACCENT_RED, bold=True),
        "secondary": Style(color=ACCENT_GOLD, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "german": Style(color=TEXT_WHITE, bold=True),
        "saved_word": Style(color=ACCENT_GOLD, underline=True),
        "gap": Style(color=INFO_BLUE, bold=True),
        "gap_incorrect": Style(color=ERROR_RED, bold=True),
        "option_label": Style(color=ACCENT_GOLD, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "progress_complete": Style(color=SUCCESS_GREEN, bold=True),
        "progress_remaining": Style(color=MUTED_GRAY),
        "title": Style(color=ACCENT_RED, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)


def get_validation_style(state: ValidationState) -> Style:
    """Get border/text style for a validation state."""
    if state == ValidationState.CORRECT:
        return Style(color=SUCCESS_GREEN, bold=True)
    if state == ValidationState.INCORRECT:
        return Style(color=ERROR_RED, bold=True)
    return Style(color=MUTED_GRAY)


def get_score_style(percentage: int) -> Style:
    """Get color style for a quiz score."""
    if percentage >= 70:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif percentage >= 50:
        return Style(color=ACCENT_GOLD, bold=True)
    else:
        return Style(color=ERROR_RED, bold=True)


def progress_bar(percent: float, width: int = 20) -> str:
    """Create a text-based progress bar."""
    filled = int(width * percent / 100)
    return "█" * filled + "░" * (width - filled)


def create_success_header() -> Text:
    """Create a success/correct answer header."""
    header = Text()
    header.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
    header.append("Richtig!", Style(color=SUCCESS_GREEN, bold=True))
    return header


def create_error_header() -> Text:
    """Create an error/incorrect answer header."""
    header = Text()
    header.append("✗ ", Style(color=ERROR_RED, bold=True))
    header.append("Nicht ganz!", Style(color=ERROR_RED, bold=True))
    return header


def create_mode_complete_header(mode: str) -> Text:
    header = Text()
    header.append("🎉 ", Style(color=ACCENT_GOLD))
    header.append(f"{mode.capitalize()} complete!", Style(color=ACCENT_RED, bold=True))
    return header


def themed(name: str) -> Style:
    """Look up a theme style, so renderables work on any console."""
    return DEFAULT_THEME.styles[name]
