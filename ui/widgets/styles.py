"""
Centralized CSS styles for the user interface.
Qt-compatible styling layered on top of the qdarktheme stylesheet.
"""


class ColorPalette:
    """Color palette constants for consistent theming."""

    PRIMARY = "#2196F3"
    PRIMARY_DARK = "#1976D2"
    PRIMARY_DARKER = "#0D47A1"

    DANGER = "#f44336"

    NEUTRAL_400 = "#cccccc"
    NEUTRAL_500 = "#999999"
    NEUTRAL_600 = "#666666"


class Spacing:
    """Spacing constants for consistent layout."""

    SM = "4px"
    MD = "6px"
    XL = "12px"


class BorderRadius:
    """Border radius constants."""

    MD = "4px"


class Typography:
    """Typography constants."""

    MONOSPACE_FAMILY = "Courier New"
    SIZE_MD = "11px"


class ComponentStyles:
    """Pre-built component style generators."""

    @staticmethod
    def button_primary() -> str:
        """Primary button style."""
        return f"""
            QPushButton {{
                background-color: {ColorPalette.PRIMARY};
                color: white;
                border: none;
                border-radius: {BorderRadius.MD};
                padding: {Spacing.MD} {Spacing.XL};
                font-weight: bold;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.PRIMARY_DARK};
            }}
            QPushButton:pressed {{
                background-color: {ColorPalette.PRIMARY_DARKER};
            }}
            QPushButton:disabled {{
                background-color: {ColorPalette.NEUTRAL_400};
                color: {ColorPalette.NEUTRAL_600};
            }}
        """

    @staticmethod
    def monospace_panel() -> str:
        """Read-only text panel style."""
        return f"""
            QPlainTextEdit {{
                font-family: "{Typography.MONOSPACE_FAMILY}", monospace;
                font-size: {Typography.SIZE_MD};
                padding: {Spacing.SM};
            }}
        """


# Log line colors by level name
LOG_COLORS = {
    "Info": ColorPalette.NEUTRAL_500,
    "Error": ColorPalette.DANGER,
}

APPLY_BUTTON_STYLES = ComponentStyles.button_primary()

TEXT_PANEL_STYLES = ComponentStyles.monospace_panel()
