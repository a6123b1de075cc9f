"""Constants and configuration for the slessing editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    APP_NAME = "slessing"

    # Layout
    MIN_GUTTER_WIDTH = 3  # Columns reserved for line numbers
    STATUS_ROWS = 1  # Status bar at the bottom of the screen
    EMPTY_LINE_MARKER = "~"  # Gutter marker below the end of the document
    PROMPT_GLYPH = "❯"
    MIN_TERMINAL_WIDTH = 20
    MIN_TERMINAL_HEIGHT = 3

    # Configuration
    CONFIG_FILENAME = "config.json"
    LOG_FILENAME = "slessing.log"
    PLUGIN_DIRNAME = "plugins"
    PLUGIN_FACTORY = "create_plugin"  # Module-level factory a plugin file must export
    PLUGIN_ENTRY_POINT_GROUP = "slessing.plugins"

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Status messages
    TERMINAL_TOO_SMALL_MESSAGE = "Terminal too small! Need at least {}x{}."
    SAVE_PROMPT = "Save as:"
    OPEN_PROMPT = "Open file:"
    QUIT_CONFIRM_PROMPT = "Save file? (y, n)"
    HELP_TITLE = "SLESSING HELP"
    HELP_FOOTER = " Press any key to continue"
