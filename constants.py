# constants.py
"""
Application-level constants.

These values are static and do not change between shows. They cover the
terminal framework (palette, glyphs, control sequences, banner texts) and
the default configuration sections handed to each component.
"""
from colorama import Fore, Style

# --- Terminal Palette ---
# The bright foreground colors. Each firework picks one and passes it on
# to every particle of its explosion.
FIREWORK_COLORS = [
    Fore.LIGHTRED_EX,
    Fore.LIGHTGREEN_EX,
    Fore.LIGHTYELLOW_EX,
    Fore.LIGHTBLUE_EX,
    Fore.LIGHTMAGENTA_EX,
    Fore.LIGHTCYAN_EX,
    Fore.LIGHTWHITE_EX,
]
RESET = Style.RESET_ALL

# Glyphs used for explosion fragments and the rising rocket.
PARTICLE_GLYPHS = ['*', '•', '○', '◦', '+', '×']
ROCKET_GLYPH = '|'
BLANK_GLYPH = ' '

# --- Terminal Control Sequences ---
HIDE_CURSOR = '\x1b[?25l'
SHOW_CURSOR = '\x1b[?25h'
BELL = '\x07'

# --- Layout ---
# Fallback terminal size when the real one cannot be determined.
DEFAULT_TERMINAL_WIDTH = 80
DEFAULT_TERMINAL_HEIGHT = 24
# Columns of left margin in front of every grid row.
FRAME_MARGIN = '  '
# Rows taken by the banner and status line around the grid.
FRAME_CHROME_ROWS = 5
# The field never shrinks below this, even on tiny terminals.
MIN_FIELD_WIDTH = 20
MIN_FIELD_HEIGHT = 10

# --- Texts ---
TITLE_BANNER = '  🎆 TERMINAL FIREWORKS SHOW 🎆'
INTRO_BANNER = '  🎆 Terminal Fireworks CLI 🎆'
STARTING_MESSAGE = '  Starting fireworks show...'
CLOSING_BANNER = '  🎆 Show ended! Thanks for watching! 🎆'
STATUS_TEMPLATE = '  {count} active fireworks | Press Ctrl+C to exit'

# --- Command Line ---
DEFAULT_DURATION_SECONDS = 30

# --- Default Configuration ---
# Sectioned the same way for every component: each one receives only the
# section it needs.
DEFAULT_CONFIG = {
    'simulation_parameters': {
        'seed': None,
        'spawn_probability': 0.05,
        'max_fireworks': 5,
        'launch_margin': 5,
        'target_offset': 3,
        'ascent_rate': 1,
        'gravity': 0.1,
        'particle_count_base': 20,
        'particle_count_spread': 15,
        'speed_min': 0.5,
        'speed_max': 2.0,
        'lifetime_min': 15,
        'lifetime_max': 25,
    },
    'run_control': {
        'tick_interval': 0.05,
        'intro_delay': 1.0,
        'log_throttle_steps': 200,
    },
    'logging': {
        'level': 'INFO',
        'console_level': 'WARNING',
        'format': '%(asctime)s - %(levelname)s - %(message)s',
        'log_file': None,
    },
}
