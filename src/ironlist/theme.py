"""Theming for IronList console output.

A single City Lights palette compiled into a Rich theme. Consoles are built
on demand so they pick up whichever stdout/stderr is current.
"""

from rich.console import Console
from rich.theme import Theme


CITY_LIGHTS_COLORS = {
    'surface_light': '#41505E',
    'primary': '#68D5F3',
    'secondary': '#5CCFE6',
    'accent': '#B7C5D3',
    'success': '#8BD649',
    'warning': '#FFD93D',
    'error': '#F78C6C',
    'text_primary': '#B7C5D3',
    'text_muted': '#4F5B66',
    'text_bright': '#FFFFFF',
}

IRONLIST_THEME = Theme({
    'default': f"{CITY_LIGHTS_COLORS['text_primary']}",
    'muted': f"{CITY_LIGHTS_COLORS['text_muted']}",
    'success': f"{CITY_LIGHTS_COLORS['success']} bold",
    'warning': f"{CITY_LIGHTS_COLORS['warning']} bold",
    'error': f"{CITY_LIGHTS_COLORS['error']} bold",
    'primary': f"{CITY_LIGHTS_COLORS['primary']} bold",
    'accent': f"{CITY_LIGHTS_COLORS['accent']}",
    'entry_number': f"{CITY_LIGHTS_COLORS['primary']}",
    'entry_date': f"{CITY_LIGHTS_COLORS['secondary']}",
    'entry_completed': f"{CITY_LIGHTS_COLORS['success']}",
    'tag': f"{CITY_LIGHTS_COLORS['secondary']}",
    'header': f"{CITY_LIGHTS_COLORS['text_bright']} bold",
    'border': f"{CITY_LIGHTS_COLORS['surface_light']}",
})


def get_themed_console(stderr: bool = False, no_color: bool = False) -> Console:
    """Get a console with the IronList theme applied.

    Args:
        stderr: Write to standard error instead of standard output
        no_color: Strip all colour (the NO_COLOR environment variable is
            honoured by Rich regardless)
    """
    return Console(theme=IRONLIST_THEME, stderr=stderr, no_color=no_color, highlight=False)
