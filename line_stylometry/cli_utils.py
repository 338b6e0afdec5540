"""Console output helpers for the command-line runner."""

import platform

import pandas as pd


def is_windows():
    """Check if running on Windows."""
    return platform.system() == 'Windows'


def safe_print(*args, **kwargs):
    """
    Print, replacing characters the console encoding cannot represent.

    Book lines can contain curly quotes and accented names that a Windows
    console rejects.
    """
    message = ' '.join(str(arg) for arg in args)
    try:
        print(message, **kwargs)
    except UnicodeEncodeError:
        print(message.encode('ascii', errors='replace').decode('ascii'), **kwargs)


def format_header(title, width=60, char='='):
    """Format a header with borders, Windows-compatible."""
    if is_windows():
        top = '+' + char * (width - 2) + '+'
        middle = f"| {title:^{width-4}} |"
        bottom = top
    else:
        top = "╔" + "═" * (width - 2) + "╗"
        middle = f"║ {title:^{width-4}} ║"
        bottom = "╚" + "═" * (width - 2) + "╝"

    return f"\n{top}\n{middle}\n{bottom}\n"


def format_table(df: pd.DataFrame, float_format='{:.4f}') -> str:
    """Render a small DataFrame for the console."""
    return df.to_string(float_format=float_format.format)


def format_lines(sample: pd.DataFrame, width=80) -> str:
    """Render sampled documents as 'probability | text' lines."""
    rows = []
    for _, row in sample.iterrows():
        text = row['raw_text'] if len(row['raw_text']) <= width else row['raw_text'][:width - 3] + '...'
        rows.append(f"  {row['probability']:.3f} | {text}")
    return '\n'.join(rows) if rows else '  (none)'
