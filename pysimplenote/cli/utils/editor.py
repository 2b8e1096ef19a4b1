"""External editor invocation for composing and editing notes."""

from typing import Optional

import click


def compose(initial: str = "", editor: Optional[str] = None) -> str:
    """Open ``editor`` on ``initial`` and return the stripped result.

    Quitting without saving keeps ``initial``.
    """
    text = click.edit(initial, editor=editor, extension=".txt", require_save=True)
    if text is None:
        return initial.strip()
    return text.strip()
