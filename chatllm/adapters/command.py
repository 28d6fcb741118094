"""Parsing of the ``chat`` command line.

Grammar: ``<trigger> [options] <text>``. Options are only recognized
before the text starts, so a message such as ``chat explain -p`` sends
``explain -p`` verbatim.

Options:
    -r, --reset          Clear the conversation
    -p, --picture        Render the reply as an image card
    -c, --continue       Carry over the last chat from another model
    -m, --model NAME     Select the model (also --model=NAME)
    -v, --version        Show the selected model
"""

from __future__ import annotations

from chatllm.core.chat import ChatCommand

_FLAGS = {
    "-r": "reset", "--reset": "reset",
    "-p": "picture", "--picture": "picture",
    "-c": "continue_", "--continue": "continue_",
    "-v": "version", "--version": "version",
}
_MODEL_OPTIONS = ("-m", "--model")


def parse_command(content: str, trigger_word: str = "chat") -> ChatCommand | None:
    """Parse a chat message into a ChatCommand.

    Returns None when the message does not start with the trigger word.
    """
    parts = content.strip().split(None, 1)
    if not parts or parts[0].lower() != trigger_word.lower():
        return None

    rest = parts[1] if len(parts) > 1 else ""
    command = ChatCommand()

    while rest:
        token, remainder = _next_token(rest)
        if token in _FLAGS:
            setattr(command, _FLAGS[token], True)
        elif token in _MODEL_OPTIONS:
            value, remainder = _next_token(remainder)
            command.model = value or None
        elif token.startswith("--model="):
            command.model = token.split("=", 1)[1] or None
        else:
            break
        rest = remainder

    command.text = rest.strip()
    return command


def _next_token(text: str) -> tuple[str, str]:
    """Split off the first whitespace-separated token."""
    parts = text.split(None, 1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""
