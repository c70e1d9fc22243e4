"""Claude Code hook that records whether Claude is asking or waiting.

Install as a ``Stop`` hook (writes "asking" when Claude's last message looks
like a question, otherwise "waiting") and, with ``--permission``, as a
``Notification``/permission hook (always "asking"). The hook reads the event
JSON from stdin and writes ``~/.claude-states/state-<hash>.json``, which the
tracker's HookStateStore reads on every refresh.

The hook always exits 0 so it can never block Claude from stopping.
"""

import argparse
import json
import logging
import re
import sys
from collections import deque
from pathlib import Path

from ghostty_tracker.models.window import HookState
from ghostty_tracker.services.hook_state import HookStateStore

logger = logging.getLogger(__name__)

# Number of transcript lines scanned for the last assistant message
TRANSCRIPT_TAIL_LINES = 100

QUESTION_ENDING = re.compile(r"\?\s*$", re.MULTILINE)
QUESTION_PHRASES = re.compile(
    r"(would you like|do you want|should i|shall i|can you|could you|may i|"
    r"let me know|please confirm|which.*prefer|what.*like)",
    re.IGNORECASE,
)


def _message_text(content) -> str:
    """Flatten message content (string or list of content blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return " ".join(
            block.get("text", "")
            for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        )
    return ""


def last_assistant_text(transcript_path: str | Path) -> str:
    """Return the text of the last assistant message in a JSONL transcript."""
    path = Path(transcript_path)
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            tail = deque(f, maxlen=TRANSCRIPT_TAIL_LINES)
    except OSError:
        return ""

    last = None
    for line in tail:
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(entry, dict):
            continue
        if entry.get("type") == "assistant" or entry.get("role") == "assistant":
            last = entry

    if last is None:
        return ""
    message = last.get("message")
    if isinstance(message, dict):
        return _message_text(message.get("content"))
    return _message_text(last.get("content"))


def is_question(text: str) -> bool:
    """Heuristic: does this assistant message ask the user something?"""
    if not text:
        return False
    return bool(QUESTION_ENDING.search(text) or QUESTION_PHRASES.search(text))


def decide_state(event: dict, permission: bool = False) -> str:
    """Decide the state label for a hook event."""
    if permission:
        return HookState.ASKING.value
    transcript = event.get("transcript_path")
    if isinstance(transcript, str) and transcript and is_question(last_assistant_text(transcript)):
        return HookState.ASKING.value
    return HookState.WAITING.value


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Record Claude Code state for the window tracker")
    parser.add_argument(
        "--permission",
        action="store_true",
        help="Permission prompt hook: always record 'asking'",
    )
    parser.add_argument(
        "--state-dir",
        default="~/.claude-states",
        help="Directory to write state files to",
    )
    args = parser.parse_args(argv)

    try:
        event = json.loads(sys.stdin.read() or "{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        event = {}
    if not isinstance(event, dict):
        event = {}

    cwd = event.get("cwd")
    if not isinstance(cwd, str) or not cwd:
        # The tracker keys hook state by directory; nothing to record
        return 0

    try:
        state = decide_state(event, permission=args.permission)
    except Exception as e:
        logger.warning(f"[Hook] Could not classify transcript: {e}")
        state = HookState.WAITING.value
    session_id = event.get("session_id")
    try:
        HookStateStore(args.state_dir).write_state(
            cwd=cwd,
            state=state,
            session_id=session_id if isinstance(session_id, str) else None,
        )
    except OSError as e:
        logger.warning(f"[Hook] Could not write state file: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
