"""Claude Code hook entry points."""

from ghostty_tracker.hooks.state_hook import decide_state, is_question, last_assistant_text

__all__ = ["decide_state", "is_question", "last_assistant_text"]
