"""TimeMachine package.

Synthesizes a backdated commit history inside a local git repository and
resets it back to its bootstrap commit.
"""

__all__ = [
    "config",
    "dates",
    "validation",
    "git",
    "synth",
    "history",
    "api",
    "mcp",
    "cli",
]

__version__ = "0.1.0"
