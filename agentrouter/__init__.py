"""AgentRouter.

Routes free-text tasks to the right agent: implementation work to the Codex
CLI, research to the Gemini CLI, and design or explanation questions back to
the calling assistant.
"""

__version__ = "0.1.0"
