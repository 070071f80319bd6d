"""Claude CLI adapter - subprocess wrapper used as an extraction backend."""

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)


def find_claude_binary() -> str:
    """Locate the claude executable, falling back to the bare name."""
    return shutil.which("claude") or "claude"


class ClaudeCLIService:
    """
    Claude CLI subprocess adapter.

    Implements LLMService protocol. The prompt goes through stdin so long
    dumps never hit argument length limits.
    """

    def __init__(self, timeout: int = 120):
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        """Generate text from a prompt. Returns complete response."""
        try:
            proc = subprocess.run(
                [find_claude_binary(), "-p", "-"],
                input=prompt,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise RuntimeError("Claude CLI not found. Install with: npm install -g @anthropic-ai/claude-code")
        except subprocess.TimeoutExpired:
            raise RuntimeError(f"Claude CLI timed out after {self.timeout}s")

        if proc.returncode != 0:
            logger.error(f"Claude CLI failed: {proc.stderr}")
            raise RuntimeError(f"Claude CLI failed: {proc.stderr}")
        return proc.stdout
